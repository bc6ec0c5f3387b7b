"""
Связи инструктор → подопечный.

Инструктор выпускает подписанный токен-приглашение, подопечный принимает его,
после чего инструктор до expires_at видит тренировки, замеры и графики подопечного.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from jose import JWTError, jwt

from app.core.config import settings
from app.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from app.models.instructor_link import InstructorLink
from app.models.user import RoleEnum, User
from app.repositories.instructor_link_repository import InstructorLinkRepository
from app.repositories.user_repository import UserRepository
from app.schemas.instructor import LinkedUser, LinkToken

logger = logging.getLogger(__name__)

LINK_TOKEN_TYPE = "instructor_link"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InstructorService:
    def __init__(
            self,
            links: InstructorLinkRepository,
            users: UserRepository,
            now: Callable[[], datetime] = utc_now,
    ):
        self.links = links
        self.users = users
        self.now = now

    async def become_instructor(self, user: User) -> User:
        if user.role == RoleEnum.admin:
            raise InvalidStateError("Администратор не может сменить роль")
        if user.role == RoleEnum.instructor:
            return user
        logger.info(f"Пользователь {user.id} стал инструктором")
        return await self.users.set_role(user, RoleEnum.instructor)

    def create_link_token(self, instructor: User) -> LinkToken:
        if instructor.role != RoleEnum.instructor:
            raise ForbiddenError("Приглашения выпускает только инструктор")
        expires_at = self.now() + timedelta(hours=settings.INSTRUCTOR_LINK_TOKEN_EXPIRE_HOURS)
        token = jwt.encode(
            {"sub": str(instructor.id), "type": LINK_TOKEN_TYPE, "exp": expires_at},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        return LinkToken(token=token, expires_at=expires_at)

    async def accept_link(self, user: User, token: str) -> InstructorLink:
        """Принять приглашение; повторное принятие продлевает существующую связь."""
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError as e:
            raise InvalidStateError("Недействительное приглашение") from e
        if payload.get("type") != LINK_TOKEN_TYPE or payload.get("sub") is None:
            raise InvalidStateError("Недействительное приглашение")

        instructor_id = int(payload["sub"])
        if instructor_id == user.id:
            raise InvalidStateError("Нельзя принять собственное приглашение")

        instructor = await self.users.get_by_id(instructor_id)
        if instructor is None or instructor.role != RoleEnum.instructor:
            raise NotFoundError("Инструктор не найден")

        expires_at = self.now() + timedelta(days=settings.INSTRUCTOR_LINK_DAYS)
        existing = await self.links.get_by_pair(instructor_id, user.id)
        if existing is not None:
            return await self.links.extend(existing, expires_at)

        logger.info(f"Связь инструктор {instructor_id} → пользователь {user.id} создана")
        return await self.links.create(instructor_id, user.id, expires_at)

    async def remove_link(self, user: User, link_id: int) -> None:
        """Разорвать связь может любая из сторон."""
        link = await self.links.get_by_id(link_id)
        if link is None or user.id not in (link.instructor_id, link.user_id):
            raise NotFoundError("Связь не найдена")
        await self.links.delete(link)

    async def trainees(self, instructor: User) -> List[LinkedUser]:
        if instructor.role != RoleEnum.instructor:
            raise ForbiddenError("Список подопечных доступен только инструктору")
        return await self.links.list_trainees(instructor.id, self.now())

    async def instructors(self, user: User) -> List[LinkedUser]:
        return await self.links.list_instructors(user.id, self.now())

    async def can_view(self, viewer: User, user_id: int) -> bool:
        if viewer.id == user_id:
            return True
        if viewer.role != RoleEnum.instructor:
            return False
        return await self.links.get_active(viewer.id, user_id, self.now()) is not None

    async def resolve_target(self, viewer: User, user_id: Optional[int]) -> int:
        """Чьи данные читать: свои по умолчанию, чужие только по действующей связи."""
        if user_id is None:
            return viewer.id
        if not await self.can_view(viewer, user_id):
            raise ForbiddenError("Нет доступа к данным этого пользователя")
        return user_id
