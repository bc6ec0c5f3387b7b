from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.instructor_link import InstructorLink
from app.models.user import User
from app.schemas.instructor import LinkedUser


class InstructorLinkRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, link_id: int) -> Optional[InstructorLink]:
        result = await self.db.execute(select(InstructorLink).where(InstructorLink.id == link_id))
        return result.scalar_one_or_none()

    async def get_by_pair(self, instructor_id: int, user_id: int) -> Optional[InstructorLink]:
        result = await self.db.execute(
            select(InstructorLink).where(
                InstructorLink.instructor_id == instructor_id,
                InstructorLink.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_active(self, instructor_id: int, user_id: int, now: datetime) -> Optional[InstructorLink]:
        result = await self.db.execute(
            select(InstructorLink).where(
                InstructorLink.instructor_id == instructor_id,
                InstructorLink.user_id == user_id,
                InstructorLink.expires_at > now,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, instructor_id: int, user_id: int, expires_at: datetime) -> InstructorLink:
        link = InstructorLink(instructor_id=instructor_id, user_id=user_id, expires_at=expires_at)
        self.db.add(link)
        await self.db.commit()
        await self.db.refresh(link)
        return link

    async def extend(self, link: InstructorLink, expires_at: datetime) -> InstructorLink:
        link.expires_at = expires_at
        await self.db.commit()
        await self.db.refresh(link)
        return link

    async def list_trainees(self, instructor_id: int, now: datetime) -> List[LinkedUser]:
        """Подопечные с действующей связью."""
        result = await self.db.execute(
            select(InstructorLink.id, User.id.label("user_id"), User.username, InstructorLink.expires_at)
            .join(User, User.id == InstructorLink.user_id)
            .where(InstructorLink.instructor_id == instructor_id, InstructorLink.expires_at > now)
            .order_by(User.username)
        )
        return [
            LinkedUser(link_id=row.id, user_id=row.user_id, username=row.username, expires_at=row.expires_at)
            for row in result.all()
        ]

    async def list_instructors(self, user_id: int, now: datetime) -> List[LinkedUser]:
        result = await self.db.execute(
            select(InstructorLink.id, User.id.label("user_id"), User.username, InstructorLink.expires_at)
            .join(User, User.id == InstructorLink.instructor_id)
            .where(InstructorLink.user_id == user_id, InstructorLink.expires_at > now)
            .order_by(User.username)
        )
        return [
            LinkedUser(link_id=row.id, user_id=row.user_id, username=row.username, expires_at=row.expires_at)
            for row in result.all()
        ]

    async def delete(self, link: InstructorLink) -> None:
        await self.db.delete(link)
        await self.db.commit()
