"""
Модульные тесты для InstructorService.

Покрываемые сценарии:
- стать инструктором: user → instructor, admin роль не меняет
- приглашение выпускает только инструктор
- принятие приглашения создаёт связь или продлевает существующую
- отклоняются: чужая подпись, просроченное приглашение, access-токен, своё приглашение
- доступ к чужим данным: только инструктор с действующей связью
- разорвать связь может любая из сторон

Репозитории мокируются через AsyncMock.
"""

import pytest
from datetime import datetime, timedelta, timezone

from jose import jwt

from app.core.config import settings
from app.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from app.models.instructor_link import InstructorLink
from app.models.user import RoleEnum
from app.services.auth_service import auth_service
from app.services.instructor_service import InstructorService

pytestmark = pytest.mark.unit


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def service(mock_link_repo, mock_repo, now) -> InstructorService:
    return InstructorService(mock_link_repo, mock_repo, now=lambda: now)


def make_link(link_id=3, instructor_id=7, user_id=1, expires_at=None) -> InstructorLink:
    return InstructorLink(
        id=link_id,
        instructor_id=instructor_id,
        user_id=user_id,
        expires_at=expires_at or datetime(2030, 1, 1, tzinfo=timezone.utc),
    )


# ---------------------------------------------------------------------------
# Роль инструктора
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_become_instructor_updates_role(service, mock_repo, user_fixture):
    mock_repo.set_role.return_value = user_fixture

    await service.become_instructor(user_fixture)

    mock_repo.set_role.assert_awaited_once_with(user_fixture, RoleEnum.instructor)


@pytest.mark.asyncio
async def test_become_instructor_is_noop_for_instructor(service, mock_repo, instructor_fixture):
    assert await service.become_instructor(instructor_fixture) is instructor_fixture
    mock_repo.set_role.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_cannot_become_instructor(service, admin_fixture):
    with pytest.raises(InvalidStateError):
        await service.become_instructor(admin_fixture)


# ---------------------------------------------------------------------------
# Приглашения
# ---------------------------------------------------------------------------

def test_only_instructor_creates_link_token(service, user_fixture):
    with pytest.raises(ForbiddenError):
        service.create_link_token(user_fixture)


def test_link_token_carries_instructor_and_expiry(service, instructor_fixture, now):
    link_token = service.create_link_token(instructor_fixture)

    payload = jwt.decode(link_token.token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == str(instructor_fixture.id)
    assert payload["type"] == "instructor_link"
    assert link_token.expires_at == now + timedelta(hours=settings.INSTRUCTOR_LINK_TOKEN_EXPIRE_HOURS)


@pytest.mark.asyncio
async def test_accept_link_creates_link(service, mock_repo, mock_link_repo, user_fixture, instructor_fixture, now):
    mock_repo.get_by_id.return_value = instructor_fixture
    mock_link_repo.create.return_value = make_link()
    token = service.create_link_token(instructor_fixture).token

    link = await service.accept_link(user_fixture, token)

    assert link.id == 3
    mock_link_repo.create.assert_awaited_once_with(
        instructor_fixture.id, user_fixture.id, now + timedelta(days=settings.INSTRUCTOR_LINK_DAYS)
    )


@pytest.mark.asyncio
async def test_accept_link_again_extends_existing(service, mock_repo, mock_link_repo, user_fixture, instructor_fixture, now):
    existing = make_link()
    mock_repo.get_by_id.return_value = instructor_fixture
    mock_link_repo.get_by_pair.return_value = existing
    token = service.create_link_token(instructor_fixture).token

    await service.accept_link(user_fixture, token)

    mock_link_repo.extend.assert_awaited_once_with(
        existing, now + timedelta(days=settings.INSTRUCTOR_LINK_DAYS)
    )
    mock_link_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_accept_own_link_is_rejected(service, mock_link_repo, instructor_fixture):
    token = service.create_link_token(instructor_fixture).token

    with pytest.raises(InvalidStateError):
        await service.accept_link(instructor_fixture, token)
    mock_link_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_accept_access_token_is_rejected(service, user_fixture):
    token = auth_service.create_access_token(data={"sub": "7", "role": "instructor"})

    with pytest.raises(InvalidStateError):
        await service.accept_link(user_fixture, token)


@pytest.mark.asyncio
async def test_accept_garbage_token_is_rejected(service, user_fixture):
    with pytest.raises(InvalidStateError):
        await service.accept_link(user_fixture, "not-a-token")


@pytest.mark.asyncio
async def test_accept_expired_link_is_rejected(mock_link_repo, mock_repo, user_fixture, instructor_fixture):
    past = datetime.now(timezone.utc) - timedelta(days=10)
    stale = InstructorService(mock_link_repo, mock_repo, now=lambda: past)
    token = stale.create_link_token(instructor_fixture).token

    with pytest.raises(InvalidStateError):
        await stale.accept_link(user_fixture, token)


@pytest.mark.asyncio
async def test_accept_link_of_former_instructor_is_not_found(
    service, mock_repo, user_fixture, instructor_fixture, other_user_fixture
):
    token = service.create_link_token(instructor_fixture).token
    # к моменту принятия инструктор сменил роль
    mock_repo.get_by_id.return_value = other_user_fixture

    with pytest.raises(NotFoundError):
        await service.accept_link(user_fixture, token)


# ---------------------------------------------------------------------------
# Доступ к данным подопечного
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_resolve_target_defaults_to_self(service, mock_link_repo, user_fixture):
    assert await service.resolve_target(user_fixture, None) == user_fixture.id
    assert await service.resolve_target(user_fixture, user_fixture.id) == user_fixture.id
    mock_link_repo.get_active.assert_not_awaited()


@pytest.mark.asyncio
async def test_plain_user_cannot_view_others(service, user_fixture, other_user_fixture):
    with pytest.raises(ForbiddenError):
        await service.resolve_target(user_fixture, other_user_fixture.id)


@pytest.mark.asyncio
async def test_instructor_without_active_link_is_forbidden(service, mock_link_repo, instructor_fixture, now):
    with pytest.raises(ForbiddenError):
        await service.resolve_target(instructor_fixture, 1)
    mock_link_repo.get_active.assert_awaited_once_with(instructor_fixture.id, 1, now)


@pytest.mark.asyncio
async def test_instructor_with_active_link_views_trainee(service, mock_link_repo, instructor_fixture):
    mock_link_repo.get_active.return_value = make_link()

    assert await service.resolve_target(instructor_fixture, 1) == 1


@pytest.mark.asyncio
async def test_trainees_require_instructor_role(service, user_fixture):
    with pytest.raises(ForbiddenError):
        await service.trainees(user_fixture)


# ---------------------------------------------------------------------------
# Разрыв связи
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_either_side_removes_link(service, mock_link_repo, user_fixture, instructor_fixture):
    link = make_link()
    mock_link_repo.get_by_id.return_value = link

    await service.remove_link(user_fixture, 3)
    await service.remove_link(instructor_fixture, 3)

    assert mock_link_repo.delete.await_count == 2


@pytest.mark.asyncio
async def test_outsider_cannot_remove_link(service, mock_link_repo, other_user_fixture):
    mock_link_repo.get_by_id.return_value = make_link()

    with pytest.raises(NotFoundError):
        await service.remove_link(other_user_fixture, 3)
    mock_link_repo.delete.assert_not_awaited()
