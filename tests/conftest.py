"""
Общие фикстуры для всех тестов LiftLog backend.

Стратегия:
- Тестовое FastAPI-приложение создаётся без lifespan-событий (нет подключения к БД).
- Репозитории заменяются на AsyncMock (mock_repo, mock_routine_repo, ...).
- get_current_user заменяется на лямбду с нужным пользователем.
- JWT-токены создаются через auth_service.create_access_token() для проверки middleware.
- Для движка сессии время задаётся вручную: ManualClock + ManualScheduler,
  тики прогоняются явно через scheduler.advance().
"""

import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable, List, Optional

from app.api.router import api_router
from app.models.user import User, RoleEnum
from app.services.auth_service import auth_service
from app.services.scheduler import IntervalHandle, IntervalScheduler
from app.services.workout_session import WorkoutSession
from app.repositories.user_repository import UserRepository
from app.repositories.routine_repository import RoutineRepository
from app.repositories.workout_repository import WorkoutRepository
from app.repositories.exercise_type_repository import ExerciseTypeRepository
from app.repositories.body_stat_repository import BodyStatRepository
from app.repositories.instructor_link_repository import InstructorLinkRepository
from app.core.dependencies import (
    get_current_user,
    get_user_repository,
    get_routine_repository,
    get_workout_repository,
    get_exercise_type_repository,
    get_body_stat_repository,
    get_instructor_link_repository,
)


# ---------------------------------------------------------------------------
# Вспомогательные функции
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Тестовое FastAPI-приложение без lifespan-событий."""
    test_app = FastAPI(title="LiftLog Test App")
    test_app.include_router(api_router, prefix="/api/v1")
    return test_app


def make_auth_headers(user: User) -> dict:
    """Создать заголовки авторизации с валидным JWT для указанного пользователя."""
    access_token = auth_service.create_access_token(
        data={"sub": str(user.id), "role": user.role.value}
    )
    return {"Authorization": f"Bearer {access_token}"}


class ManualClock:
    """Настенные часы, которые двигаются только руками."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualHandle(IntervalHandle):
    def __init__(self, interval: float, callback: Callable[[], None]):
        super().__init__()
        self.interval = interval
        self.callback = callback
        self.fired = 0


class ManualScheduler(IntervalScheduler):
    """Планировщик для тестов: каждый шаг advance() равен одной секунде."""

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self.handles: List[ManualHandle] = []

    def call_every(self, interval: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(interval, callback)
        self.handles.append(handle)
        return handle

    @property
    def active_handles(self) -> List[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            self.clock.advance(1)
            for handle in list(self.active_handles):
                # callback соседа мог отменить этот handle
                if handle.cancelled:
                    continue
                handle.fired += 1
                handle.callback()


# ---------------------------------------------------------------------------
# Фикстуры пользователей
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    """Обычный пользователь с ролью 'user'."""
    return User(
        id=1,
        username="tester",
        email="test@example.com",
        password=auth_service.hash_password("password123"),
        role=RoleEnum.user,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def other_user_fixture() -> User:
    """Второй пользователь, владелец «чужих» программ."""
    return User(
        id=5,
        username="stranger",
        email="stranger@example.com",
        password=auth_service.hash_password("stranger123"),
        role=RoleEnum.user,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def admin_fixture() -> User:
    """Администратор с ролью 'admin'."""
    return User(
        id=2,
        username="admin",
        email="admin@example.com",
        password=auth_service.hash_password("admin123"),
        role=RoleEnum.admin,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def instructor_fixture() -> User:
    """Инструктор с ролью 'instructor'."""
    return User(
        id=7,
        username="coach",
        email="coach@example.com",
        password=auth_service.hash_password("coach123"),
        role=RoleEnum.instructor,
        created_at=datetime.now(timezone.utc),
    )


# ---------------------------------------------------------------------------
# Фикстуры для зависимостей
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_repo() -> AsyncMock:
    """Мокированный UserRepository для auth-эндпоинтов."""
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def mock_routine_repo() -> AsyncMock:
    repo = AsyncMock(spec=RoutineRepository)
    repo.get_by_id.return_value = None
    repo.get_exercises.return_value = []
    repo.list_for_user.return_value = []
    repo.name_exists.return_value = False
    return repo


@pytest.fixture
def mock_workout_repo() -> AsyncMock:
    repo = AsyncMock(spec=WorkoutRepository)
    repo.find_latest_for_routine.return_value = None
    repo.get_set_records.return_value = []
    repo.get_owned.return_value = None
    repo.get_detail.return_value = None
    repo.list_by_date.return_value = []
    repo.get_exercise_history.return_value = []
    repo.list_volume_rows.return_value = []
    return repo


@pytest.fixture
def mock_exercise_repo() -> AsyncMock:
    repo = AsyncMock(spec=ExerciseTypeRepository)
    repo.list_for_user.return_value = []
    repo.list_used.return_value = []
    repo.get_by_id.return_value = None
    repo.name_exists.return_value = False
    return repo


@pytest.fixture
def mock_body_stat_repo() -> AsyncMock:
    repo = AsyncMock(spec=BodyStatRepository)
    repo.exists_for_date.return_value = False
    repo.list_between.return_value = []
    return repo


@pytest.fixture
def mock_link_repo() -> AsyncMock:
    repo = AsyncMock(spec=InstructorLinkRepository)
    repo.get_by_id.return_value = None
    repo.get_by_pair.return_value = None
    repo.get_active.return_value = None
    repo.list_trainees.return_value = []
    repo.list_instructors.return_value = []
    return repo


# ---------------------------------------------------------------------------
# Движок сессии
# ---------------------------------------------------------------------------

@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def manual_scheduler(manual_clock) -> ManualScheduler:
    return ManualScheduler(manual_clock)


@pytest.fixture
def session(manual_clock, manual_scheduler) -> WorkoutSession:
    """Сессия с ручными часами и планировщиком."""
    return WorkoutSession(scheduler=manual_scheduler, clock=manual_clock, default_rest_sec=60)


# ---------------------------------------------------------------------------
# HTTP-клиенты
# ---------------------------------------------------------------------------

@pytest.fixture
def repository_overrides(
    mock_repo, mock_routine_repo, mock_workout_repo, mock_exercise_repo, mock_body_stat_repo, mock_link_repo
) -> dict:
    """Все фабрики репозиториев, подменённые на моки."""
    return {
        get_user_repository: lambda: mock_repo,
        get_routine_repository: lambda: mock_routine_repo,
        get_workout_repository: lambda: mock_workout_repo,
        get_exercise_type_repository: lambda: mock_exercise_repo,
        get_body_stat_repository: lambda: mock_body_stat_repo,
        get_instructor_link_repository: lambda: mock_link_repo,
    }


def _client_for(repository_overrides: dict, current_user: Optional[User] = None) -> AsyncClient:
    app = create_test_app()
    app.dependency_overrides.update(repository_overrides)
    if current_user is not None:
        app.dependency_overrides[get_current_user] = lambda: current_user
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(repository_overrides) -> AsyncGenerator[AsyncClient, None]:
    """
    Базовый клиент без подмены пользователя.
    Используется для auth-эндпоинтов и проверки отказа без токена.
    """
    async with _client_for(repository_overrides) as ac:
        yield ac


@pytest.fixture
async def user_client(user_fixture, repository_overrides) -> AsyncGenerator[AsyncClient, None]:
    """Клиент, аутентифицированный как обычный пользователь."""
    async with _client_for(repository_overrides, user_fixture) as ac:
        yield ac


@pytest.fixture
async def admin_client(admin_fixture, repository_overrides) -> AsyncGenerator[AsyncClient, None]:
    """Клиент, аутентифицированный как администратор."""
    async with _client_for(repository_overrides, admin_fixture) as ac:
        yield ac


@pytest.fixture
async def instructor_client(instructor_fixture, repository_overrides) -> AsyncGenerator[AsyncClient, None]:
    """Клиент, аутентифицированный как инструктор."""
    async with _client_for(repository_overrides, instructor_fixture) as ac:
        yield ac
