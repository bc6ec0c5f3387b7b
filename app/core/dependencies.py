from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.config import settings
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.repositories.routine_repository import RoutineRepository
from app.repositories.workout_repository import WorkoutRepository
from app.repositories.exercise_type_repository import ExerciseTypeRepository
from app.repositories.body_stat_repository import BodyStatRepository
from app.repositories.instructor_link_repository import InstructorLinkRepository
from app.services.instructor_service import InstructorService
from app.services.routine_service import RoutineService


security = HTTPBearer()


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Фабрика репозитория, инжектируется в эндпоинты через Depends."""
    return UserRepository(db)


def get_routine_repository(db: AsyncSession = Depends(get_db)) -> RoutineRepository:
    return RoutineRepository(db)


def get_workout_repository(db: AsyncSession = Depends(get_db)) -> WorkoutRepository:
    return WorkoutRepository(db)


def get_exercise_type_repository(db: AsyncSession = Depends(get_db)) -> ExerciseTypeRepository:
    return ExerciseTypeRepository(db)


def get_body_stat_repository(db: AsyncSession = Depends(get_db)) -> BodyStatRepository:
    return BodyStatRepository(db)


def get_instructor_link_repository(db: AsyncSession = Depends(get_db)) -> InstructorLinkRepository:
    return InstructorLinkRepository(db)


def get_routine_service(
        routines: RoutineRepository = Depends(get_routine_repository),
        workouts: WorkoutRepository = Depends(get_workout_repository),
) -> RoutineService:
    return RoutineService(routines, workouts)


def get_instructor_service(
        links: InstructorLinkRepository = Depends(get_instructor_link_repository),
        users: UserRepository = Depends(get_user_repository),
) -> InstructorService:
    return InstructorService(links, users)


async def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        repo: UserRepository = Depends(get_user_repository),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Невалидный токен доступа",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = await repo.get_by_id(int(user_id))
    if user is None:
        raise credentials_exception

    return user
