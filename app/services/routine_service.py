import logging

from app.core.exceptions import NotFoundError, ForbiddenError
from app.models.routine import Routine
from app.models.user import User
from app.repositories.routine_repository import RoutineRepository
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.routine import RoutineExerciseSeed, RoutineSeed, RoutineType
from app.services.placeholder_service import PlaceholderService

logger = logging.getLogger(__name__)


def routine_type(routine: Routine) -> RoutineType:
    return RoutineType.system if routine.is_system else RoutineType.custom


def can_view_routine(user: User, routine: Routine) -> bool:
    return routine.is_system or routine.user_id == user.id


class RoutineService:
    """Сборка «зерна» сессии по программе: порядок упражнений + подсказки."""

    def __init__(self, routines: RoutineRepository, workouts: WorkoutRepository):
        self.routines = routines
        self.workouts = workouts

    async def get_visible_routine(self, user: User, routine_id: int) -> Routine:
        routine = await self.routines.get_by_id(routine_id)
        if routine is None:
            raise NotFoundError(f"Программа {routine_id} не найдена")

        if not can_view_routine(user, routine):
            logger.warning(f"Пользователь {user.id} запросил чужую программу {routine_id}")
            raise ForbiddenError(f"Нет доступа к программе {routine_id}")

        return routine

    async def resolve_routine_seed(self, user: User, routine_id: int) -> RoutineSeed:
        """Только чтение: ни программы, ни тренировки не изменяются."""
        routine = await self.get_visible_routine(user, routine_id)

        exercises = await self.routines.get_exercises(routine.id)

        latest = await self.workouts.find_latest_for_routine(user.id, routine.id)
        placeholders = {}
        if latest is not None:
            records = await self.workouts.get_set_records(latest.id)
            placeholders = PlaceholderService.derive(records)

        logger.debug(
            f"Программа {routine.id}: упражнений {len(exercises)}, "
            f"подсказок {len(placeholders)}, последняя тренировка {latest.id if latest else None}"
        )

        return RoutineSeed(
            id=routine.id,
            name=routine.name,
            description=routine.description,
            type=routine_type(routine),
            last_workout=latest,
            exercises=[
                RoutineExerciseSeed(
                    id=ex.exercise_type_id,
                    name=ex.name,
                    order=ex.order,
                    placeholder=placeholders.get(ex.exercise_type_id),
                )
                for ex in exercises
            ],
        )
