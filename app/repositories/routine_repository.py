from typing import List, Optional, Sequence

from sqlalchemy import select, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.exercise_type import ExerciseType
from app.models.routine import Routine, RoutineExercise
from app.models.workout import Workout
from app.schemas.routine import RoutineExerciseRef


class RoutineRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, routine_id: int) -> Optional[Routine]:
        result = await self.db.execute(select(Routine).where(Routine.id == routine_id))
        return result.scalar_one_or_none()

    async def get_exercises(self, routine_id: int) -> List[RoutineExerciseRef]:
        """Упражнения программы в порядке, заданном программой."""
        result = await self.db.execute(
            select(
                RoutineExercise.exercise_type_id,
                RoutineExercise.exercise_order,
                ExerciseType.name,
            )
            .join(ExerciseType, ExerciseType.id == RoutineExercise.exercise_type_id)
            .where(RoutineExercise.routine_id == routine_id)
            .order_by(RoutineExercise.exercise_order)
        )
        return [
            RoutineExerciseRef(
                exercise_type_id=row.exercise_type_id,
                name=row.name,
                order=row.exercise_order,
            )
            for row in result.all()
        ]

    async def list_for_user(self, user_id: int) -> List[Routine]:
        """Собственные программы пользователя плюс системные."""
        result = await self.db.execute(
            select(Routine)
            .where(or_(Routine.user_id == user_id, Routine.user_id.is_(None)))
            .order_by(Routine.id)
        )
        return list(result.scalars().all())

    async def name_exists(self, user_id: int, name: str) -> bool:
        result = await self.db.execute(
            select(Routine.id).where(Routine.user_id == user_id, Routine.name == name)
        )
        return result.scalar_one_or_none() is not None

    async def create(
        self,
        user_id: int,
        name: str,
        description: Optional[str],
        exercise_type_ids: Sequence[int],
    ) -> Routine:
        routine = Routine(user_id=user_id, name=name, description=description)
        self.db.add(routine)
        await self.db.flush()

        for index, exercise_type_id in enumerate(exercise_type_ids):
            self.db.add(RoutineExercise(
                routine_id=routine.id,
                exercise_type_id=exercise_type_id,
                exercise_order=index + 1,
            ))

        await self.db.commit()
        await self.db.refresh(routine)
        return routine

    async def delete(self, routine: Routine) -> None:
        # Тренировки остаются в истории, но отвязываются от программы
        await self.db.execute(
            update(Workout).where(Workout.routine_id == routine.id).values(routine_id=None)
        )
        await self.db.delete(routine)
        await self.db.commit()
