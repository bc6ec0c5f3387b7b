from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.exercise_type import ExerciseType
from app.models.workout import Workout, ExerciseLog


class ExerciseTypeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: int) -> List[ExerciseType]:
        """Общий каталог плюс собственные упражнения пользователя."""
        result = await self.db.execute(
            select(ExerciseType)
            .where(or_(ExerciseType.user_id.is_(None), ExerciseType.user_id == user_id))
            .order_by(ExerciseType.name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, exercise_type_id: int) -> Optional[ExerciseType]:
        result = await self.db.execute(select(ExerciseType).where(ExerciseType.id == exercise_type_id))
        return result.scalar_one_or_none()

    async def name_exists(self, name: str) -> bool:
        result = await self.db.execute(select(ExerciseType.id).where(ExerciseType.name == name))
        return result.scalar_one_or_none() is not None

    async def create(self, exercise_type: ExerciseType) -> ExerciseType:
        self.db.add(exercise_type)
        await self.db.commit()
        await self.db.refresh(exercise_type)
        return exercise_type

    async def list_used(self, user_id: int) -> List[ExerciseType]:
        """Упражнения, которые встречаются в тренировках пользователя."""
        result = await self.db.execute(
            select(ExerciseType)
            .join(ExerciseLog, ExerciseLog.exercise_type_id == ExerciseType.id)
            .join(Workout, Workout.id == ExerciseLog.workout_id)
            .where(Workout.user_id == user_id)
            .distinct()
            .order_by(ExerciseType.name)
        )
        return list(result.scalars().all())
