"""
Скрипт для загрузки общего каталога упражнений и системных программ
"""
import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import AsyncSessionLocal
from app.core.initial_exercises import INITIAL_EXERCISES, SYSTEM_ROUTINES
from app.models.exercise_type import ExerciseType
from app.models.routine import Routine, RoutineExercise

logger = logging.getLogger(__name__)


async def seed_catalog(db: AsyncSession) -> int:
    """
    Загрузить каталог в базу. Уже существующие упражнения и системные
    программы пропускаются, поэтому скрипт можно запускать повторно.
    Возвращает число добавленных упражнений.
    """
    result = await db.execute(select(ExerciseType).where(ExerciseType.user_id.is_(None)))
    by_name = {e.name: e for e in result.scalars().all()}

    added = 0
    for data in INITIAL_EXERCISES:
        if data["name"] in by_name:
            continue
        exercise = ExerciseType(
            name=data["name"],
            muscle_group=data.get("muscle_group"),
            note=data.get("note"),
        )
        db.add(exercise)
        by_name[exercise.name] = exercise
        added += 1

    # Нужны id новых упражнений
    await db.flush()

    result = await db.execute(select(Routine.name).where(Routine.user_id.is_(None)))
    existing_routines = set(result.scalars().all())

    for data in SYSTEM_ROUTINES:
        if data["name"] in existing_routines:
            continue
        routine = Routine(user_id=None, name=data["name"], description=data.get("description"))
        routine.exercises = [
            RoutineExercise(exercise_type_id=by_name[name].id, exercise_order=index + 1)
            for index, name in enumerate(data["exercises"])
        ]
        db.add(routine)
        logger.info(f"Добавлена системная программа «{routine.name}»")

    await db.commit()
    logger.info(f"Каталог упражнений: добавлено {added}, всего {len(by_name)}")
    return added


async def main():
    async with AsyncSessionLocal() as db:
        await seed_catalog(db)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
