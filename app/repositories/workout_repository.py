from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.routine import Routine
from app.models.workout import Workout, ExerciseLog, ExerciseSet
from app.schemas.history import WorkoutDetail, ExerciseSetRow, VolumeRow
from app.schemas.routine import LastWorkout, SetRecord
from app.schemas.workout import WorkoutCreate


class WorkoutRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_latest_for_routine(self, user_id: int, routine_id: int) -> Optional[LastWorkout]:
        """Самая свежая тренировка пользователя по данной программе."""
        result = await self.db.execute(
            select(Workout.id, Workout.date)
            .where(Workout.user_id == user_id, Workout.routine_id == routine_id)
            .order_by(Workout.date.desc(), Workout.id.desc())
            .limit(1)
        )
        row = result.first()
        if row is None:
            return None
        return LastWorkout(id=row.id, date=row.date)

    async def get_set_records(self, workout_id: int) -> List[SetRecord]:
        """Все подходы тренировки по всем упражнениям."""
        result = await self.db.execute(
            select(
                ExerciseLog.exercise_type_id,
                ExerciseSet.set_order,
                ExerciseSet.reps,
                ExerciseSet.weight,
                ExerciseSet.weight_unit,
                ExerciseSet.rest_sec,
            )
            .join(ExerciseSet, ExerciseSet.exercise_log_id == ExerciseLog.id)
            .where(ExerciseLog.workout_id == workout_id)
            .order_by(ExerciseLog.exercise_type_id, ExerciseSet.set_order)
        )
        return [SetRecord.model_validate(row, from_attributes=True) for row in result.all()]

    async def get_owned(self, workout_id: int, user_id: int) -> Optional[Workout]:
        result = await self.db.execute(
            select(Workout).where(Workout.id == workout_id, Workout.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create_workout(self, user_id: int, data: WorkoutCreate) -> Workout:
        workout = Workout(
            user_id=user_id,
            routine_id=data.routine_id,
            date=data.date,
            duration_min=data.duration_min,
            note=data.note or None,
        )
        self.db.add(workout)
        await self.db.flush()

        for exercise in data.exercises:
            log = ExerciseLog(workout_id=workout.id, exercise_type_id=exercise.exercise_type_id)
            self.db.add(log)
            await self.db.flush()

            self.db.add_all([
                ExerciseSet(
                    exercise_log_id=log.id,
                    set_order=index + 1,
                    reps=s.reps,
                    weight=s.weight,
                    weight_unit=s.weight_unit.value,
                    rest_sec=s.rest_sec,
                )
                for index, s in enumerate(exercise.sets)
            ])

        await self.db.commit()
        await self.db.refresh(workout)
        return workout

    async def delete(self, workout: Workout) -> None:
        await self.db.delete(workout)
        await self.db.commit()

    def _detail_query(self):
        return select(Workout).options(
            selectinload(Workout.routine),
            selectinload(Workout.exercise_logs).selectinload(ExerciseLog.sets),
            selectinload(Workout.exercise_logs).selectinload(ExerciseLog.exercise_type),
        )

    async def list_by_date(self, user_id: int, day: date) -> List[WorkoutDetail]:
        """Тренировки пользователя за календарный день (UTC) с упражнениями и подходами."""
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        result = await self.db.execute(
            self._detail_query()
            .where(
                Workout.user_id == user_id,
                Workout.date >= start,
                Workout.date < start + timedelta(days=1),
            )
            .order_by(Workout.date, Workout.id)
        )
        return [WorkoutDetail.from_workout(w) for w in result.scalars().all()]

    async def get_detail(self, workout_id: int, user_id: int) -> Optional[WorkoutDetail]:
        result = await self.db.execute(
            self._detail_query().where(Workout.id == workout_id, Workout.user_id == user_id)
        )
        workout = result.scalar_one_or_none()
        return WorkoutDetail.from_workout(workout) if workout else None

    async def get_exercise_history(self, user_id: int, exercise_type_id: int) -> List[ExerciseSetRow]:
        """Все подходы упражнения по датам, внутри тренировки по порядку."""
        result = await self.db.execute(
            select(
                Workout.id.label("workout_id"),
                Workout.date,
                ExerciseSet.set_order,
                ExerciseSet.reps,
                ExerciseSet.weight,
                ExerciseSet.weight_unit,
            )
            .join(ExerciseLog, ExerciseLog.workout_id == Workout.id)
            .join(ExerciseSet, ExerciseSet.exercise_log_id == ExerciseLog.id)
            .where(Workout.user_id == user_id, ExerciseLog.exercise_type_id == exercise_type_id)
            .order_by(Workout.date, Workout.id, ExerciseSet.set_order)
        )
        return [ExerciseSetRow.model_validate(row, from_attributes=True) for row in result.all()]

    async def list_volume_rows(self, user_id: int, start: datetime, end: datetime) -> List[VolumeRow]:
        """Подходы за полуинтервал [start, end) с названием программы тренировки."""
        result = await self.db.execute(
            select(
                Workout.id.label("workout_id"),
                Workout.date,
                Routine.name.label("routine_name"),
                ExerciseSet.reps,
                ExerciseSet.weight,
                ExerciseSet.weight_unit,
            )
            .join(ExerciseLog, ExerciseLog.workout_id == Workout.id)
            .join(ExerciseSet, ExerciseSet.exercise_log_id == ExerciseLog.id)
            .outerjoin(Routine, Routine.id == Workout.routine_id)
            .where(Workout.user_id == user_id, Workout.date >= start, Workout.date < end)
            .order_by(Workout.date, Workout.id)
        )
        return [VolumeRow.model_validate(row, from_attributes=True) for row in result.all()]
