"""Модели чтения истории: тренировки по дате, история и прогресс упражнения, графики объёма."""
from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime, date


class SetView(BaseModel):
    set_order: int
    reps: int
    weight: float
    weight_unit: str
    rest_sec: Optional[int] = None

    class Config:
        from_attributes = True


class WorkoutExerciseView(BaseModel):
    exercise_type_id: int
    name: str
    muscle_group: Optional[str] = None
    sets: List[SetView] = []


class WorkoutDetail(BaseModel):
    """Сохранённая тренировка целиком; годится как заготовка для свободной сессии."""
    id: int
    date: datetime
    duration_min: Optional[int] = None
    note: Optional[str] = None
    routine_id: Optional[int] = None
    routine_name: Optional[str] = None
    exercises: List[WorkoutExerciseView] = []

    @classmethod
    def from_workout(cls, workout) -> "WorkoutDetail":
        logs = sorted(workout.exercise_logs, key=lambda log: log.id)
        return cls(
            id=workout.id,
            date=workout.date,
            duration_min=workout.duration_min,
            note=workout.note,
            routine_id=workout.routine_id,
            routine_name=workout.routine.name if workout.routine else None,
            exercises=[
                WorkoutExerciseView(
                    exercise_type_id=log.exercise_type_id,
                    name=log.exercise_type.name,
                    muscle_group=log.exercise_type.muscle_group,
                    sets=[SetView.model_validate(s) for s in log.sets],
                )
                for log in logs
            ],
        )


class ExerciseSetRow(BaseModel):
    """Подход упражнения в истории пользователя."""
    workout_id: int
    date: datetime
    set_order: int
    reps: int
    weight: float
    weight_unit: str = "kg"

    class Config:
        from_attributes = True


class ExerciseHistory(BaseModel):
    exercise_type_id: int
    name: str
    logs: List[ExerciseSetRow] = []


class ProgressPoint(BaseModel):
    date: date
    total_volume: float


class ExerciseProgress(BaseModel):
    exercise_type_id: int
    name: str
    progress: List[ProgressPoint] = []


class VolumeRow(BaseModel):
    """Подход с датой и программой тренировки, вход для графиков."""
    workout_id: int
    date: datetime
    routine_name: Optional[str] = None
    reps: int
    weight: float
    weight_unit: str = "kg"

    class Config:
        from_attributes = True


class MonthlyVolume(BaseModel):
    dates: List[date] = []
    volumes: List[float] = []


class YearlyVolume(BaseModel):
    months: List[str] = []
    volumes: List[float] = []


class CalendarWorkout(BaseModel):
    id: int
    name: str
    volume: float


class CalendarMonth(BaseModel):
    year: int
    month: int
    days: Dict[int, List[CalendarWorkout]] = {}
