"""
Модели состояния активной тренировочной сессии.

Состояние живёт только в памяти процесса: никакого сохранения в БД,
перезапуск теряет незавершённую сессию.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from app.core.config import settings
from app.schemas.workout import WeightUnit


class SessionType(str, Enum):
    custom = "custom"
    routine = "routine"


class Suggestion(BaseModel):
    """Подсказка из прошлой тренировки: все четыре поля заполнены всегда."""
    reps: int = 0
    weight: float = 0
    weight_unit: WeightUnit = WeightUnit(settings.DEFAULT_WEIGHT_UNIT)
    rest_sec: int = Field(default=settings.DEFAULT_REST_SEC, ge=0)


class SetEntry(BaseModel):
    reps: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    weight_unit: WeightUnit = WeightUnit.kg
    rest_sec: Optional[int] = Field(default=None, ge=0)
    actual_rest_sec: Optional[int] = Field(default=None, ge=0)
    completed: bool = False
    suggested: Optional[Suggestion] = None

    class Config:
        validate_assignment = True

    @property
    def is_loggable(self) -> bool:
        """Подход можно отметить выполненным: повторы и вес заданы."""
        return self.reps is not None and self.reps > 0 and self.weight is not None


class SessionExercise(BaseModel):
    exercise_type_id: int
    name: str = ""
    sets: List[SetEntry] = []


class TargetSet(BaseModel):
    exercise_type_id: int
    set_index: int


class RestTimerState(BaseModel):
    is_active: bool = False
    seconds: int = 0
    target_set: Optional[TargetSet] = None
    start_timestamp: Optional[float] = None


class SessionState(BaseModel):
    active: bool = False
    type: Optional[SessionType] = None
    routine_id: Optional[int] = None
    routine_name: str = ""
    started_at: Optional[float] = None
    is_paused: bool = False
    duration_sec: int = 0
    exercises: List[SessionExercise] = []
    is_modified: bool = False
    rest_timer: RestTimerState = Field(default_factory=RestTimerState)


class ExerciseToAdd(BaseModel):
    """Упражнение из каталога, добавляемое в сессию."""
    id: int
    name: str = ""


class InitialSet(BaseModel):
    reps: Optional[int] = None
    weight: Optional[float] = None
    weight_unit: Optional[WeightUnit] = None
    rest_sec: Optional[int] = None


class InitialExercise(BaseModel):
    """Упражнение для старта свободной сессии (например, повтор прошлой тренировки)."""
    exercise_type_id: int
    name: str = ""
    sets: List[InitialSet] = []
