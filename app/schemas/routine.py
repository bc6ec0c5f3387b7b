from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

from app.schemas.workout import WeightUnit


class RoutineType(str, Enum):
    system = "system"
    custom = "custom"


class SetRecord(BaseModel):
    """Один записанный подход прошлой тренировки (вход для расчёта подсказок)."""
    exercise_type_id: int
    set_order: int = 1
    reps: Optional[int] = None
    weight: Optional[float] = None
    weight_unit: Optional[str] = None
    rest_sec: Optional[int] = None

    class Config:
        from_attributes = True


class Placeholder(BaseModel):
    """Сводка по упражнению: число подходов и лучший по объёму подход."""
    set_count: int = Field(ge=0)
    reps: Optional[int] = None
    weight: Optional[float] = None
    weight_unit: WeightUnit = WeightUnit.kg
    rest_sec: Optional[int] = None


class RoutineExerciseRef(BaseModel):
    exercise_type_id: int
    name: str
    order: int


class RoutineExerciseSeed(BaseModel):
    id: int
    name: str
    order: int
    placeholder: Optional[Placeholder] = None


class LastWorkout(BaseModel):
    id: int
    date: datetime


class RoutineSeed(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    type: RoutineType
    last_workout: Optional[LastWorkout] = None
    exercises: List[RoutineExerciseSeed] = []


class RoutineListItem(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    type: RoutineType


class RoutineExerciseInput(BaseModel):
    exercise_type_id: int


class RoutineCreate(BaseModel):
    name: str = Field(min_length=1, max_length=30)
    description: Optional[str] = None
    exercises: List[RoutineExerciseInput] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Название программы не может быть пустым")
        return value
