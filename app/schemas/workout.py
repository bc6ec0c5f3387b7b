from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum


class WeightUnit(str, Enum):
    kg = "kg"
    lb = "lb"


class WorkoutSetCreate(BaseModel):
    reps: int = Field(gt=0)
    weight: float = Field(ge=0)
    weight_unit: WeightUnit = WeightUnit.kg
    rest_sec: Optional[int] = Field(default=None, ge=0)


class WorkoutExerciseCreate(BaseModel):
    exercise_type_id: int
    sets: List[WorkoutSetCreate] = Field(min_length=1)


class WorkoutCreate(BaseModel):
    """Payload сохранения завершённой сессии."""
    date: datetime
    duration_min: int = Field(ge=1)
    note: str = ""
    exercises: List[WorkoutExerciseCreate]
    routine_id: Optional[int] = None

    @field_validator("date")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        # Время без зоны считается UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class WorkoutCreatedResponse(BaseModel):
    message: str
    workout_id: int
