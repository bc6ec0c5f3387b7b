from pydantic import BaseModel, Field
from typing import Optional


class ExerciseTypeResponse(BaseModel):
    id: int
    name: str
    muscle_group: Optional[str] = None
    note: Optional[str] = None

    class Config:
        from_attributes = True


class ExerciseTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=60)
    muscle_group: Optional[str] = None
    note: Optional[str] = None
