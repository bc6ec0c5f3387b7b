from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date

MEASUREMENTS = ("weight_kg", "waist_cm", "hips_cm", "breast_cm", "body_fat_percentage")


class BodyStatCreate(BaseModel):
    date: date
    weight_kg: Optional[float] = Field(default=None, gt=0)
    waist_cm: Optional[float] = Field(default=None, gt=0)
    hips_cm: Optional[float] = Field(default=None, gt=0)
    breast_cm: Optional[float] = Field(default=None, gt=0)
    body_fat_percentage: Optional[float] = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def has_measurement(self) -> "BodyStatCreate":
        if all(getattr(self, name) is None for name in MEASUREMENTS):
            raise ValueError("Нужно указать хотя бы один замер")
        return self


class BodyStatResponse(BaseModel):
    id: int
    date: date
    weight_kg: Optional[float] = None
    waist_cm: Optional[float] = None
    hips_cm: Optional[float] = None
    breast_cm: Optional[float] = None
    body_fat_percentage: Optional[float] = None

    class Config:
        from_attributes = True


class BodyStatMonthlyAverage(BaseModel):
    """Средние замеры за месяц; None там, где данных нет."""
    month: str
    weight_kg: Optional[float] = None
    waist_cm: Optional[float] = None
    hips_cm: Optional[float] = None
    breast_cm: Optional[float] = None
    body_fat_percentage: Optional[float] = None
