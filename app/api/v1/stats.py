from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_workout_repository
from app.core.rbac import get_viewed_user_id
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.history import CalendarMonth, MonthlyVolume, YearlyVolume
from app.services.progress_service import ProgressService, month_bounds, year_bounds

router = APIRouter(tags=["stats"])


@router.get("/monthly-volume", response_model=MonthlyVolume)
async def get_monthly_volume(
    year: int = Query(ge=2000, le=2100),
    month: int = Query(ge=1, le=12),
    user_id: int = Depends(get_viewed_user_id),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Объём по дням месяца (кг)"""
    rows = await repo.list_volume_rows(user_id, *month_bounds(year, month))
    return ProgressService.monthly_volume(rows)


@router.get("/yearly-volume", response_model=YearlyVolume)
async def get_yearly_volume(
    year: int = Query(ge=2000, le=2100),
    user_id: int = Depends(get_viewed_user_id),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Объём по месяцам года (кг)"""
    rows = await repo.list_volume_rows(user_id, *year_bounds(year))
    return ProgressService.yearly_volume(rows)


@router.get("/calendar", response_model=CalendarMonth)
async def get_calendar(
    year: int = Query(ge=2000, le=2100),
    month: int = Query(ge=1, le=12),
    user_id: int = Depends(get_viewed_user_id),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Календарь месяца: тренировки по дням с объёмом"""
    rows = await repo.list_volume_rows(user_id, *month_bounds(year, month))
    return ProgressService.calendar(rows, year, month)
