import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError

from app.core.dependencies import get_current_user, get_body_stat_repository
from app.core.rbac import get_viewed_user_id
from app.models.user import User
from app.repositories.body_stat_repository import BodyStatRepository
from app.schemas.body_stat import BodyStatCreate, BodyStatResponse, BodyStatMonthlyAverage
from app.services.progress_service import ProgressService, month_bounds, year_bounds

router = APIRouter(tags=["body-stats"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=BodyStatResponse, status_code=status.HTTP_201_CREATED)
async def create_body_stat(
    data: BodyStatCreate,
    current_user: User = Depends(get_current_user),
    repo: BodyStatRepository = Depends(get_body_stat_repository),
):
    """Записать замеры тела за день (одна запись на дату)"""
    if await repo.exists_for_date(current_user.id, data.date):
        raise HTTPException(status_code=409, detail="Замеры за эту дату уже записаны")
    try:
        return await repo.create(current_user.id, data)
    except IntegrityError as e:
        logger.warning(f"Повторные замеры за {data.date}: {e}")
        raise HTTPException(status_code=409, detail="Замеры за эту дату уже записаны")


@router.get("/monthly", response_model=List[BodyStatResponse])
async def list_monthly_body_stats(
    year: int = Query(ge=2000, le=2100),
    month: int = Query(ge=1, le=12),
    user_id: int = Depends(get_viewed_user_id),
    repo: BodyStatRepository = Depends(get_body_stat_repository),
):
    """Замеры за месяц по дням"""
    start, end = month_bounds(year, month)
    return await repo.list_between(user_id, start.date(), end.date())


@router.get("/yearly", response_model=List[BodyStatMonthlyAverage])
async def list_yearly_body_stats(
    year: int = Query(ge=2000, le=2100),
    user_id: int = Depends(get_viewed_user_id),
    repo: BodyStatRepository = Depends(get_body_stat_repository),
):
    """Средние замеры по месяцам года"""
    start, end = year_bounds(year)
    stats = await repo.list_between(user_id, start.date(), end.date())
    return ProgressService.body_stat_averages(stats)
