import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from app.core.dependencies import get_current_user, get_routine_service, get_workout_repository
from app.core.exceptions import NotFoundError, ForbiddenError
from app.core.rbac import get_viewed_user_id
from app.models.user import User
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.history import WorkoutDetail
from app.schemas.workout import WorkoutCreate, WorkoutCreatedResponse
from app.services.routine_service import RoutineService

router = APIRouter(tags=["workouts"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=WorkoutCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    data: WorkoutCreate,
    current_user: User = Depends(get_current_user),
    repo: WorkoutRepository = Depends(get_workout_repository),
    routines: RoutineService = Depends(get_routine_service),
):
    """Сохранить завершённую сессию"""
    if data.routine_id is not None:
        try:
            await routines.get_visible_routine(current_user, data.routine_id)
        except (NotFoundError, ForbiddenError):
            raise HTTPException(status_code=404, detail="Программа не найдена")

    try:
        workout = await repo.create_workout(current_user.id, data)
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при сохранении тренировки: {e}")
        raise HTTPException(status_code=500, detail="Не удалось сохранить тренировку")

    return WorkoutCreatedResponse(message="Тренировка сохранена", workout_id=workout.id)


@router.get("/by-date", response_model=List[WorkoutDetail])
async def list_workouts_by_date(
    day: date = Query(alias="date"),
    user_id: int = Depends(get_viewed_user_id),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Тренировки за день с упражнениями и подходами"""
    return await repo.list_by_date(user_id, day)


@router.get("/{workout_id}", response_model=WorkoutDetail)
async def get_workout(
    workout_id: int,
    user_id: int = Depends(get_viewed_user_id),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Одна тренировка целиком, например для повтора в свободной сессии"""
    workout = await repo.get_detail(workout_id, user_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Тренировка не найдена или нет доступа")
    return workout


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Удалить свою тренировку"""
    workout = await repo.get_owned(workout_id, current_user.id)
    if not workout:
        raise HTTPException(status_code=404, detail="Тренировка не найдена или нет доступа")

    await repo.delete(workout)
    return {"message": "Тренировка удалена"}
