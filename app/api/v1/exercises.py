from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user, get_exercise_type_repository, get_workout_repository
from app.core.rbac import require_admin, get_viewed_user_id
from app.models.exercise_type import ExerciseType
from app.models.user import User
from app.repositories.exercise_type_repository import ExerciseTypeRepository
from app.repositories.workout_repository import WorkoutRepository
from app.schemas.exercise import ExerciseTypeCreate, ExerciseTypeResponse
from app.schemas.history import ExerciseHistory, ExerciseProgress
from app.services.progress_service import ProgressService

router = APIRouter(tags=["exercises"])


async def _create_exercise(repo: ExerciseTypeRepository, data: ExerciseTypeCreate, owner_id=None) -> ExerciseType:
    if await repo.name_exists(data.name):
        raise HTTPException(status_code=400, detail="Упражнение с таким названием уже существует")
    return await repo.create(ExerciseType(
        name=data.name,
        muscle_group=data.muscle_group,
        note=data.note,
        user_id=owner_id,
    ))


async def _visible_exercise(repo: ExerciseTypeRepository, exercise_type_id: int, user_id: int) -> ExerciseType:
    exercise = await repo.get_by_id(exercise_type_id)
    if exercise is None or exercise.user_id not in (None, user_id):
        raise HTTPException(status_code=404, detail="Упражнение не найдено")
    return exercise


@router.get("/", response_model=List[ExerciseTypeResponse])
async def list_exercises(
    current_user: User = Depends(get_current_user),
    repo: ExerciseTypeRepository = Depends(get_exercise_type_repository),
):
    """Каталог упражнений: общий плюс собственные упражнения пользователя"""
    return await repo.list_for_user(current_user.id)


@router.post("/", response_model=ExerciseTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_custom_exercise(
    data: ExerciseTypeCreate,
    current_user: User = Depends(get_current_user),
    repo: ExerciseTypeRepository = Depends(get_exercise_type_repository),
):
    """Добавить собственное упражнение пользователя"""
    return await _create_exercise(repo, data, owner_id=current_user.id)


@router.post("/catalog", response_model=ExerciseTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_catalog_exercise(
    data: ExerciseTypeCreate,
    admin: User = Depends(require_admin),
    repo: ExerciseTypeRepository = Depends(get_exercise_type_repository),
):
    """Добавить упражнение в общий каталог (только admin)"""
    return await _create_exercise(repo, data)


@router.get("/used", response_model=List[ExerciseTypeResponse])
async def list_used_exercises(
    user_id: int = Depends(get_viewed_user_id),
    repo: ExerciseTypeRepository = Depends(get_exercise_type_repository),
):
    """Упражнения, которые уже встречались в тренировках"""
    return await repo.list_used(user_id)


@router.get("/{exercise_type_id}/history", response_model=ExerciseHistory)
async def get_exercise_history(
    exercise_type_id: int,
    user_id: int = Depends(get_viewed_user_id),
    repo: ExerciseTypeRepository = Depends(get_exercise_type_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
):
    """Все подходы упражнения по датам"""
    exercise = await _visible_exercise(repo, exercise_type_id, user_id)
    logs = await workouts.get_exercise_history(user_id, exercise_type_id)
    return ExerciseHistory(exercise_type_id=exercise.id, name=exercise.name, logs=logs)


@router.get("/{exercise_type_id}/progress", response_model=ExerciseProgress)
async def get_exercise_progress(
    exercise_type_id: int,
    user_id: int = Depends(get_viewed_user_id),
    repo: ExerciseTypeRepository = Depends(get_exercise_type_repository),
    workouts: WorkoutRepository = Depends(get_workout_repository),
):
    """Суммарный объём упражнения по дням"""
    exercise = await _visible_exercise(repo, exercise_type_id, user_id)
    logs = await workouts.get_exercise_history(user_id, exercise_type_id)
    return ExerciseProgress(
        exercise_type_id=exercise.id,
        name=exercise.name,
        progress=ProgressService.daily_volume(logs),
    )
