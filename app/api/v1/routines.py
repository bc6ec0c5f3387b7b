import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from app.core.dependencies import get_current_user, get_routine_repository, get_routine_service
from app.core.exceptions import NotFoundError, ForbiddenError
from app.models.user import User
from app.repositories.routine_repository import RoutineRepository
from app.schemas.routine import RoutineCreate, RoutineListItem, RoutineSeed
from app.services.routine_service import RoutineService, routine_type

router = APIRouter(tags=["routines"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[RoutineListItem])
async def list_routines(
    current_user: User = Depends(get_current_user),
    repo: RoutineRepository = Depends(get_routine_repository),
):
    """Собственные и системные программы пользователя"""
    routines = await repo.list_for_user(current_user.id)
    return [
        RoutineListItem(
            id=r.id,
            name=r.name,
            description=r.description,
            created_at=r.created_at,
            type=routine_type(r),
        )
        for r in routines
    ]


@router.get("/{routine_id}", response_model=RoutineSeed)
async def get_routine(
    routine_id: int,
    current_user: User = Depends(get_current_user),
    service: RoutineService = Depends(get_routine_service),
):
    """Программа с упражнениями и подсказками из последней тренировки по ней"""
    try:
        return await service.resolve_routine_seed(current_user, routine_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_routine(
    data: RoutineCreate,
    current_user: User = Depends(get_current_user),
    repo: RoutineRepository = Depends(get_routine_repository),
):
    """Создать программу; порядок упражнений совпадает с порядком в запросе"""
    if await repo.name_exists(current_user.id, data.name):
        raise HTTPException(status_code=400, detail="Программа с таким названием уже существует")

    try:
        routine = await repo.create(
            user_id=current_user.id,
            name=data.name,
            description=data.description,
            exercise_type_ids=[e.exercise_type_id for e in data.exercises],
        )
    except SQLAlchemyError as e:
        logger.error(f"Ошибка при создании программы: {e}")
        raise HTTPException(status_code=500, detail="Ошибка сервера")

    logger.info(f"Пользователь {current_user.id} создал программу {routine.id} «{routine.name}»")
    return {"message": "Программа создана", "id": routine.id}


@router.delete("/{routine_id}")
async def delete_routine(
    routine_id: int,
    current_user: User = Depends(get_current_user),
    repo: RoutineRepository = Depends(get_routine_repository),
):
    """Удалить свою программу; тренировки по ней остаются в истории"""
    routine = await repo.get_by_id(routine_id)
    # Системные программы удалить нельзя
    if not routine or routine.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Программа не найдена или нет доступа")

    await repo.delete(routine)
    logger.info(f"Пользователь {current_user.id} удалил программу {routine_id}")
    return {"message": "Программа удалена"}
