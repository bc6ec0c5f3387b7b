from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user, get_instructor_service
from app.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from app.core.rbac import require_instructor
from app.models.user import User
from app.schemas.instructor import LinkAccept, LinkedUser, LinkResponse, LinkToken, RoleResponse
from app.services.instructor_service import InstructorService

router = APIRouter(tags=["instructor"])


@router.put("/become", response_model=RoleResponse)
async def become_instructor(
    current_user: User = Depends(get_current_user),
    service: InstructorService = Depends(get_instructor_service),
):
    """Стать инструктором"""
    try:
        user = await service.become_instructor(current_user)
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return RoleResponse(message="Роль обновлена", role=user.role)


@router.post("/link/generate", response_model=LinkToken)
async def generate_link(
    instructor: User = Depends(require_instructor),
    service: InstructorService = Depends(get_instructor_service),
):
    """Выпустить приглашение для подопечного"""
    return service.create_link_token(instructor)


@router.post("/link/accept", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
async def accept_link(
    data: LinkAccept,
    current_user: User = Depends(get_current_user),
    service: InstructorService = Depends(get_instructor_service),
):
    """Принять приглашение инструктора"""
    try:
        return await service.accept_link(current_user, data.token)
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.delete("/link/{link_id}")
async def delete_link(
    link_id: int,
    current_user: User = Depends(get_current_user),
    service: InstructorService = Depends(get_instructor_service),
):
    """Разорвать связь с инструктором или подопечным"""
    try:
        await service.remove_link(current_user, link_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return {"message": "Связь удалена"}


@router.get("/trainees", response_model=List[LinkedUser])
async def list_trainees(
    current_user: User = Depends(get_current_user),
    service: InstructorService = Depends(get_instructor_service),
):
    """Подопечные инструктора с действующей связью"""
    try:
        return await service.trainees(current_user)
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)


@router.get("/instructors", response_model=List[LinkedUser])
async def list_instructors(
    current_user: User = Depends(get_current_user),
    service: InstructorService = Depends(get_instructor_service),
):
    """Инструкторы, которым открыт доступ к данным"""
    return await service.instructors(current_user)
