from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from app.core.dependencies import get_current_user, get_instructor_service
from app.core.exceptions import ForbiddenError
from app.models.user import User, RoleEnum
from app.services.instructor_service import InstructorService


def require_role(*allowed_roles: RoleEnum):
    """Фабрика зависимостей для проверки роли пользователя."""
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Недостаточно прав для выполнения этого действия"
            )
        return current_user
    return role_checker


require_admin = require_role(RoleEnum.admin)
require_instructor = require_role(RoleEnum.instructor)


async def get_viewed_user_id(
        user_id: Optional[int] = Query(default=None, description="Подопечный; по умолчанию текущий пользователь"),
        current_user: User = Depends(get_current_user),
        access: InstructorService = Depends(get_instructor_service),
) -> int:
    """Id пользователя, чьи данные читает эндпоинт."""
    try:
        return await access.resolve_target(current_user, user_id)
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
