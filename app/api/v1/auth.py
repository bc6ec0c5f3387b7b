from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user, get_user_repository
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.auth_service import auth_service, UserAlreadyExistsError
from app.schemas.auth import UserLogin, UserRegister, AuthResponse, UserResponse

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=AuthResponse)
async def login(user: UserLogin, repo: UserRepository = Depends(get_user_repository)):
    """Аутентификация пользователя и выдача JWT токена"""
    authenticated_user = await auth_service.authenticate_user(repo, user)
    if not authenticated_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверное имя пользователя или пароль",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthResponse(
        access_token=auth_service.create_token_for_user(authenticated_user),
        token_type="bearer"
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserRegister, repo: UserRepository = Depends(get_user_repository)):
    """Регистрация нового пользователя и выдача JWT токена"""
    try:
        new_user = await auth_service.register_user(repo, user)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AuthResponse(
        access_token=auth_service.create_token_for_user(new_user),
        token_type="bearer"
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
