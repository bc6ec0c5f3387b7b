from datetime import datetime, timedelta, timezone
from typing import Optional
import bcrypt
from jose import jwt

from app.core.config import settings
from app.models.user import User, RoleEnum
from app.repositories.user_repository import UserRepository
from app.schemas.auth import UserLogin, UserRegister


class UserAlreadyExistsError(Exception):
    pass


class AuthService:
    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')  # Декодируем bytes в string для хранения в БД

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            return False

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def create_token_for_user(self, user: User) -> str:
        return self.create_access_token(data={"sub": str(user.id), "role": user.role.value})

    async def authenticate_user(self, repo: UserRepository, login_data: UserLogin) -> Optional[User]:
        user = await repo.get_by_username(login_data.username)
        if not user or not self.verify_password(login_data.password, user.password):
            return None
        return user

    async def register_user(self, repo: UserRepository, user_data: UserRegister) -> User:
        if await repo.get_by_username(user_data.username):
            raise UserAlreadyExistsError("Пользователь с таким именем уже существует")
        if user_data.email and await repo.get_by_email(user_data.email):
            raise UserAlreadyExistsError("Пользователь с таким email уже существует")

        new_user = User(
            username=user_data.username,
            email=user_data.email,
            password=self.hash_password(user_data.password),
            role=RoleEnum.user,
            created_at=datetime.now(timezone.utc)
        )
        return await repo.create_user(new_user)


# Создаем экземпляр сервиса для импорта
auth_service = AuthService()
