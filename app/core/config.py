from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://lift_user:lift_password@db:5432/lift_db"
    SECRET_KEY: str = "SECRET_KEY_FOR_LIFTLOG"
    # При продакшн/обычной разработке лучше не пересоздавать БД на каждом старте
    RESET_DATABASE: bool = False
    SQL_ECHO: bool = False
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    # Параметры тренировочной сессии
    DEFAULT_REST_SEC: int = 60
    DEFAULT_WEIGHT_UNIT: str = "kg"
    SESSION_TICK_SECONDS: float = 1.0
    REST_TICK_SECONDS: float = 1.0

    # Статистика и инструкторы
    LB_TO_KG: float = 0.45359237
    INSTRUCTOR_LINK_TOKEN_EXPIRE_HOURS: int = 48
    INSTRUCTOR_LINK_DAYS: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

settings = Settings()
