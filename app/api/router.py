from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.exercises import router as exercises_router
from app.api.v1.routines import router as routines_router
from app.api.v1.workouts import router as workouts_router
from app.api.v1.body_stats import router as body_stats_router
from app.api.v1.stats import router as stats_router
from app.api.v1.instructor import router as instructor_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(exercises_router, prefix="/exercises", tags=["exercises"])
api_router.include_router(routines_router, prefix="/routines", tags=["routines"])
api_router.include_router(workouts_router, prefix="/workouts", tags=["workouts"])
api_router.include_router(body_stats_router, prefix="/body-stats", tags=["body-stats"])
api_router.include_router(stats_router, prefix="/stats", tags=["stats"])
api_router.include_router(instructor_router, prefix="/instructor", tags=["instructor"])
