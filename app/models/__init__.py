from app.models.user import User, RoleEnum
from app.models.exercise_type import ExerciseType
from app.models.routine import Routine, RoutineExercise
from app.models.workout import Workout, ExerciseLog, ExerciseSet
from app.models.body_stat import BodyStat
from app.models.instructor_link import InstructorLink

__all__ = [
    "User", "RoleEnum",
    "ExerciseType",
    "Routine", "RoutineExercise",
    "Workout", "ExerciseLog", "ExerciseSet",
    "BodyStat",
    "InstructorLink",
]
