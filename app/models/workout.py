from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Float, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.core.base import Base

class Workout(Base):
    __tablename__ = "workouts"
    __table_args__ = (CheckConstraint("duration_min > 0", name="ck_workout_duration_positive"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    routine_id = Column(Integer, ForeignKey("routines.id", ondelete="SET NULL"), nullable=True, index=True)
    date = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    duration_min = Column(Integer, nullable=True)
    note = Column(String, nullable=True)

    user = relationship("User", back_populates="workouts")
    routine = relationship("Routine")
    exercise_logs = relationship("ExerciseLog", back_populates="workout", cascade="all, delete-orphan")

class ExerciseLog(Base):
    __tablename__ = "exercise_logs"
    __table_args__ = (UniqueConstraint("workout_id", "exercise_type_id", name="uq_log_workout_exercise"),)

    id = Column(Integer, primary_key=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_type_id = Column(Integer, ForeignKey("exercise_types.id", ondelete="RESTRICT"), nullable=False)

    workout = relationship("Workout", back_populates="exercise_logs")
    exercise_type = relationship("ExerciseType")
    sets = relationship(
        "ExerciseSet",
        back_populates="exercise_log",
        cascade="all, delete-orphan",
        order_by="ExerciseSet.set_order",
    )

class ExerciseSet(Base):
    __tablename__ = "exercise_sets"
    __table_args__ = (
        UniqueConstraint("exercise_log_id", "set_order", name="uq_set_log_order"),
        CheckConstraint("set_order > 0", name="ck_set_order_positive"),
        CheckConstraint("reps > 0", name="ck_set_reps_positive"),
        CheckConstraint("weight >= 0", name="ck_set_weight_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    exercise_log_id = Column(Integer, ForeignKey("exercise_logs.id", ondelete="CASCADE"), nullable=False, index=True)
    set_order = Column(Integer, nullable=False)
    reps = Column(Integer, nullable=False)
    weight = Column(Float, nullable=False)
    weight_unit = Column(String, default="kg", nullable=False)
    rest_sec = Column(Integer, nullable=True)

    exercise_log = relationship("ExerciseLog", back_populates="sets")
