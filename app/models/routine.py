from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.base import Base

class Routine(Base):
    __tablename__ = "routines"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_routine_user_name"),)

    id = Column(Integer, primary_key=True)
    # NULL: системная программа, доступная всем
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(30), nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="routines")
    exercises = relationship(
        "RoutineExercise",
        back_populates="routine",
        cascade="all, delete-orphan",
        order_by="RoutineExercise.exercise_order",
    )

    @property
    def is_system(self) -> bool:
        return self.user_id is None

class RoutineExercise(Base):
    __tablename__ = "routine_exercises"

    id = Column(Integer, primary_key=True)
    routine_id = Column(Integer, ForeignKey("routines.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_type_id = Column(Integer, ForeignKey("exercise_types.id", ondelete="RESTRICT"), nullable=False)
    exercise_order = Column(Integer, nullable=False)

    routine = relationship("Routine", back_populates="exercises")
