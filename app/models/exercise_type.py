from sqlalchemy import Column, Integer, String, ForeignKey
from app.core.base import Base

class ExerciseType(Base):
    __tablename__ = "exercise_types"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    muscle_group = Column(String, nullable=True)
    note = Column(String, nullable=True)
    # NULL: упражнение из общего каталога
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
