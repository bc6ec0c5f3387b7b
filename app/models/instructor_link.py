from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.base import Base

class InstructorLink(Base):
    """Связь инструктор → подопечный, действует до expires_at."""
    __tablename__ = "instructor_links"
    __table_args__ = (UniqueConstraint("instructor_id", "user_id", name="uq_instructor_user"),)

    id = Column(Integer, primary_key=True)
    instructor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    expires_at = Column(DateTime(timezone=True), nullable=False)

    instructor = relationship("User", foreign_keys=[instructor_id])
    trainee = relationship("User", foreign_keys=[user_id])
