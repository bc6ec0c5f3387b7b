from sqlalchemy import Column, Integer, Float, Date, ForeignKey, UniqueConstraint, CheckConstraint
from app.core.base import Base

class BodyStat(Base):
    __tablename__ = "body_stats"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_body_stat_user_date"),
        CheckConstraint(
            "body_fat_percentage >= 0 AND body_fat_percentage <= 100",
            name="ck_body_fat_range",
        ),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    weight_kg = Column(Float, nullable=True)
    waist_cm = Column(Float, nullable=True)
    hips_cm = Column(Float, nullable=True)
    breast_cm = Column(Float, nullable=True)
    body_fat_percentage = Column(Float, nullable=True)
