from datetime import date
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.body_stat import BodyStat
from app.schemas.body_stat import BodyStatCreate


class BodyStatRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists_for_date(self, user_id: int, day: date) -> bool:
        result = await self.db.execute(
            select(BodyStat.id).where(BodyStat.user_id == user_id, BodyStat.date == day)
        )
        return result.scalar_one_or_none() is not None

    async def create(self, user_id: int, data: BodyStatCreate) -> BodyStat:
        stat = BodyStat(user_id=user_id, **data.model_dump())
        self.db.add(stat)
        await self.db.commit()
        await self.db.refresh(stat)
        return stat

    async def list_between(self, user_id: int, start: date, end: date) -> List[BodyStat]:
        """Замеры за полуинтервал [start, end) по возрастанию даты."""
        result = await self.db.execute(
            select(BodyStat)
            .where(BodyStat.user_id == user_id, BodyStat.date >= start, BodyStat.date < end)
            .order_by(BodyStat.date)
        )
        return list(result.scalars().all())
