"""
Агрегаты для графиков прогресса.

Объём подхода = повторы × вес в килограммах; фунты переводятся в кг.
Дни считаются по UTC, как и хранится время тренировок.
"""
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.config import settings
from app.schemas.body_stat import MEASUREMENTS, BodyStatMonthlyAverage
from app.schemas.history import (
    CalendarMonth,
    CalendarWorkout,
    MonthlyVolume,
    ProgressPoint,
    VolumeRow,
    YearlyVolume,
)

CUSTOM_WORKOUT_NAME = "Свободная тренировка"


def utc_day(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Полуинтервал [начало месяца, начало следующего) в UTC."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def year_bounds(year: int) -> Tuple[datetime, datetime]:
    return datetime(year, 1, 1, tzinfo=timezone.utc), datetime(year + 1, 1, 1, tzinfo=timezone.utc)


class ProgressService:

    @staticmethod
    def set_volume(reps: int, weight: float, weight_unit: Optional[str]) -> float:
        if weight_unit == "lb":
            weight = weight * settings.LB_TO_KG
        return reps * weight

    @classmethod
    def daily_volume(cls, rows: Iterable) -> List[ProgressPoint]:
        """Суммарный объём по дням; подходят любые строки с date, reps, weight, weight_unit."""
        totals: Dict[date, float] = defaultdict(float)
        for row in rows:
            totals[utc_day(row.date)] += cls.set_volume(row.reps, row.weight, row.weight_unit)
        return [
            ProgressPoint(date=day, total_volume=round(volume, 2))
            for day, volume in sorted(totals.items())
        ]

    @classmethod
    def monthly_volume(cls, rows: Iterable[VolumeRow]) -> MonthlyVolume:
        points = cls.daily_volume(rows)
        return MonthlyVolume(
            dates=[p.date for p in points],
            volumes=[p.total_volume for p in points],
        )

    @classmethod
    def yearly_volume(cls, rows: Iterable[VolumeRow]) -> YearlyVolume:
        """Двенадцать месяцев подряд, пустые месяцы с нулевым объёмом."""
        totals = [0.0] * 12
        for row in rows:
            totals[utc_day(row.date).month - 1] += cls.set_volume(row.reps, row.weight, row.weight_unit)
        return YearlyVolume(
            months=[f"{m:02d}" for m in range(1, 13)],
            volumes=[round(v, 2) for v in totals],
        )

    @classmethod
    def calendar(cls, rows: Iterable[VolumeRow], year: int, month: int) -> CalendarMonth:
        """Тренировки месяца по дням: название программы и объём каждой."""
        workouts: Dict[int, dict] = {}
        for row in rows:
            entry = workouts.setdefault(row.workout_id, {
                "day": utc_day(row.date).day,
                "name": row.routine_name or CUSTOM_WORKOUT_NAME,
                "volume": 0.0,
            })
            entry["volume"] += cls.set_volume(row.reps, row.weight, row.weight_unit)

        days: Dict[int, List[CalendarWorkout]] = defaultdict(list)
        for workout_id, entry in workouts.items():
            days[entry["day"]].append(
                CalendarWorkout(id=workout_id, name=entry["name"], volume=round(entry["volume"], 2))
            )
        return CalendarMonth(year=year, month=month, days=dict(days))

    @staticmethod
    def body_stat_averages(stats: Iterable) -> List[BodyStatMonthlyAverage]:
        """Средние замеры по каждому из двенадцати месяцев года."""
        values: Dict[int, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))
        for stat in stats:
            for name in MEASUREMENTS:
                value = getattr(stat, name)
                if value is not None:
                    values[stat.date.month][name].append(value)

        result = []
        for month in range(1, 13):
            averages = {
                name: round(sum(items) / len(items), 2)
                for name, items in values[month].items()
            }
            result.append(BodyStatMonthlyAverage(month=f"{month:02d}", **averages))
        return result
