"""
Расчёт подсказок для тренировки по программе.

Для каждого упражнения прошлой тренировки берётся число подходов и лучший
подход по объёму (повторы × вес): именно его пользователь пытается
повторить или превзойти в следующий раз.
"""
from typing import Dict, Iterable

from app.core.config import settings
from app.schemas.routine import Placeholder, SetRecord
from app.schemas.workout import WeightUnit


class PlaceholderService:
    DEFAULT_WEIGHT_UNIT = WeightUnit(settings.DEFAULT_WEIGHT_UNIT)

    @staticmethod
    def volume(record: SetRecord) -> float:
        """Объём подхода. Пустые и отрицательные значения дают 0."""
        reps = record.reps or 0
        weight = record.weight or 0
        if reps <= 0 or weight <= 0:
            return 0.0
        return float(reps * weight)

    @classmethod
    def weight_unit(cls, record: SetRecord) -> WeightUnit:
        """Единица веса подхода; пустая или неизвестная заменяется единицей по умолчанию."""
        try:
            return WeightUnit(record.weight_unit)
        except ValueError:
            return cls.DEFAULT_WEIGHT_UNIT

    @classmethod
    def derive(cls, records: Iterable[SetRecord]) -> Dict[int, Placeholder]:
        """
        Сгруппировать подходы по exercise_type_id и выбрать лучший в каждой группе.

        При равном объёме остаётся первый встреченный подход: записи приходят
        в порядке set_order.
        """
        counts: Dict[int, int] = {}
        best: Dict[int, SetRecord] = {}
        best_volume: Dict[int, float] = {}

        for record in records:
            key = record.exercise_type_id
            counts[key] = counts.get(key, 0) + 1
            volume = cls.volume(record)
            if key not in best or volume > best_volume[key]:
                best[key] = record
                best_volume[key] = volume

        return {
            exercise_type_id: Placeholder(
                set_count=counts[exercise_type_id],
                reps=record.reps,
                weight=record.weight,
                weight_unit=cls.weight_unit(record),
                rest_sec=record.rest_sec,
            )
            for exercise_type_id, record in best.items()
        }
