"""
Таймер отдыха между подходами.

Одновременно идёт не больше одного отсчёта. По окончании (сам дошёл до нуля
или пользователь нажал «закончить отдых») на подход записывается реально
прошедшее время по настенным часам, а не остаток счётчика: тики могут
приходить с задержкой (свернутая вкладка, занятый event loop).
"""
import logging
import math
from typing import Callable, Optional

from app.core.config import settings
from app.core.exceptions import InvalidStateError
from app.schemas.session import RestTimerState, TargetSet
from app.services.scheduler import Clock, IntervalHandle, IntervalScheduler, wall_clock

logger = logging.getLogger(__name__)

RestWriteback = Callable[[TargetSet, int], None]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RestTimer:
    def __init__(
        self,
        on_finish: RestWriteback,
        clock: Clock = wall_clock,
        scheduler: Optional[IntervalScheduler] = None,
        tick_seconds: float = settings.REST_TICK_SECONDS,
    ):
        self._on_finish = on_finish
        self._clock = clock
        self._scheduler = scheduler
        self._tick_seconds = tick_seconds
        self._handle: Optional[IntervalHandle] = None
        self.state = RestTimerState()

    @property
    def is_running(self) -> bool:
        return self.state.is_active

    @property
    def target_set(self) -> Optional[TargetSet]:
        return self.state.target_set

    def elapsed_seconds(self) -> int:
        if self.state.start_timestamp is None:
            return 0
        return max(0, round_half_up(self._clock() - self.state.start_timestamp))

    def start(
        self,
        exercise_type_id: Optional[int] = None,
        set_index: Optional[int] = None,
        seconds: int = settings.DEFAULT_REST_SEC,
    ) -> None:
        if seconds is None or seconds < 0:
            raise InvalidStateError(f"Некорректная длительность отдыха: {seconds}")

        # Предыдущий отсчёт просто выбрасывается, без записи на подход
        if self.state.is_active:
            logger.debug("Новый отдых отменяет предыдущий без записи результата")
        self.cancel()

        target = None
        if exercise_type_id is not None and set_index is not None:
            target = TargetSet(exercise_type_id=exercise_type_id, set_index=set_index)

        self.state = RestTimerState(
            is_active=True,
            seconds=int(seconds),
            target_set=target,
            start_timestamp=self._clock(),
        )
        if self._scheduler is not None:
            self._handle = self._scheduler.call_every(self._tick_seconds, self.tick)

    def tick(self) -> None:
        """Один шаг обратного отсчёта."""
        if not self.state.is_active:
            self._cancel_schedule()
            return

        if self.state.seconds > 0:
            self.state.seconds -= 1
        if self.state.seconds == 0:
            self._finish()

    def add_seconds(self, delta: int) -> None:
        # start_timestamp не трогаем: итог считается по настенным часам
        if not self.state.is_active:
            raise InvalidStateError("Таймер отдыха не запущен")
        self.state.seconds = max(0, self.state.seconds + delta)

    def stop(self) -> None:
        """Досрочное завершение: та же запись результата, что и при естественном окончании."""
        if not self.state.is_active:
            return
        self._finish()

    def cancel(self) -> None:
        """Жёсткая отмена без записи результата."""
        self._cancel_schedule()
        self.state = RestTimerState()

    def retarget(self, target: Optional[TargetSet]) -> None:
        if self.state.is_active:
            self.state.target_set = target

    def _finish(self) -> None:
        actual_rest = self.elapsed_seconds()
        target = self.state.target_set
        self.cancel()
        logger.debug(f"Отдых завершён: {actual_rest} c, подход {target}")
        if target is not None:
            self._on_finish(target, actual_rest)

    def _cancel_schedule(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
