"""
Контракт планирования для таймеров сессии.

Движок сессии сам время не отсчитывает: он только просит планировщик
вызывать callback раз в N секунд и отменяет этот вызов при смене состояния.
"""
import logging
import time
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def wall_clock() -> float:
    """Настенное время в секундах."""
    return time.time()


class IntervalHandle:
    """Отменяемый периодический вызов."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class IntervalScheduler:
    """Базовый планировщик: вызывает callback каждые interval секунд до отмены."""

    def call_every(self, interval: float, callback: Callable[[], None]) -> IntervalHandle:
        raise NotImplementedError


class JobIntervalHandle(IntervalHandle):
    def __init__(self, job: Job):
        super().__init__()
        self.job = job

    def cancel(self) -> None:
        if self._cancelled:
            return
        super().cancel()
        try:
            self.job.remove()
        except JobLookupError:
            logger.debug(f"Задача {self.job.id} уже снята")


class AsyncIOIntervalScheduler(IntervalScheduler):
    """
    Периодические вызовы через APScheduler на текущем event loop.

    Планировщик запускается при первом call_every, поэтому создавать
    экземпляр можно и вне работающего loop.
    """

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self.scheduler = scheduler or AsyncIOScheduler()

    def call_every(self, interval: float, callback: Callable[[], None]) -> JobIntervalHandle:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Планировщик таймеров сессии запущен")

        handle: Optional[JobIntervalHandle] = None

        # Корутина выполняется в самом event loop, а не в пуле потоков:
        # состояние сессии меняется только из одного потока
        async def run() -> None:
            if handle is None or handle.cancelled:
                return
            callback()

        job = self.scheduler.add_job(
            run,
            trigger=IntervalTrigger(seconds=interval),
            max_instances=1,
            misfire_grace_time=None,
        )
        handle = JobIntervalHandle(job)
        return handle

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Планировщик таймеров сессии остановлен")
