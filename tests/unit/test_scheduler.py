"""
Модульные тесты для AsyncIOIntervalScheduler (APScheduler).

Проверяется:
- задача регистрируется с IntervalTrigger и снимается через job.remove()
- на реальном event loop callback вызывается периодически
- после cancel() вызовов больше нет, callback может отменить сам себя
- сессия, которую ведёт этот планировщик, не тикает на паузе
"""

import asyncio
from unittest.mock import MagicMock

import pytest
from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.interval import IntervalTrigger

from app.services.scheduler import AsyncIOIntervalScheduler, wall_clock

pytestmark = pytest.mark.unit

INTERVAL = 0.05


@pytest.fixture
async def interval_scheduler():
    scheduler = AsyncIOIntervalScheduler()
    yield scheduler
    scheduler.shutdown()


# ---------------------------------------------------------------------------
# Регистрация задачи (APScheduler замокан)
# ---------------------------------------------------------------------------

def test_call_every_adds_interval_job():
    aps = MagicMock()
    aps.running = True

    handle = AsyncIOIntervalScheduler(aps).call_every(2.5, lambda: None)

    aps.start.assert_not_called()
    kwargs = aps.add_job.call_args.kwargs
    assert isinstance(kwargs["trigger"], IntervalTrigger)
    assert kwargs["trigger"].interval.total_seconds() == 2.5
    assert handle.job is aps.add_job.return_value


def test_call_every_starts_stopped_scheduler():
    aps = MagicMock()
    aps.running = False

    AsyncIOIntervalScheduler(aps).call_every(1, lambda: None)

    aps.start.assert_called_once()


def test_cancel_removes_job_once():
    aps = MagicMock()
    aps.running = True
    handle = AsyncIOIntervalScheduler(aps).call_every(1, lambda: None)

    handle.cancel()
    handle.cancel()

    assert handle.cancelled is True
    handle.job.remove.assert_called_once()


def test_cancel_tolerates_already_removed_job():
    aps = MagicMock()
    aps.running = True
    handle = AsyncIOIntervalScheduler(aps).call_every(1, lambda: None)
    handle.job.remove.side_effect = JobLookupError("job")

    handle.cancel()

    assert handle.cancelled is True


# ---------------------------------------------------------------------------
# Реальный event loop
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_callback_fires_repeatedly(interval_scheduler):
    calls = []
    handle = interval_scheduler.call_every(INTERVAL, lambda: calls.append(1))

    await asyncio.sleep(INTERVAL * 8)
    handle.cancel()

    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_no_callback_after_cancel(interval_scheduler):
    calls = []
    handle = interval_scheduler.call_every(INTERVAL, lambda: calls.append(1))
    await asyncio.sleep(INTERVAL * 4)

    handle.cancel()
    fired = len(calls)
    await asyncio.sleep(INTERVAL * 5)

    assert len(calls) == fired


@pytest.mark.asyncio
async def test_callback_can_cancel_itself(interval_scheduler):
    calls = []
    holder = {}

    def callback():
        calls.append(1)
        holder["handle"].cancel()

    holder["handle"] = interval_scheduler.call_every(INTERVAL, callback)
    await asyncio.sleep(INTERVAL * 6)

    assert calls == [1]


@pytest.mark.asyncio
async def test_session_driven_by_apscheduler(interval_scheduler):
    from app.services.workout_session import WorkoutSession

    session = WorkoutSession(scheduler=interval_scheduler, tick_seconds=INTERVAL)
    session.start_custom_session()
    await asyncio.sleep(INTERVAL * 8)
    session.pause_timer()
    frozen = session.duration_sec
    await asyncio.sleep(INTERVAL * 5)

    assert frozen >= 1
    assert session.duration_sec == frozen
    session.stop_and_reset()


def test_wall_clock_returns_epoch_seconds():
    assert wall_clock() > 1_600_000_000
