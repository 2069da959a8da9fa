import pytest
from unittest.mock import AsyncMock, patch
from core.exceptions import RetryExhaustedError
from ingestion.entities import PRICES, PRODUCTS
from ingestion.scheduler import SyncScheduler


def test_scheduler_initialization():
    scheduler = SyncScheduler(interval_minutes=5)
    assert scheduler.scheduler is not None
    assert scheduler.runner.store is scheduler.store
    assert scheduler.runner.run_log is scheduler.run_log
    assert scheduler.kinds == (PRODUCTS, PRICES)
    assert scheduler.interval_minutes == 5


def test_stop_before_start_is_safe():
    scheduler = SyncScheduler()
    scheduler.stop()
    assert not scheduler.scheduler.running


@pytest.mark.asyncio
async def test_sync_cycle_runs_every_kind_in_order(store, run_log):
    scheduler = SyncScheduler(store=store, run_log=run_log)
    scheduler.runner.sync_all = AsyncMock(return_value={"status": "success"})

    assert await scheduler.run_sync_cycle() is True

    kinds = [c.args[1] for c in scheduler.runner.sync_all.await_args_list]
    assert kinds == [PRODUCTS, PRICES]


@pytest.mark.asyncio
async def test_sync_cycle_stops_at_first_failure(store, run_log):
    """A failing kind ends the cycle; later kinds wait for the next tick"""
    scheduler = SyncScheduler(store=store, run_log=run_log)
    scheduler.runner.sync_all = AsyncMock(
        side_effect=RetryExhaustedError("failed after 3 attempts", attempts=3)
    )

    with patch.object(scheduler, "log_collection_counts", new_callable=AsyncMock) as counts:
        assert await scheduler.run_sync_cycle() is False

    assert scheduler.runner.sync_all.await_count == 1
    counts.assert_not_awaited()


@pytest.mark.asyncio
async def test_startup_cycle_attempts_every_kind(store, run_log):
    """The startup cycle still syncs prices after products fail"""
    scheduler = SyncScheduler(store=store, run_log=run_log)
    scheduler.runner.sync_all = AsyncMock(
        side_effect=[RetryExhaustedError("failed after 3 attempts", attempts=3), {"status": "success"}]
    )

    with patch.object(scheduler, "log_collection_counts", new_callable=AsyncMock) as counts:
        assert await scheduler.run_sync_cycle(stop_on_failure=False) is False

    kinds = [c.args[1] for c in scheduler.runner.sync_all.await_args_list]
    assert kinds == [PRODUCTS, PRICES]
    counts.assert_awaited_once()


@pytest.mark.asyncio
async def test_collection_counts_are_logged(store, run_log, caplog):
    scheduler = SyncScheduler(store=store, run_log=run_log)

    with caplog.at_level("INFO", logger="ingestion.scheduler"):
        await scheduler.log_collection_counts()

    messages = [r.getMessage() for r in caplog.records]
    assert "Total products stored in database: 0" in messages
    assert "Total prices stored in database: 0" in messages


@pytest.mark.asyncio
async def test_start_registers_startup_and_interval_jobs():
    scheduler = SyncScheduler(interval_minutes=15)

    with patch.object(scheduler.scheduler, "start") as start:
        scheduler.start()

    job = scheduler.scheduler.get_job("catalog_sync")
    assert job is not None
    assert job.trigger.interval.total_seconds() == 15 * 60
    assert job.max_instances == 1
    start.assert_called_once()

    startup = scheduler.scheduler.get_job("catalog_sync_startup")
    assert startup is not None
    assert startup.kwargs == {"stop_on_failure": False}
