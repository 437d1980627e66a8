"""Tests for the sync runner (serialised runs and whole-run retries)."""
import asyncio

import pytest

from taskpwa.core.exceptions import RemoteValidationError, SyncAlreadyRunning, TransportError
from taskpwa.sync.identifiers import LocalId, RemoteId
from taskpwa.sync.runner import SyncRunner
from taskpwa.sync.task import Task

from .fakes import BlockingGateway, FakeGateway


def offline_task(token="t", title="Offline") -> Task:
    return Task(identifier=LocalId(token), title=title, created_at=1, updated_at=1)


@pytest.mark.asyncio
async def test_run_once(memory_store, gateway, test_settings):
    await memory_store.save(offline_task())
    runner = SyncRunner(memory_store, gateway, test_settings)

    result = await runner.run_once()

    assert result.ok
    assert result.changes == 1
    assert runner.last_result is result
    assert runner.running is False


@pytest.mark.asyncio
async def test_retry_recovers_from_transient_failure(memory_store, gateway, test_settings):
    """A retryable failure re-runs the whole reconcile, which resumes where it stopped."""
    await memory_store.save(offline_task())
    gateway.fail("list", None, TransportError("timeout"), times=1)
    runner = SyncRunner(memory_store, gateway, test_settings)

    result = await runner.trigger("online", retry=True)

    assert result.ok
    assert result.changes == 0
    assert gateway.calls.count(("list", None)) == 2
    assert gateway.calls.count(("create", "Offline")) == 1
    assert [t.identifier for t in await memory_store.load_all()] == [RemoteId(1)]


@pytest.mark.asyncio
async def test_retries_are_bounded(memory_store, gateway, test_settings):
    gateway.fail("list", None, TransportError("down"))
    runner = SyncRunner(memory_store, gateway, test_settings)

    result = await runner.run_with_retry()

    assert not result.ok
    assert gateway.calls.count(("list", None)) == test_settings.SYNC_RETRY_ATTEMPTS


@pytest.mark.asyncio
async def test_non_retryable_failure_is_not_retried(memory_store, gateway, test_settings):
    await memory_store.save(offline_task(title="Bad"))
    gateway.fail("create", "Bad", RemoteValidationError("Title is required"))
    runner = SyncRunner(memory_store, gateway, test_settings)

    result = await runner.run_with_retry()

    assert result.failure.retryable is False
    assert gateway.calls == [("create", "Bad")]


@pytest.mark.asyncio
async def test_overlapping_trigger_is_dropped(memory_store, test_settings):
    gateway = BlockingGateway()
    runner = SyncRunner(memory_store, gateway, test_settings)

    first = asyncio.create_task(runner.trigger("user"))
    await gateway.entered.wait()

    assert runner.running is True
    assert await runner.trigger("visibility") is None
    with pytest.raises(SyncAlreadyRunning):
        await runner.run_once()

    gateway.release.set()
    result = await first
    assert result.ok
    assert gateway.calls.count(("list", None)) == 1
    assert runner.running is False


@pytest.mark.asyncio
async def test_runs_after_completion_are_accepted(memory_store, test_settings):
    gateway = FakeGateway()
    runner = SyncRunner(memory_store, gateway, test_settings)

    assert await runner.trigger("first") is not None
    assert await runner.trigger("second") is not None
