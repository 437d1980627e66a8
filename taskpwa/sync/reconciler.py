"""Client/server task reconciliation.

A run has three ordered phases:

1. push creates   - every non-deleted ``Local`` task is created on the server and
                    remapped to the ``Remote`` id the server returns;
2. push changes   - tombstoned ``Remote`` tasks are deleted on the server and
                    purged locally, dirty ones are updated and marked clean;
3. pull and merge - the server list overwrites every local record that is not
                    dirty; dirty local records win.

The first remote failure aborts the run. Work already applied stays applied and
the failure is returned with the phase that produced it; the caller decides
whether to run again. A run against a consistent state issues no mutating
remote calls and reports zero changes.

Runs must not overlap on the same store (see ``SyncRunner``).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from taskpwa.core.exceptions import RemoteNotFound, SyncError, TransportError
from taskpwa.middleware.metrics import (
    sync_changes_total,
    sync_failures_total,
    sync_remote_calls_total,
    sync_runs_total,
)
from taskpwa.sync.identifiers import LocalId, RemoteId, TaskIdentifier
from taskpwa.sync.ports import LocalTaskStore, RemoteTaskGateway
from taskpwa.sync.store import InMemoryTaskStore
from taskpwa.sync.task import Task

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncPhase(str, Enum):
    """Reconcile phases, in execution order."""

    PUSH_CREATES = "push_creates"
    PUSH_CHANGES = "push_changes"
    PULL = "pull"

    @property
    def number(self) -> int:
        return list(SyncPhase).index(self) + 1


class MergeOutcome(str, Enum):
    """What the pull phase did with one server record."""

    INSERTED = "inserted"
    OVERWRITTEN = "overwritten"
    UNCHANGED = "unchanged"
    KEPT_LOCAL = "kept_local"


@dataclass
class MergeDecision:
    identifier: RemoteId
    outcome: MergeOutcome


@dataclass
class ReconcileFailure:
    phase: SyncPhase
    error: SyncError
    identifier: Optional[TaskIdentifier] = None

    @property
    def retryable(self) -> bool:
        return self.error.retryable


@dataclass
class ReconcileResult:
    changes: int = 0
    tasks: List[Task] = field(default_factory=list)
    remaps: List[Tuple[LocalId, RemoteId]] = field(default_factory=list)
    merges: List[MergeDecision] = field(default_factory=list)
    failure: Optional[ReconcileFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def raise_for_failure(self) -> None:
        """Re-raise the error that aborted the run, if any."""
        if self.failure is not None:
            raise self.failure.error


class _PhaseAborted(Exception):
    def __init__(self, failure: ReconcileFailure):
        super().__init__(str(failure.error))
        self.failure = failure


class Reconciler:
    """Reconcile one local store against one remote gateway."""

    def __init__(self, store: LocalTaskStore, remote: RemoteTaskGateway):
        self.store = store
        self.remote = remote

    async def reconcile(self) -> ReconcileResult:
        result = ReconcileResult()
        try:
            await self._push_creates(result)
            await self._push_changes(result)
            await self._pull(result)
        except _PhaseAborted as aborted:
            result.failure = aborted.failure
            sync_failures_total.labels(aborted.failure.phase.value).inc()
            logger.warning(
                f"Sync aborted in phase {aborted.failure.phase.number} ({aborted.failure.phase.value}) "
                f"on {aborted.failure.identifier}: {aborted.failure.error}"
            )

        result.tasks = await self.store.load_all()
        sync_runs_total.labels("ok" if result.ok else "failed").inc()
        sync_changes_total.inc(result.changes)
        logger.info(f"Sync finished: {result.changes} changes, {len(result.remaps)} remapped")
        return result

    async def _call(
        self,
        phase: SyncPhase,
        operation: str,
        identifier: Optional[TaskIdentifier],
        call: Callable[[], Awaitable[T]],
    ) -> T:
        """Issue one remote call; any failure becomes a phase abort."""
        sync_remote_calls_total.labels(operation).inc()
        logger.debug(f"Remote {operation} for {identifier}")
        try:
            return await call()
        except RemoteNotFound:
            raise
        except SyncError as exc:
            raise _PhaseAborted(ReconcileFailure(phase, exc, identifier)) from exc
        except Exception as exc:
            error = TransportError(f"{operation} failed: {exc}")
            raise _PhaseAborted(ReconcileFailure(phase, error, identifier)) from exc

    async def _push_creates(self, result: ReconcileResult) -> None:
        phase = SyncPhase.PUSH_CREATES
        for task in await self.store.load_all():
            if not isinstance(task.identifier, LocalId):
                continue
            if task.deleted:
                # Never transmitted: a deleted Local task is simply dropped.
                await self.store.purge(task.identifier)
                continue

            try:
                created = await self._call(
                    phase,
                    "create",
                    task.identifier,
                    lambda: self.remote.create_remote(task.content()),
                )
            except RemoteNotFound as exc:
                raise _PhaseAborted(ReconcileFailure(phase, exc, task.identifier)) from exc

            synced = Task.from_remote(created)
            await self.store.remap(task.identifier, synced)
            result.remaps.append((task.identifier, synced.identifier))
            result.changes += 1
            logger.info(f"Task created on server: {task.identifier} -> {synced.identifier}")

    async def _push_changes(self, result: ReconcileResult) -> None:
        phase = SyncPhase.PUSH_CHANGES
        for task in await self.store.load_all():
            if not isinstance(task.identifier, RemoteId):
                continue
            remote_id = task.identifier.id

            if task.deleted:
                try:
                    await self._call(
                        phase, "delete", task.identifier, lambda: self.remote.delete_remote(remote_id)
                    )
                except RemoteNotFound:
                    logger.info(f"{task.identifier} already gone on server")
                await self.store.purge(task.identifier)
                result.changes += 1
                logger.info(f"Task deleted: {task.identifier}")

            elif task.dirty:
                try:
                    await self._call(
                        phase,
                        "update",
                        task.identifier,
                        lambda: self.remote.update_remote(remote_id, task.content()),
                    )
                except RemoteNotFound:
                    logger.info(f"{task.identifier} missing on server, purging local copy")
                    await self.store.purge(task.identifier)
                else:
                    current = await self.store.get(task.identifier)
                    if current == task:
                        await self.store.save(task.copy(dirty=False))
                    else:
                        # Edited while the update was in flight; the edit stays dirty.
                        logger.info(f"{task.identifier} changed during push, left dirty")
                result.changes += 1

    async def _pull(self, result: ReconcileResult) -> None:
        phase = SyncPhase.PULL
        try:
            remote_tasks = await self._call(phase, "list", None, self.remote.list_remote)
        except RemoteNotFound as exc:
            raise _PhaseAborted(ReconcileFailure(phase, exc)) from exc
        logger.debug(f"Received {len(remote_tasks)} tasks from server")

        for remote in remote_tasks:
            identifier = RemoteId(remote.id)
            existing = await self.store.get(identifier)

            if existing is None:
                await self.store.save(Task.from_remote(remote))
                outcome = MergeOutcome.INSERTED
            elif existing.dirty:
                # Local edits survive until they are pushed.
                outcome = MergeOutcome.KEPT_LOCAL
            elif existing.same_content(remote):
                outcome = MergeOutcome.UNCHANGED
            else:
                await self.store.save(Task.from_remote(remote))
                outcome = MergeOutcome.OVERWRITTEN

            result.merges.append(MergeDecision(identifier, outcome))


async def reconcile(store: LocalTaskStore, remote: RemoteTaskGateway) -> ReconcileResult:
    """Run one reconcile of ``store`` against ``remote``."""
    return await Reconciler(store, remote).reconcile()


async def reconcile_tasks(local: List[Task], remote: RemoteTaskGateway) -> ReconcileResult:
    """Reconcile a plain task list; ``result.tasks`` is the updated list."""
    return await reconcile(InMemoryTaskStore(local), remote)
