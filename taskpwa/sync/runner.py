"""Sync runner: the single control flow that triggers reconcile runs."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from tenacity import AsyncRetrying, RetryError, retry_if_exception, stop_after_attempt, wait_exponential

from taskpwa.config import Settings, settings as default_settings
from taskpwa.core.exceptions import SyncAlreadyRunning, SyncError
from taskpwa.sync.ports import LocalTaskStore, RemoteTaskGateway
from taskpwa.sync.reconciler import ReconcileResult, Reconciler

logger = logging.getLogger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, SyncError) and exc.retryable


class SyncRunner:
    """Serialises reconcile runs for one local store.

    Triggers (user action, connectivity restored, page visible again) all go
    through ``trigger``; a trigger that arrives while a run is in flight is
    dropped instead of overlapping it.
    """

    def __init__(
        self,
        store: LocalTaskStore,
        remote: RemoteTaskGateway,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self.reconciler = Reconciler(store, remote)
        self._lock = asyncio.Lock()
        self.last_result: Optional[ReconcileResult] = None

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run_once(self) -> ReconcileResult:
        """Run a single reconcile; raises SyncAlreadyRunning if one is in flight."""
        if self._lock.locked():
            raise SyncAlreadyRunning("A sync run is already in progress")
        async with self._lock:
            self.last_result = await self.reconciler.reconcile()
            return self.last_result

    async def run_with_retry(self) -> ReconcileResult:
        """Re-run the whole reconcile while it fails with a retryable error."""
        if self._lock.locked():
            raise SyncAlreadyRunning("A sync run is already in progress")

        async with self._lock:
            retrying = AsyncRetrying(
                stop=stop_after_attempt(max(1, self.settings.SYNC_RETRY_ATTEMPTS)),
                wait=wait_exponential(
                    multiplier=1,
                    min=self.settings.SYNC_RETRY_MIN_SECONDS,
                    max=self.settings.SYNC_RETRY_MAX_SECONDS,
                ),
                retry=retry_if_exception(_is_retryable),
                reraise=False,
            )
            try:
                async for attempt in retrying:
                    with attempt:
                        result = await self.reconciler.reconcile()
                        self.last_result = result
                        if result.failure is not None and result.failure.retryable:
                            logger.info(
                                f"Sync attempt {attempt.retry_state.attempt_number} failed: "
                                f"{result.failure.error}"
                            )
                            result.raise_for_failure()
            except RetryError:
                logger.warning("Sync retries exhausted")
            return self.last_result

    async def trigger(self, reason: str, *, retry: bool = False) -> Optional[ReconcileResult]:
        """Start a run for ``reason``; returns None when a run is already in flight."""
        logger.info(f"Sync triggered: {reason}")
        try:
            if retry:
                return await self.run_with_retry()
            return await self.run_once()
        except SyncAlreadyRunning:
            logger.info(f"Sync already running, ignoring trigger: {reason}")
            return None
