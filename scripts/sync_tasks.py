"""Script to reconcile the local task store with the server once."""
import asyncio
import sys

from taskpwa.config import settings
from taskpwa.database import build_engine, build_session_factory, close_db, init_db
from taskpwa.integrations.task_api import HttpTaskGateway
from taskpwa.logging_setup import setup_logging
from taskpwa.sync.runner import SyncRunner
from taskpwa.sync.store import SQLTaskStore


async def sync_tasks() -> int:
    """Run one sync (with retries) and print a summary."""
    setup_logging(settings)
    engine = build_engine(settings.LOCAL_DATABASE_URL)
    await init_db(engine)
    store = SQLTaskStore(build_session_factory(engine))

    try:
        async with HttpTaskGateway(settings.SERVER_BASE_URL) as gateway:
            runner = SyncRunner(store, gateway, settings)
            result = await runner.trigger("manual", retry=True)
    finally:
        await close_db(engine)

    if result is None:
        print("✗ Sync already running")
        return 1

    print(f"✓ {result.changes} changes applied, {len(result.remaps)} tasks remapped")
    pending = [t for t in result.tasks if t.dirty or t.is_local]
    print(f"  Local tasks: {len(result.tasks)} ({len(pending)} pending)")
    if result.failure is not None:
        print(f"✗ Failed in phase {result.failure.phase.number} ({result.failure.phase.value}): {result.failure.error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(sync_tasks()))
