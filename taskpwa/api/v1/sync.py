"""Batch sync endpoint."""
from fastapi import APIRouter, Depends

from taskpwa.dependencies import get_registry
from taskpwa.schemas.task import IdMapping, SyncRequest, SyncResponse
from taskpwa.services.task_registry import TaskRegistry

router = APIRouter()


@router.post("", response_model=SyncResponse)
async def sync_tasks(payload: SyncRequest, registry: TaskRegistry = Depends(get_registry)):
    """Create new client tasks and update known ones in a single request."""
    created, updated, mapping = registry.apply_sync_batch(payload.tasks)
    return SyncResponse(
        created=created,
        updated=updated,
        mapping=[IdMapping(local_id=local_id, server_id=server_id) for local_id, server_id in mapping],
        server_tasks=registry.list(),
        message=f"Synced: {len(created)} created, {len(updated)} updated",
    )
