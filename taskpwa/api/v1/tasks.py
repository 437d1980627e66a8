"""Tasks API endpoints."""
from fastapi import APIRouter, Depends, status

from taskpwa.core.exceptions import NotFoundError, ValidationError
from taskpwa.dependencies import get_registry
from taskpwa.schemas.task import (
    TaskContent,
    TaskDeleteResponse,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from taskpwa.services.task_registry import TaskRegistry

router = APIRouter()


@router.get("", response_model=TaskListResponse)
async def list_tasks(registry: TaskRegistry = Depends(get_registry)):
    """List all tasks, newest first."""
    tasks = registry.list()
    return TaskListResponse(tasks=tasks, count=len(tasks), timestamp=registry.clock())


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskContent, registry: TaskRegistry = Depends(get_registry)):
    """Create a task."""
    if not payload.title or not payload.title.strip():
        raise ValidationError("Title is required")
    task = registry.create(payload)
    return TaskResponse(task=task, message="Task created")


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, payload: TaskUpdate, registry: TaskRegistry = Depends(get_registry)):
    """Update the fields present in the request body."""
    task = registry.update(task_id, payload)
    if task is None:
        raise NotFoundError("Task not found")
    return TaskResponse(task=task, message="Task updated")


@router.delete("/{task_id}", response_model=TaskDeleteResponse)
async def delete_task(task_id: int, registry: TaskRegistry = Depends(get_registry)):
    """Delete a task; answers ``deleted: false`` when it does not exist."""
    deleted = registry.delete(task_id)
    return TaskDeleteResponse(deleted=deleted, message="Task deleted" if deleted else "Task not found")


@router.delete("", response_model=TaskDeleteResponse)
async def delete_all_tasks(registry: TaskRegistry = Depends(get_registry)):
    """Delete every task."""
    count = registry.clear()
    return TaskDeleteResponse(deleted=count, message=f"{count} tasks deleted")
