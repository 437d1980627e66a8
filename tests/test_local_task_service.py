"""Tests for the client-side task journal."""
import pytest

from taskpwa.core.exceptions import TaskValidationError
from taskpwa.services.local_task_service import LocalTaskService
from taskpwa.sync.identifiers import LocalId, RemoteId
from taskpwa.sync.task import Task


@pytest.fixture
def service(memory_store, clock):
    return LocalTaskService(memory_store, clock=clock)


@pytest.mark.asyncio
async def test_create_task_offline(service, memory_store):
    """New tasks get a local identifier and wait for sync."""
    task = await service.create("  Buy bread  ", " Rye ", location={"lat": 1.5, "lng": 2.5})

    assert isinstance(task.identifier, LocalId)
    assert task.title == "Buy bread"
    assert task.description == "Rye"
    assert task.completed is False
    assert task.dirty is True
    assert task.created_at == task.updated_at
    assert await memory_store.get(task.identifier) == task


@pytest.mark.asyncio
async def test_create_requires_title(service, memory_store):
    with pytest.raises(TaskValidationError):
        await service.create("   ")

    assert await memory_store.load_all() == []


@pytest.mark.asyncio
async def test_local_ids_are_unique(service):
    first = await service.create("One")
    second = await service.create("Two")

    assert first.identifier != second.identifier


@pytest.mark.asyncio
async def test_update_marks_task_dirty(service, memory_store):
    synced = Task(identifier=RemoteId(5), title="Synced", created_at=1, updated_at=1, dirty=False)
    await memory_store.save(synced)

    updated = await service.update(RemoteId(5), title=" Renamed ", completed=True)

    assert updated.title == "Renamed"
    assert updated.completed is True
    assert updated.dirty is True
    assert updated.updated_at > synced.updated_at
    assert await memory_store.get(RemoteId(5)) == updated


@pytest.mark.asyncio
async def test_update_rejects_blank_title_and_unknown_fields(service):
    task = await service.create("Valid")

    with pytest.raises(TaskValidationError):
        await service.update(task.identifier, title="")
    with pytest.raises(TaskValidationError):
        await service.update(task.identifier, dirty=False)


@pytest.mark.asyncio
async def test_update_missing_task_raises_key_error(service):
    with pytest.raises(KeyError):
        await service.update(RemoteId(404), title="Nope")


@pytest.mark.asyncio
async def test_toggle(service):
    task = await service.create("Toggle me")

    toggled = await service.toggle(task.identifier, True)

    assert toggled.completed is True


@pytest.mark.asyncio
async def test_delete_local_task_purges_it(service, memory_store):
    task = await service.create("Short lived")

    await service.delete(task.identifier)

    assert await memory_store.get(task.identifier) is None


@pytest.mark.asyncio
async def test_delete_remote_task_leaves_tombstone(service, memory_store):
    await memory_store.save(Task(identifier=RemoteId(3), title="On server", created_at=1, updated_at=1, dirty=False))

    await service.delete(RemoteId(3))

    tombstone = await memory_store.get(RemoteId(3))
    assert tombstone.deleted is True
    assert tombstone.dirty is True
    assert await service.list_visible() == []
    with pytest.raises(KeyError):
        await service.update(RemoteId(3), title="Too late")


@pytest.mark.asyncio
async def test_delete_unknown_task_is_ignored(service):
    await service.delete(LocalId("missing"))


@pytest.mark.asyncio
async def test_list_visible_newest_first(service):
    older = await service.create("Older")
    newer = await service.create("Newer")

    titles = [t.title for t in await service.list_visible()]

    assert titles == [newer.title, older.title]


@pytest.mark.asyncio
async def test_has_pending_sync(service, memory_store):
    assert await service.has_pending_sync() is False

    await memory_store.save(Task(identifier=RemoteId(1), title="Clean", created_at=1, updated_at=1, dirty=False))
    assert await service.has_pending_sync() is False

    await service.create("Pending")
    assert await service.has_pending_sync() is True

    await service.clear()
    assert await service.has_pending_sync() is False
