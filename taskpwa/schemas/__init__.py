"""Schema modules."""
from taskpwa.schemas.task import (
    TaskContent,
    TaskUpdate,
    RemoteTask,
    TaskListResponse,
    TaskResponse,
    TaskDeleteResponse,
    SyncItem,
    SyncRequest,
    IdMapping,
    SyncResponse,
)
from taskpwa.schemas.push import PushSubscription, VapidPublicKeyResponse, SubscriptionSavedResponse
