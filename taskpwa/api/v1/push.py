"""Push subscription endpoints."""
from fastapi import APIRouter, Depends

from taskpwa.config import Settings
from taskpwa.core.exceptions import ServiceUnavailableError, ValidationError
from taskpwa.dependencies import get_app_settings, get_push_registry
from taskpwa.schemas.push import PushSubscription, SubscriptionSavedResponse, VapidPublicKeyResponse
from taskpwa.services.push_registry import PushRegistry

router = APIRouter()


@router.get("/vapid-public", response_model=VapidPublicKeyResponse)
async def vapid_public_key(settings: Settings = Depends(get_app_settings)):
    """Return the public VAPID key clients subscribe with."""
    if not settings.VAPID_PUBLIC:
        raise ServiceUnavailableError("VAPID is not configured on the server")
    return VapidPublicKeyResponse(publicKey=settings.VAPID_PUBLIC)


@router.post("/save-subscription", response_model=SubscriptionSavedResponse)
async def save_subscription(
    subscription: PushSubscription,
    registry: PushRegistry = Depends(get_push_registry),
):
    """Store a browser push subscription."""
    if not subscription.endpoint:
        raise ValidationError("Invalid subscription")
    total = registry.save(subscription)
    return SubscriptionSavedResponse(message="Subscription saved", totalSubscriptions=total)
