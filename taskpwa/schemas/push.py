"""Push subscription schemas."""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class PushSubscription(BaseModel):
    """Browser push subscription (``PushSubscription.toJSON()``)."""

    endpoint: Optional[str] = None
    expirationTime: Optional[int] = None
    keys: Optional[Dict[str, Any]] = None


class VapidPublicKeyResponse(BaseModel):
    """Public VAPID key response."""

    ok: bool = True
    publicKey: str


class SubscriptionSavedResponse(BaseModel):
    """Subscription stored response."""

    ok: bool = True
    message: str
    totalSubscriptions: int
