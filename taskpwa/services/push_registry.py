"""Push subscription registry."""
import logging
from typing import Dict

from taskpwa.schemas.push import PushSubscription

logger = logging.getLogger(__name__)


class PushRegistry:
    """Browser push subscriptions, keyed by endpoint."""

    def __init__(self):
        self._subscriptions: Dict[str, PushSubscription] = {}

    def save(self, subscription: PushSubscription) -> int:
        if not subscription.endpoint:
            raise ValueError("Subscription endpoint is required")
        self._subscriptions[subscription.endpoint] = subscription
        logger.info(f"Push subscription saved: {len(self._subscriptions)} active")
        return len(self._subscriptions)

    def __len__(self) -> int:
        return len(self._subscriptions)
