"""
Subscription Repository - Storage for Valuation Alert Subscriptions

Same storage model as ValuationRepository: in-memory with optional JSON
file persistence, owner-scoped removal.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from core.history.schema import DEFAULT_THRESHOLD_PERCENTAGE, ValuationSubscription


logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """Repository for valuation alert subscriptions."""

    def __init__(self, persist_path: Optional[str] = None):
        self._subscriptions: dict[str, ValuationSubscription] = {}
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load_from_file()

    def _save_to_file(self) -> None:
        if not self._persist_path:
            return

        data = {
            "subscriptions": [s.to_dict() for s in self._subscriptions.values()],
            "saved_at": datetime.utcnow().isoformat(),
        }
        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        self._persist_path.write_text(json.dumps(data, indent=2))

    def _load_from_file(self) -> None:
        try:
            data = json.loads(self._persist_path.read_text())
            for item in data.get("subscriptions", []):
                subscription = ValuationSubscription.from_dict(item)
                self._subscriptions[subscription.subscription_id] = subscription
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning("Could not load subscription data from %s: %s", self._persist_path, e)

    def subscribe(
        self,
        user_id: str,
        location: str,
        email: str,
        threshold_percentage: float = DEFAULT_THRESHOLD_PERCENTAGE,
    ) -> ValuationSubscription:
        """
        Create a subscription.

        Raises:
            ValueError: If any field is invalid
        """
        subscription = ValuationSubscription(
            user_id=user_id,
            location=location,
            email=email,
            threshold_percentage=threshold_percentage,
        )
        self._subscriptions[subscription.subscription_id] = subscription
        self._save_to_file()

        logger.info(
            "User %s subscribed to %s alerts at %.1f%%",
            user_id, subscription.location, subscription.threshold_percentage,
        )
        return subscription

    def get(self, subscription_id: str) -> Optional[ValuationSubscription]:
        return self._subscriptions.get(subscription_id)

    def list(self, user_id: str) -> list[ValuationSubscription]:
        """Get a user's subscriptions, newest first."""
        return sorted(
            (s for s in self._subscriptions.values() if s.user_id == user_id),
            key=lambda s: s.created_at,
            reverse=True,
        )

    def list_all(self) -> list[ValuationSubscription]:
        return sorted(self._subscriptions.values(), key=lambda s: s.created_at)

    def unsubscribe(self, subscription_id: str, user_id: str) -> bool:
        """
        Remove a subscription owned by user_id.

        Returns:
            True if removed, False if not found or not owned
        """
        subscription = self._subscriptions.get(subscription_id)
        if subscription is None or subscription.user_id != user_id:
            return False

        del self._subscriptions[subscription_id]
        self._save_to_file()
        return True

    def mark_notified(self, subscription_id: str, when: Optional[datetime] = None) -> bool:
        """Record that an alert was sent for a subscription."""
        subscription = self._subscriptions.get(subscription_id)
        if subscription is None:
            return False

        subscription.last_notified_at = when or datetime.utcnow()
        self._save_to_file()
        return True


_subscription_instance: Optional[SubscriptionRepository] = None


def get_subscription_repository(persist_path: Optional[str] = None) -> SubscriptionRepository:
    """Get the subscription repository singleton."""
    global _subscription_instance
    if _subscription_instance is None:
        _subscription_instance = SubscriptionRepository(
            persist_path or "data/subscriptions.json"
        )
    return _subscription_instance
