"""
Valuation Change Alerts

Compares recent and older average valuations per subscribed location
and notifies subscribers whose threshold was crossed.

Windows:
- Lookback: last 30 days of valuations for the location
- Recent: last 7 days; Older: 8-30 days
- Both windows must contain at least one valuation
- A subscription is notified at most once per 24 hours
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

import requests

from core.history.repository import ValuationRepository
from core.history.schema import ValuationSubscription
from core.history.subscriptions import SubscriptionRepository
from core.valuation.models import round_half_up


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

LOOKBACK_DAYS = 30
RECENT_WINDOW_DAYS = 7
NOTIFY_COOLDOWN_HOURS = 24
DEFAULT_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class LocationTrend:
    """Average valuation movement for a location."""
    location: str
    previous_average: float
    current_average: float
    recent_count: int
    older_count: int

    @property
    def change_percentage(self) -> float:
        return (self.current_average - self.previous_average) / self.previous_average * 100


@dataclass(frozen=True)
class ValuationAlert:
    """An alert to send to one subscriber."""
    subscription_id: str
    email: str
    location: str
    old_value: int
    new_value: int
    change_percentage: float

    @property
    def direction(self) -> str:
        return "increased" if self.change_percentage > 0 else "decreased"

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "location": self.location,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "change_percentage": round(self.change_percentage, 2),
            "direction": self.direction,
        }


# =============================================================================
# Monitor
# =============================================================================


class ValuationChangeMonitor:
    """Finds subscriptions whose location average moved past their threshold."""

    def __init__(
        self,
        valuations: ValuationRepository,
        subscriptions: SubscriptionRepository,
    ):
        self._valuations = valuations
        self._subscriptions = subscriptions

    def location_trend(self, location: str, now: datetime) -> Optional[LocationTrend]:
        """
        Compute the recent vs older average for a location.

        Returns:
            LocationTrend, or None if either window is empty
        """
        records = self._valuations.list_by_location(
            location, since=now - timedelta(days=LOOKBACK_DAYS)
        )
        if len(records) < 2:
            logger.info("Not enough valuations for %s to compare", location)
            return None

        recent_cutoff = now - timedelta(days=RECENT_WINDOW_DAYS)
        recent = [r.estimated_value for r in records if r.created_at >= recent_cutoff]
        older = [r.estimated_value for r in records if r.created_at < recent_cutoff]

        if not recent or not older:
            logger.info("Not enough data split for %s", location)
            return None

        return LocationTrend(
            location=location,
            previous_average=sum(older) / len(older),
            current_average=sum(recent) / len(recent),
            recent_count=len(recent),
            older_count=len(older),
        )

    def _recently_notified(self, subscription: ValuationSubscription, now: datetime) -> bool:
        if subscription.last_notified_at is None:
            return False
        return now - subscription.last_notified_at < timedelta(hours=NOTIFY_COOLDOWN_HOURS)

    def check(self, now: Optional[datetime] = None) -> List[ValuationAlert]:
        """
        Collect alerts for every subscription that should be notified.

        Args:
            now: Reference time (default: now, UTC)
        """
        now = now or datetime.utcnow()
        subscriptions = self._subscriptions.list_all()

        alerts = []
        trends: dict[str, Optional[LocationTrend]] = {}
        for subscription in subscriptions:
            if subscription.location not in trends:
                trends[subscription.location] = self.location_trend(subscription.location, now)
            trend = trends[subscription.location]
            if trend is None:
                continue

            change = trend.change_percentage
            if abs(change) < subscription.threshold_percentage:
                continue

            if self._recently_notified(subscription, now):
                logger.info(
                    "Skipping %s for %s - notified within %d hours",
                    subscription.email, subscription.location, NOTIFY_COOLDOWN_HOURS,
                )
                continue

            alerts.append(ValuationAlert(
                subscription_id=subscription.subscription_id,
                email=subscription.email,
                location=subscription.location,
                old_value=round_half_up(trend.previous_average),
                new_value=round_half_up(trend.current_average),
                change_percentage=change,
            ))

        logger.info(
            "Checked %d subscriptions, %d alerts due", len(subscriptions), len(alerts)
        )
        return alerts


# =============================================================================
# Dispatcher
# =============================================================================


class AlertDispatcher:
    """
    Delivers alerts to an HTTP notification endpoint.

    Each alert is POSTed as JSON. A failed delivery is logged and does
    not stop the remaining alerts.
    """

    def __init__(
        self,
        endpoint: Optional[str],
        subscriptions: SubscriptionRepository,
        api_key: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._endpoint = endpoint
        self._subscriptions = subscriptions
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        if api_key:
            self._session.headers.update({"Authorization": f"Bearer {api_key}"})

    @property
    def enabled(self) -> bool:
        return bool(self._endpoint)

    def send(self, alert: ValuationAlert) -> bool:
        """
        Deliver a single alert.

        Returns:
            True if the endpoint accepted it
        """
        try:
            response = self._session.post(
                self._endpoint, json=alert.to_dict(), timeout=self._timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to send alert to %s for %s: %s", alert.email, alert.location, e)
            return False

        self._subscriptions.mark_notified(alert.subscription_id)
        logger.info("Alert sent to %s for %s", alert.email, alert.location)
        return True

    def dispatch(self, alerts: List[ValuationAlert]) -> int:
        """
        Deliver alerts.

        Returns:
            Number of alerts delivered
        """
        if not self.enabled:
            logger.warning("Alert endpoint not configured, %d alerts not sent", len(alerts))
            return 0
        return sum(1 for alert in alerts if self.send(alert))
