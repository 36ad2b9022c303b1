"""
Valuation History

Persistence for saved valuations and price-alert subscriptions, plus the
change monitor that turns stored valuations into subscriber alerts.
"""

from core.history.schema import (
    DEFAULT_THRESHOLD_PERCENTAGE,
    ValuationRecord,
    ValuationSubscription,
)
from core.history.repository import (
    ValuationRepository,
    get_valuation_repository,
)
from core.history.subscriptions import (
    SubscriptionRepository,
    get_subscription_repository,
)
from core.history.alerts import (
    AlertDispatcher,
    LocationTrend,
    ValuationAlert,
    ValuationChangeMonitor,
)

__all__ = [
    "DEFAULT_THRESHOLD_PERCENTAGE",
    "ValuationRecord",
    "ValuationSubscription",
    "ValuationRepository",
    "get_valuation_repository",
    "SubscriptionRepository",
    "get_subscription_repository",
    "AlertDispatcher",
    "LocationTrend",
    "ValuationAlert",
    "ValuationChangeMonitor",
]
