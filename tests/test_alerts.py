"""
Tests for valuation change alerts

Covers the 7-day / 30-day window split, thresholds, the 24 hour
notification cooldown and HTTP delivery.
"""

import pytest
import requests
from datetime import datetime, timedelta

from core.history import (
    AlertDispatcher,
    SubscriptionRepository,
    ValuationAlert,
    ValuationChangeMonitor,
    ValuationRepository,
)
from core.valuation import ValuationInput, ValuationResult


NOW = datetime(2026, 3, 31, 12, 0)
LOCATION = "Banani, Dhaka"


# =============================================================================
# Test Fixtures
# =============================================================================

class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Records POSTs instead of sending them."""

    def __init__(self, status_code=200, error=None):
        self.headers = {}
        self.posts = []
        self._status_code = status_code
        self._error = error

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self._error is not None:
            raise self._error
        return FakeResponse(self._status_code)


@pytest.fixture
def valuations():
    return ValuationRepository()


@pytest.fixture
def subscriptions():
    return SubscriptionRepository()


@pytest.fixture
def record_valuation(valuations):
    """Store a valuation of a given value, days_ago before NOW."""
    valuation_input = ValuationInput(
        property_type="apartment",
        location=LOCATION,
        area_sqft=1000,
        condition="good",
    )

    def _record(value: int, days_ago: float):
        result = ValuationResult.from_estimate(value, valuation_input.area_sqft)
        return valuations.save(
            "user-1", valuation_input, result, created_at=NOW - timedelta(days=days_ago)
        )
    return _record


@pytest.fixture
def monitor(valuations, subscriptions):
    return ValuationChangeMonitor(valuations, subscriptions)


# =============================================================================
# Location Trend
# =============================================================================

class TestLocationTrend:

    def test_recent_vs_older_averages(self, monitor, record_valuation):
        record_valuation(10_000_000, days_ago=20)
        record_valuation(12_000_000, days_ago=10)
        record_valuation(13_200_000, days_ago=2)

        trend = monitor.location_trend(LOCATION, NOW)

        assert trend.previous_average == 11_000_000
        assert trend.current_average == 13_200_000
        assert trend.change_percentage == pytest.approx(20.0)
        assert (trend.recent_count, trend.older_count) == (1, 2)

    def test_valuations_outside_lookback_ignored(self, monitor, record_valuation):
        record_valuation(1_000_000, days_ago=45)
        record_valuation(10_000_000, days_ago=20)
        record_valuation(10_000_000, days_ago=1)

        trend = monitor.location_trend(LOCATION, NOW)

        assert trend.previous_average == 10_000_000
        assert trend.change_percentage == 0

    def test_needs_both_windows(self, monitor, record_valuation):
        record_valuation(10_000_000, days_ago=3)
        record_valuation(11_000_000, days_ago=1)

        assert monitor.location_trend(LOCATION, NOW) is None

    def test_needs_two_valuations(self, monitor, record_valuation):
        record_valuation(10_000_000, days_ago=1)

        assert monitor.location_trend(LOCATION, NOW) is None


# =============================================================================
# Monitor
# =============================================================================

class TestValuationChangeMonitor:

    def test_alert_when_threshold_crossed(self, monitor, subscriptions, record_valuation):
        subscriptions.subscribe("user-1", LOCATION, "owner@example.com", 5.0)
        record_valuation(10_000_000, days_ago=15)
        record_valuation(10_600_000, days_ago=1)

        alerts = monitor.check(now=NOW)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.email == "owner@example.com"
        assert alert.old_value == 10_000_000
        assert alert.new_value == 10_600_000
        assert alert.direction == "increased"
        assert alert.to_dict()["change_percentage"] == 6.0

    def test_decrease_counts_against_threshold(self, monitor, subscriptions, record_valuation):
        subscriptions.subscribe("user-1", LOCATION, "owner@example.com", 5.0)
        record_valuation(10_000_000, days_ago=15)
        record_valuation(9_000_000, days_ago=1)

        alerts = monitor.check(now=NOW)

        assert len(alerts) == 1
        assert alerts[0].direction == "decreased"

    def test_no_alert_below_threshold(self, monitor, subscriptions, record_valuation):
        subscriptions.subscribe("user-1", LOCATION, "owner@example.com", 10.0)
        record_valuation(10_000_000, days_ago=15)
        record_valuation(10_600_000, days_ago=1)

        assert monitor.check(now=NOW) == []

    def test_cooldown_suppresses_repeat_alerts(self, monitor, subscriptions, record_valuation):
        subscription = subscriptions.subscribe("user-1", LOCATION, "owner@example.com")
        record_valuation(10_000_000, days_ago=15)
        record_valuation(12_000_000, days_ago=1)

        subscriptions.mark_notified(subscription.subscription_id, NOW - timedelta(hours=23))
        assert monitor.check(now=NOW) == []

        subscriptions.mark_notified(subscription.subscription_id, NOW - timedelta(hours=25))
        assert len(monitor.check(now=NOW)) == 1

    def test_only_subscribed_locations_checked(self, monitor, subscriptions, record_valuation):
        subscriptions.subscribe("user-1", "Gulshan, Dhaka", "owner@example.com")
        record_valuation(10_000_000, days_ago=15)
        record_valuation(20_000_000, days_ago=1)

        assert monitor.check(now=NOW) == []


# =============================================================================
# Dispatcher
# =============================================================================

@pytest.fixture
def alert(subscriptions):
    subscription = subscriptions.subscribe("user-1", LOCATION, "owner@example.com")
    return ValuationAlert(
        subscription_id=subscription.subscription_id,
        email="owner@example.com",
        location=LOCATION,
        old_value=10_000_000,
        new_value=11_000_000,
        change_percentage=10.0,
    )


class TestAlertDispatcher:

    def test_send_posts_json_and_marks_notified(self, subscriptions, alert):
        session = FakeSession()
        dispatcher = AlertDispatcher(
            "https://alerts.example.com/send", subscriptions, api_key="secret", session=session
        )

        assert dispatcher.dispatch([alert]) == 1

        post = session.posts[0]
        assert post["url"] == "https://alerts.example.com/send"
        assert post["json"]["new_value"] == 11_000_000
        assert post["timeout"] == 10
        assert session.headers["Authorization"] == "Bearer secret"
        assert subscriptions.get(alert.subscription_id).last_notified_at is not None

    def test_http_error_is_logged_not_raised(self, subscriptions, alert, caplog):
        session = FakeSession(status_code=500)
        dispatcher = AlertDispatcher("https://alerts.example.com/send", subscriptions, session=session)

        assert dispatcher.dispatch([alert]) == 0
        assert subscriptions.get(alert.subscription_id).last_notified_at is None
        assert "Failed to send alert" in caplog.text

    def test_connection_error_does_not_stop_batch(self, subscriptions, alert):
        session = FakeSession(error=requests.ConnectionError("refused"))
        dispatcher = AlertDispatcher("https://alerts.example.com/send", subscriptions, session=session)

        assert dispatcher.dispatch([alert, alert]) == 0
        assert len(session.posts) == 2

    def test_disabled_without_endpoint(self, subscriptions, alert):
        session = FakeSession()
        dispatcher = AlertDispatcher(None, subscriptions, session=session)

        assert dispatcher.enabled is False
        assert dispatcher.dispatch([alert]) == 0
        assert session.posts == []
