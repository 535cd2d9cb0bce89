"""Unit tests for tenant settings: business hours and payment methods."""

from datetime import datetime

import pytest

from delivery.domain.exceptions import ValidationError
from delivery.domain.model.tenant import (
    DEFAULT_CLOSED_MESSAGE,
    BusinessHours,
    DayHours,
    DeliveryZone,
    PaymentMethods,
    TenantSettings,
)
from delivery.domain.model.value_objects import Money

# 2024-05-06 is a Monday.
MONDAY_NOON = datetime(2024, 5, 6, 12, 0)
MONDAY_EVENING = datetime(2024, 5, 6, 19, 0)
SATURDAY_NOON = datetime(2024, 5, 11, 12, 0)


class TestBusinessHours:

    def test_default_weekday_window(self):
        hours = BusinessHours()
        assert hours.is_open_at(MONDAY_NOON)
        assert not hours.is_open_at(MONDAY_EVENING)

    def test_default_weekend_closed(self):
        assert not BusinessHours().is_open_at(SATURDAY_NOON)

    def test_closing_time_is_exclusive(self):
        assert not BusinessHours().is_open_at(datetime(2024, 5, 6, 18, 0))

    def test_overnight_window_spills_into_next_day(self):
        late = DayHours(is_open=True, open_time="18:00", close_time="02:00")
        hours = BusinessHours(friday=late, saturday=DayHours())
        assert hours.is_open_at(datetime(2024, 5, 10, 23, 30))  # Friday night
        assert hours.is_open_at(datetime(2024, 5, 11, 1, 30))  # Saturday small hours
        assert not hours.is_open_at(datetime(2024, 5, 11, 3, 0))

    def test_always_open(self):
        hours = BusinessHours.always_open()
        assert hours.is_open_at(datetime(2024, 5, 12, 23, 59))
        assert hours.is_open_at(datetime(2024, 5, 12, 0, 0))

    def test_malformed_time_rejected(self):
        day = DayHours(is_open=True, open_time="9am", close_time="18:00")
        with pytest.raises(ValidationError, match="Invalid time of day"):
            day.contains(MONDAY_NOON.time())


class TestTenantSettings:

    def test_closed_reason_falls_back_to_default(self):
        assert TenantSettings("t1").closed_reason() == DEFAULT_CLOSED_MESSAGE

    def test_closed_reason_uses_tenant_message(self):
        settings = TenantSettings("t1", closed_message="Back on Monday!")
        assert settings.closed_reason() == "Back on Monday!"

    def test_default_payment_methods(self):
        assert PaymentMethods().enabled() == ["Cash", "PIX", "Credit card"]

    def test_notification_config(self):
        settings = TenantSettings("t1", sound_notification_enabled=False, auto_print_enabled=True)
        config = settings.notification_config
        assert not config.sound_notification_enabled
        assert config.auto_print_enabled


class TestDeliveryZone:

    def test_neighborhood_match_ignores_case_and_spaces(self):
        zone = DeliveryZone("Centro", Money.of("5.00"), 30)
        assert zone.matches("  centro ")
        assert not zone.matches("Centro Sul")
