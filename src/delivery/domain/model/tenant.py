"""Tenant configuration read by the ordering core.

Settings are owned by the tenant administration screens; here they are
explicit, typed and defaulted so a tenant with a sparse settings document
still behaves predictably.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time

from delivery.domain.exceptions import ValidationError
from delivery.domain.model.value_objects import Money

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_CLOSED_MESSAGE = "The store is closed right now. Please come back later."


@dataclass(frozen=True)
class DeliveryZone:
    neighborhood: str
    delivery_fee: Money
    delivery_time: int  # minutes
    is_active: bool = True

    def matches(self, neighborhood: str) -> bool:
        return self.neighborhood.strip().casefold() == neighborhood.strip().casefold()


def _parse_clock(value: str) -> time:
    try:
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
    except ValueError as exc:
        raise ValidationError(f"Invalid time of day: {value!r}") from exc


@dataclass(frozen=True)
class DayHours:
    is_open: bool = False
    open_time: str = ""
    close_time: str = ""

    def contains(self, moment: time) -> bool:
        """True if *moment* falls inside this day's window.

        Equal opening and closing times mean open around the clock. A
        closing time earlier than the opening time means the window runs
        past midnight; only the evening part is checked here.
        """
        if not self.is_open or not self.open_time or not self.close_time:
            return False
        opens = _parse_clock(self.open_time)
        closes = _parse_clock(self.close_time)
        if opens == closes:
            return True
        if opens < closes:
            return opens <= moment < closes
        return moment >= opens

    def spills_over(self, moment: time) -> bool:
        """True if *moment* is in the after-midnight tail of this day's window."""
        if not self.is_open or not self.open_time or not self.close_time:
            return False
        opens = _parse_clock(self.open_time)
        closes = _parse_clock(self.close_time)
        return closes < opens and moment < closes


def _weekday_hours() -> DayHours:
    return DayHours(is_open=True, open_time="09:00", close_time="18:00")


@dataclass(frozen=True)
class BusinessHours:
    monday: DayHours = field(default_factory=_weekday_hours)
    tuesday: DayHours = field(default_factory=_weekday_hours)
    wednesday: DayHours = field(default_factory=_weekday_hours)
    thursday: DayHours = field(default_factory=_weekday_hours)
    friday: DayHours = field(default_factory=_weekday_hours)
    saturday: DayHours = field(default_factory=DayHours)
    sunday: DayHours = field(default_factory=DayHours)

    def for_weekday(self, weekday: int) -> DayHours:
        return getattr(self, WEEKDAYS[weekday])

    def is_open_at(self, moment: datetime) -> bool:
        today = self.for_weekday(moment.weekday())
        yesterday = self.for_weekday((moment.weekday() - 1) % 7)
        now = moment.time()
        return today.contains(now) or yesterday.spills_over(now)

    @staticmethod
    def always_open() -> BusinessHours:
        day = DayHours(is_open=True, open_time="00:00", close_time="00:00")
        return BusinessHours(*(day for _ in WEEKDAYS))


@dataclass(frozen=True)
class PaymentMethods:
    cash: bool = True
    pix: bool = True
    credit: bool = True
    debit: bool = False
    cash_ask_for_change: bool = False

    def enabled(self) -> list[str]:
        methods = []
        if self.cash:
            methods.append("Cash")
        if self.pix:
            methods.append("PIX")
        if self.credit:
            methods.append("Credit card")
        if self.debit:
            methods.append("Debit card")
        return methods


@dataclass(frozen=True)
class NotificationConfig:
    sound_notification_enabled: bool = True
    auto_print_enabled: bool = False


@dataclass(frozen=True)
class TenantDisplayInfo:
    name: str = ""
    phone: str = ""


@dataclass(frozen=True)
class MessageTemplates:
    """Customer notification texts; ``{customer}`` and ``{order_id}`` are filled in."""

    received: str = (
        "Hi {customer}, your order #{order_id} was received and we are already preparing it!"
    )
    out_for_delivery: str = (
        "Good news, {customer}! Your order #{order_id} just left for delivery."
    )
    ready_for_pickup: str = (
        "Hey {customer}! Your order #{order_id} is ready and waiting for pickup."
    )


@dataclass(frozen=True)
class TenantSettings:
    tenant_id: str
    name: str = ""
    phone: str = ""
    sound_notification_enabled: bool = True
    auto_print_enabled: bool = False
    business_hours: BusinessHours = field(default_factory=BusinessHours)
    closed_message: str = ""
    payment_methods: PaymentMethods = field(default_factory=PaymentMethods)
    message_templates: MessageTemplates = field(default_factory=MessageTemplates)
    whatsapp_country_code: str = "55"

    @property
    def notification_config(self) -> NotificationConfig:
        return NotificationConfig(
            sound_notification_enabled=self.sound_notification_enabled,
            auto_print_enabled=self.auto_print_enabled,
        )

    @property
    def display_info(self) -> TenantDisplayInfo:
        return TenantDisplayInfo(name=self.name, phone=self.phone)

    def is_open_at(self, moment: datetime) -> bool:
        return self.business_hours.is_open_at(moment)

    def closed_reason(self) -> str:
        return self.closed_message.strip() or DEFAULT_CLOSED_MESSAGE
