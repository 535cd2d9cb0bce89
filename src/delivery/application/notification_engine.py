"""Real-time new-order notifications for an operator session.

One engine belongs to one operator session of one tenant. On activation it
stamps the session start and opens a live query over the tenant's incoming
orders. Every order id is handled once per engine:

* orders created at or before the session start are pre-existing ones the
  query replays on subscribe; they are marked as seen without any alert;
* orders created afterwards ring the chime (unless the tenant muted it),
  raise a transient alert and, when auto-print is on, print the receipt
  after a short delay and move the order to Preparing.

A second session for the same tenant runs its own engine and alerts on its
own; sessions are not coordinated.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from delivery.application.error_channel import ErrorChannel
from delivery.application.ports import Alert, AlertSink, Chime, PrintSurface
from delivery.domain.exceptions import PlaybackBlockedError, StoreError, StorePermissionError
from delivery.domain.model.order import Order, OrderStatus
from delivery.domain.model.status_machine import INCOMING_STATUSES
from delivery.domain.model.tenant import TenantSettings
from delivery.domain.repository.order_store import (
    ChangeType,
    OrderChange,
    OrderStore,
    Unsubscribe,
)
from delivery.domain.service.receipt import generate_receipt

logger = structlog.get_logger(__name__)

AUTO_PRINT_DELAY_SECONDS = 1.5
ALERT_DURATION_SECONDS = 8.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationEngine:

    def __init__(
        self,
        tenant_id: str,
        order_store: OrderStore,
        settings: TenantSettings,
        chime: Chime,
        alerts: AlertSink,
        printer: PrintSurface,
        errors: ErrorChannel,
        clock: Callable[[], datetime] = _utcnow,
        print_delay: float = AUTO_PRINT_DELAY_SECONDS,
        alert_duration: float = ALERT_DURATION_SECONDS,
    ) -> None:
        self._tenant_id = tenant_id
        self._order_store = order_store
        self._settings = settings
        self._chime = chime
        self._alerts = alerts
        self._printer = printer
        self._errors = errors
        self._clock = clock
        self._print_delay = print_delay
        self._alert_duration = alert_duration

        self._session_start: datetime | None = None
        self._processed: set[str] = set()
        self._unsubscribe: Unsubscribe | None = None
        self._tasks: set[asyncio.Task] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._sound_blocked = False
        self._retry_armed = False

    # --- Lifecycle ------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._unsubscribe is not None

    @property
    def session_start(self) -> datetime | None:
        return self._session_start

    @property
    def processed_ids(self) -> frozenset[str]:
        return frozenset(self._processed)

    @property
    def sound_blocked(self) -> bool:
        return self._sound_blocked

    async def activate(self) -> None:
        """Stamp the session start and open the live query."""
        if self.is_active:
            return
        self._loop = asyncio.get_running_loop()
        self._session_start = self._clock()
        self._processed = set()
        logger.info(
            "notifications.activated",
            tenant_id=self._tenant_id,
            session_start=self._session_start.isoformat(),
        )
        self._unsubscribe = self._order_store.subscribe_new_orders(
            self._tenant_id,
            INCOMING_STATUSES,
            self._on_change,
            self._on_error,
        )

    def deactivate(self) -> None:
        """Close the live query and drop any pending alert or print."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._tasks):
            task.cancel()
        logger.info("notifications.deactivated", tenant_id=self._tenant_id)

    async def wait_idle(self) -> None:
        """Wait until every scheduled alert and print has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # --- Subscription callbacks -----------------------------------------------

    def _on_change(self, change: OrderChange) -> None:
        if change.type is not ChangeType.ADDED:
            return
        order = change.order
        if order.id is None or order.id in self._processed:
            return
        self._processed.add(order.id)

        if self._session_start is None or order.created_at <= self._session_start:
            logger.debug("notifications.preexisting_order", order_id=order.id)
            return

        logger.info("notifications.new_order", tenant_id=self._tenant_id, order_id=order.id)
        task = self._loop.create_task(self._announce(order))  # type: ignore[union-attr]
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_error(self, error: StoreError) -> None:
        self._errors.emit(error)

    # --- Side effects ---------------------------------------------------------

    async def _announce(self, order: Order) -> None:
        if self._settings.sound_notification_enabled:
            await self._play_chime()

        self._alerts.show(
            Alert(
                title="New order received!",
                description=(
                    f"Order {order.short_code} from {order.customer.name}: "
                    f"{order.total_amount}"
                ),
                duration_seconds=self._alert_duration,
            )
        )

        if self._settings.auto_print_enabled:
            await asyncio.sleep(self._print_delay)
            self._auto_print(order)

    async def _play_chime(self) -> None:
        try:
            await self._chime.play()
        except PlaybackBlockedError:
            logger.warning("notifications.playback_blocked", tenant_id=self._tenant_id)
            self._retry_armed = True
            if not self._sound_blocked:
                self._sound_blocked = True
                self._alerts.set_sound_prompt(True)
                self._alerts.show(
                    Alert(
                        title="Sound notification failed",
                        description="Tap anywhere on the page to enable sound again.",
                        duration_seconds=self._alert_duration,
                        variant="destructive",
                    )
                )

    async def user_interaction(self) -> bool:
        """Retry a blocked chime on the first user gesture after it was blocked.

        Only that first gesture retries, and only once. If the retry is
        refused, later gestures do nothing until another chime is blocked,
        which arms a new retry. Returns True when sound is (now) available;
        a successful retry clears the blocked state for the rest of the
        session.
        """
        if not self._sound_blocked:
            return True
        if not self._retry_armed:
            return False
        self._retry_armed = False
        try:
            await self._chime.play()
        except PlaybackBlockedError:
            logger.info("notifications.playback_still_blocked", tenant_id=self._tenant_id)
            return False
        self._sound_blocked = False
        self._alerts.set_sound_prompt(False)
        logger.info("notifications.sound_enabled", tenant_id=self._tenant_id)
        return True

    def _auto_print(self, order: Order) -> None:
        html = generate_receipt(order, self._settings.display_info)
        try:
            self._printer.print_document(html)
        except OSError as exc:
            logger.warning("notifications.print_failed", order_id=order.id, error=str(exc))
            self._alerts.show(
                Alert(
                    title="Printing blocked",
                    description="Allow the print window to open for automatic printing.",
                    duration_seconds=self._alert_duration,
                    variant="destructive",
                )
            )
            return

        try:
            self._order_store.update_order_status(
                self._tenant_id, order.id, OrderStatus.PREPARING  # type: ignore[arg-type]
            )
        except StoreError as exc:
            if isinstance(exc, StorePermissionError):
                self._errors.emit(exc)
            logger.warning(
                "notifications.status_update_failed",
                order_id=order.id,
                error=str(exc),
            )
        else:
            logger.info("notifications.auto_printed", order_id=order.id)
