"""Structured channel for order-store errors.

Permission failures carry the path, operation and payload that were
rejected. They are logged for developers and handed to any listener
(the CLI prints them) instead of being raised into the caller.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from delivery.domain.exceptions import StoreError, StorePermissionError

logger = structlog.get_logger(__name__)

ErrorListener = Callable[[StoreError], None]


class ErrorChannel:

    def __init__(self) -> None:
        self._listeners: list[ErrorListener] = []

    def subscribe(self, listener: ErrorListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, error: StoreError) -> None:
        if isinstance(error, StorePermissionError):
            logger.error("store.permission_denied", **error.context())
        else:
            logger.error("store.error", error=str(error))

        for listener in list(self._listeners):
            try:
                listener(error)
            except Exception:
                logger.exception("error_channel.listener_failed")
