"""Outbound ports used by the notification engine.

The operator's device provides these: something that makes a sound,
somewhere to flash an alert, and a surface that prints HTML.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Alert:
    title: str
    description: str
    duration_seconds: float
    variant: str = "default"  # "default" | "destructive"


class Chime(ABC):

    @abstractmethod
    async def play(self) -> None:
        """Play the new-order sound.

        Raises PlaybackBlockedError if the runtime refuses autoplay.
        """


class AlertSink(ABC):

    @abstractmethod
    def show(self, alert: Alert) -> None:
        """Display a transient alert for ``alert.duration_seconds``."""

    @abstractmethod
    def set_sound_prompt(self, visible: bool) -> None:
        """Show or hide the persistent "tap to enable sound" affordance."""


class PrintSurface(ABC):

    @abstractmethod
    def print_document(self, html: str) -> None:
        """Open *html* on a print surface; the document prints itself."""
