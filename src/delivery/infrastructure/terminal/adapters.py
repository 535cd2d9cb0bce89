"""Terminal implementations of the operator-device ports."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import click
import structlog

from delivery.application.ports import Alert, AlertSink, Chime, PrintSurface
from delivery.domain.exceptions import PlaybackBlockedError

logger = structlog.get_logger(__name__)


class TerminalChime(Chime):
    """Rings the terminal bell; refuses to when output is not a terminal."""

    def __init__(self, require_tty: bool = True) -> None:
        self._require_tty = require_tty

    async def play(self) -> None:
        stream = click.get_text_stream("stdout")
        if self._require_tty and not stream.isatty():
            raise PlaybackBlockedError("No terminal attached to ring the bell")
        click.echo("\a", nl=False)


class ConsoleAlertSink(AlertSink):

    def show(self, alert: Alert) -> None:
        colour = "red" if alert.variant == "destructive" else "green"
        click.secho(f"[{alert.title}] {alert.description}", fg=colour, bold=True)

    def set_sound_prompt(self, visible: bool) -> None:
        if visible:
            click.secho("Sound notifications are blocked; alerts are still shown.", fg="yellow")
        else:
            click.secho("Sound notifications enabled.", fg="yellow")


class HtmlPrintSurface(PrintSurface):
    """Writes receipts under *spool_dir* and opens them in the default viewer.

    The receipt prints itself once loaded. A spool directory that cannot be
    written raises OSError, which the caller reports as blocked printing.
    """

    def __init__(self, spool_dir: Path, launch: bool = True) -> None:
        self._spool_dir = spool_dir
        self._launch = launch

    def print_document(self, html: str) -> None:
        self._spool_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        path = self._spool_dir / f"receipt-{stamp}.html"
        path.write_text(html, encoding="utf-8")
        logger.info("print.spooled", path=str(path))
        if self._launch:
            click.launch(str(path))
