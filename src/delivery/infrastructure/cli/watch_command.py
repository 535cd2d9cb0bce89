"""Operator notification loop."""

from __future__ import annotations

import asyncio

import click
import structlog

from delivery.domain.exceptions import StoreError, StorePermissionError
from delivery.infrastructure.bootstrap import Container

logger = structlog.get_logger(__name__)


def _report(error: StoreError) -> None:
    if isinstance(error, StorePermissionError):
        click.secho(f"Permission denied: {error.operation} on {error.path}", fg="red", err=True)
    else:
        click.secho(f"Store error: {error}", fg="red", err=True)


async def _run(container: Container, iterations: int | None) -> None:
    engine = container.notification_engine()
    unsubscribe = container.errors.subscribe(_report)
    await engine.activate()
    click.echo(f"Watching new orders for '{container.tenant_id}'. Ctrl+C to stop.")
    try:
        count = 0
        while iterations is None or count < iterations:
            await asyncio.sleep(container.settings.poll_interval)
            container.order_store.refresh()
            count += 1
        await engine.wait_idle()
    finally:
        engine.deactivate()
        unsubscribe()


@click.command("watch")
@click.option(
    "--iterations",
    type=int,
    default=None,
    help="Stop after this many polls (runs until interrupted by default).",
)
@click.pass_obj
def watch(container: Container, iterations: int | None) -> None:
    """Alert, and optionally auto-print, as new orders arrive."""
    try:
        asyncio.run(_run(container, iterations))
    except KeyboardInterrupt:
        logger.info("watch.stopped", tenant_id=container.tenant_id)
        click.echo("Stopped.")
