"""
Veilleur CLI.

Usage:
    veilleur track HASH [--operation NAME] [--config CONFIG]
    veilleur wait HASH [HASH ...] [--operation NAME] [--config CONFIG]
    veilleur serve [--config CONFIG]
"""

import asyncio
import json
import sys
from contextlib import aclosing
from typing import Optional, Tuple

import click

from veilleur.config.settings import load_config
from veilleur.di import DIContainer
from veilleur.domain.entities.status_event import StatusEvent
from veilleur.domain.exceptions import (
    BatchTrackingError,
    InvalidOperationRefError,
    UpstreamServiceError,
)
from veilleur.domain.value_objects.operation_ref import OperationRef
from veilleur.domain.value_objects.tracking_messages import TrackingMessages
from veilleur.infrastructure.monitoring import (
    bind_operation,
    setup_logging,
    unbind_operation,
)


def _build_container(config: Optional[str]) -> DIContainer:
    settings = load_config(config)
    setup_logging(level=settings.log_level, json_logs=settings.json_logs)
    return DIContainer(settings=settings)


def _build_messages(operation: Optional[str]) -> TrackingMessages:
    if operation:
        return TrackingMessages.for_operation(operation)
    return TrackingMessages()


async def _track(
    container: DIContainer, operation: OperationRef, messages: TrackingMessages
) -> Optional[StatusEvent]:
    token = bind_operation(operation.id)
    last: Optional[StatusEvent] = None
    try:
        async with aclosing(container.tracker.track(operation, messages)) as events:
            async for event in events:
                click.echo(json.dumps(event.to_dict()))
                last = event
    finally:
        unbind_operation(token)
        await container.shutdown()
    return last


async def _wait(
    container: DIContainer, hashes: Tuple[str, ...], messages: TrackingMessages
) -> dict:
    try:
        outcomes = await container.tracker.track_all(hashes, messages)
    finally:
        await container.shutdown()
    return {op_id: event.to_dict() for op_id, event in outcomes.items()}


@click.group()
def cli():
    """Veilleur - Transaction lifecycle tracking."""


@cli.command()
@click.argument("transaction_hash")
@click.option("--operation", "-o", default=None, help="Operation name (mint, burn, ...)")
@click.option("--config", "-c", default=None, help="Config file")
def track(transaction_hash, operation, config):
    """Stream status events for one transaction as JSON lines."""
    try:
        op = OperationRef(id=transaction_hash)
    except InvalidOperationRefError as e:
        click.echo(e.message, err=True)
        sys.exit(2)

    container = _build_container(config)
    try:
        last = asyncio.run(_track(container, op, _build_messages(operation)))
    except UpstreamServiceError as e:
        click.echo(f"Tracking aborted: {e.message}", err=True)
        sys.exit(1)

    if last is None or not last.is_confirmed:
        sys.exit(1)


@cli.command()
@click.argument("transaction_hashes", nargs=-1, required=True)
@click.option("--operation", "-o", default=None, help="Operation name (mint, burn, ...)")
@click.option("--config", "-c", default=None, help="Config file")
def wait(transaction_hashes, operation, config):
    """Wait until every transaction is indexed."""
    container = _build_container(config)
    try:
        result = asyncio.run(
            _wait(container, transaction_hashes, _build_messages(operation))
        )
    except InvalidOperationRefError as e:
        click.echo(e.message, err=True)
        sys.exit(2)
    except BatchTrackingError as e:
        click.echo(f"{e.operation_id}: {e.reason}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.option("--config", "-c", default=None, help="Config file")
def serve(config):
    """Run the HTTP API."""
    import uvicorn

    from veilleur.main import create_app

    container = _build_container(config)
    settings = container.settings
    click.echo(f"Starting Veilleur API on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        create_app(container),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
