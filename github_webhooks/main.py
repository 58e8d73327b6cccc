"""github_webhooks entry point: serves an example GitHub App."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Any

import click

from github_webhooks.config import Settings, load_settings
from github_webhooks.context import Context
from github_webhooks.dispatcher import WebhookDispatcher
from github_webhooks.events import EventName, IssueCommentEvent
from github_webhooks.handlers import on
from github_webhooks.keygen import generate_secret
from github_webhooks.server import WebhookServer
from github_webhooks.utils.logging import get_logger, setup_logging

log = get_logger(__name__)


def log_issue_comment(event: IssueCommentEvent, _context: Context) -> None:
    log.info(
        "issue_commented",
        user=event.comment.user.login,
        issue=event.issue.number,
        body=event.comment.body,
    )


def build_dispatcher(settings: Settings, *handlers: Any) -> WebhookDispatcher:
    return WebhookDispatcher(
        settings.to_config(),
        handlers,
        github_url=settings.github_url,
        token_timeout=settings.token_timeout,
        handler_timeout=settings.handler_timeout,
    )


async def run(settings: Settings) -> None:
    dispatcher = build_dispatcher(
        settings,
        on(EventName.ISSUE_COMMENT, log_issue_comment, model=IssueCommentEvent),
    )
    server = WebhookServer(settings.server, dispatcher)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        log.info("shutdown_signal")
        stop_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

    await server.start()

    try:
        if sys.platform == "win32":
            while not stop_event.is_set():
                await asyncio.sleep(1)
        else:
            await stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await server.stop()


@click.command()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--host", default=None, help="Address to bind")
@click.option("--port", type=int, default=None, help="Port to listen on")
@click.option("--path", default=None, help="URL path receiving deliveries")
def cli(
    config_path: str | None,
    log_level: str | None,
    host: str | None,
    port: int | None,
    path: str | None,
) -> None:
    """Receive GitHub App webhooks and log issue comments."""
    settings = load_settings(config_path)
    if log_level:
        settings.log_level = log_level
    if host:
        settings.server.bind = host
    if port is not None:
        settings.server.port = port
    if path:
        settings.server.path = path
    setup_logging(level=settings.log_level, json_output=settings.log_json)

    if not settings.app_secret:
        settings.app_secret = generate_secret()
        # Printed, not logged: the log pipeline redacts secrets
        click.echo(f"Secret: {settings.app_secret}")

    asyncio.run(run(settings))


if __name__ == "__main__":
    cli()
