"""Webhook HTTP server using aiohttp."""

from __future__ import annotations

from aiohttp import web

from github_webhooks.config import ServerConfig
from github_webhooks.dispatcher import WebhookDispatcher
from github_webhooks.utils.logging import get_logger

log = get_logger(__name__)


class WebhookServer:
    """Receives GitHub deliveries and hands them to the dispatcher."""

    def __init__(self, config: ServerConfig, dispatcher: WebhookDispatcher) -> None:
        self._config = config
        self._dispatcher = dispatcher
        self._runner: web.AppRunner | None = None

    @property
    def path(self) -> str:
        path = self._config.path
        return path if path.startswith("/") else f"/{path}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if not self._dispatcher.config.secret:
            log.warning(
                "webhook_no_secret",
                msg="No webhook secret configured; signatures will not be verified.",
            )
        app = self.build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.bind, self._config.port)
        await site.start()
        log.info(
            "webhook_server_started",
            bind=self._config.bind,
            port=self._config.port,
            path=self.path,
            handlers=len(self._dispatcher.handlers),
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        log.info("webhook_server_stopped")

    # ------------------------------------------------------------------
    # App construction
    # ------------------------------------------------------------------

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post(self.path, self._dispatcher.dispatch_request)
        return app
