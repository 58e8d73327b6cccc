"""Webhook delivery pipeline: verify, enrich, dispatch."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

import httpx
import structlog
from aiohttp import web
from multidict import CIMultiDict, CIMultiDictProxy

from github_webhooks import signature as sig
from github_webhooks.config import DEFAULT_GITHUB_URL, Config
from github_webhooks.context import Context
from github_webhooks.errors import (
    InvalidPayloadError,
    MissingHeaderError,
    SignatureMismatchError,
    UnsignedRequestError,
    status_of,
)
from github_webhooks.events import WebhookEvent, WebhookEventName, installation_id_of
from github_webhooks.handlers import EventHandler, resolve
from github_webhooks.tokens import USER_AGENT, fetch_token
from github_webhooks.utils.logging import get_logger

log = get_logger(__name__)

EVENT_HEADER = "x-github-event"
SIGNATURE_HEADER = "x-hub-signature-256"
DELIVERY_HEADER = "x-github-delivery"

RESPONSE_HEADERS = {
    "user-agent": USER_AGENT,
    "content-type": "application/json",
}

BodyReader = Callable[[], Awaitable[bytes]]
TokenFetcher = Callable[..., Awaitable[str]]


@dataclass
class WebhookResponse:
    status: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=lambda: dict(RESPONSE_HEADERS))

    def to_json(self) -> str:
        return json.dumps(self.body)


class WebhookDispatcher:
    """Runs every delivery through the handler chain.

    Stages run one after another and the first exception ends the delivery
    with an error response:

    1. read the event name and signature headers
    2. reject unsigned requests when a secret is configured
    3. parse the body and verify its signature
    4. seed the context with the installation id
    5. fetch an installation token when app credentials are configured
    6. call the handlers in order, each one may replace the context
    """

    def __init__(
        self,
        config: Config,
        handlers: Sequence[EventHandler] = (),
        *,
        context_class: type[Context] = Context,
        github_url: str = DEFAULT_GITHUB_URL,
        token_timeout: float = 10.0,
        handler_timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        token_fetcher: TokenFetcher = fetch_token,
    ) -> None:
        self._config = config
        self._handlers: list[EventHandler] = list(handlers)
        self._context_class = context_class
        self._github_url = github_url
        self._token_timeout = token_timeout
        self._handler_timeout = handler_timeout
        self._http_client = http_client
        self._token_fetcher = token_fetcher

    @property
    def config(self) -> Config:
        return self._config

    @property
    def handlers(self) -> tuple[EventHandler, ...]:
        return tuple(self._handlers)

    def register(self, *handlers: EventHandler) -> None:
        self._handlers.extend(handlers)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def dispatch(
        self,
        headers: Mapping[str, str],
        body: Union[bytes, bytearray, memoryview, BodyReader],
    ) -> WebhookResponse:
        """Process one delivery and return the response to send back.

        *body* is either the buffered request body or a coroutine function
        returning it; it is read at most once, after the headers pass.
        """
        started = time.monotonic()
        headers = CIMultiDictProxy(CIMultiDict(headers))
        status: int | None = None

        with structlog.contextvars.bound_contextvars(
            github_event=headers.get(EVENT_HEADER),
            delivery=headers.get(DELIVERY_HEADER),
        ):
            try:
                await self._process(headers, body)
            except Exception as e:
                status = status_of(e)
                log.warning(
                    "webhook_failed",
                    status=status,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                response = WebhookResponse(
                    status=status,
                    body={"error": {"type": type(e).__name__, "message": str(e)}},
                )
            else:
                status = 200
                response = WebhookResponse(status=200, body={"success": True})
            finally:
                # Also reached on cancellation, with no status
                log.info(
                    "webhook_done",
                    status=status,
                    duration_ms=round((time.monotonic() - started) * 1000, 2),
                )

        return response

    async def dispatch_request(self, request: web.Request) -> web.Response:
        """aiohttp handler: adapt *request* to :meth:`dispatch`."""
        result = await self.dispatch(request.headers, request.read)
        return web.Response(
            status=result.status,
            body=result.to_json().encode("utf-8"),
            headers=result.headers,
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _process(
        self,
        headers: CIMultiDictProxy[str],
        body: Union[bytes, bytearray, memoryview, BodyReader],
    ) -> Context:
        event, signature = self._parse_headers(headers)
        secret = self._config.secret

        if secret and not signature:
            raise UnsignedRequestError()

        raw = bytes(body) if isinstance(body, (bytes, bytearray, memoryview)) else await body()
        payload = self._parse_payload(raw)

        if secret and signature:
            if not (
                sig.verify_body(raw, signature, secret)
                or sig.verify(payload, signature, secret)
            ):
                raise SignatureMismatchError()
        else:
            log.warning("signature_skipped", reason="no secret configured")

        context = self._seed_context(payload)
        context = await self._attach_token(context)

        for handler in self._handlers:
            context = await self._run_handler(handler, event, payload, context) or context

        return context

    def _parse_headers(self, headers: CIMultiDictProxy[str]) -> tuple[WebhookEventName, str | None]:
        event = headers.get(EVENT_HEADER)
        signature = headers.get(SIGNATURE_HEADER)

        if not event:
            raise MissingHeaderError(EVENT_HEADER)

        if not signature:
            log.warning("signature_header_missing", header=SIGNATURE_HEADER)
            signature = None

        return event, signature

    @staticmethod
    def _parse_payload(raw: bytes) -> WebhookEvent:
        try:
            payload = json.loads(raw)
        except ValueError as e:
            raise InvalidPayloadError(f"Body is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise InvalidPayloadError("Body must be a JSON object")
        return payload

    def _seed_context(self, payload: WebhookEvent) -> Context:
        installation_id = installation_id_of(payload)
        if installation_id is None:
            return self._context_class()
        return self._context_class(installation_id=installation_id)

    async def _attach_token(self, context: Context) -> Context:
        app_id = self._config.app_id
        private_key = self._config.private_key
        installation_id = context.installation_id

        if not (app_id and private_key and installation_id):
            log.warning(
                "token_fetch_skipped",
                has_app_id=bool(app_id),
                has_private_key=bool(private_key),
                installation_id=installation_id,
            )
            return context

        token = await self._token_fetcher(
            app_id,
            installation_id,
            private_key,
            github_url=self._github_url,
            client=self._http_client,
            timeout=self._token_timeout,
        )
        return dataclasses.replace(context, token=token)

    async def _run_handler(
        self,
        handler: EventHandler,
        event: WebhookEventName,
        payload: WebhookEvent,
        context: Context,
    ) -> Context | None:
        call = resolve(handler(event, payload, context))
        if self._handler_timeout is None:
            return await call
        return await asyncio.wait_for(call, self._handler_timeout)


def webhooks(config: Config | None = None, *handlers: EventHandler, **options: Any) -> WebhookDispatcher:
    """Create a dispatcher for *config* with *handlers* registered in order."""
    return WebhookDispatcher(config or Config(), handlers, **options)
