"""github_webhooks - receive, verify and dispatch GitHub App webhooks."""

from github_webhooks.config import Config, Settings, load_settings
from github_webhooks.context import Context
from github_webhooks.dispatcher import WebhookDispatcher, WebhookResponse, webhooks
from github_webhooks.errors import (
    InvalidPayloadError,
    MissingHeaderError,
    SignatureMismatchError,
    TokenExchangeError,
    UnsignedRequestError,
    WebhookError,
)
from github_webhooks.events import EventName, WebhookEvent, WebhookEventName
from github_webhooks.handlers import EventHandler, build_on, on
from github_webhooks.keygen import generate_secret

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Context",
    "EventHandler",
    "EventName",
    "InvalidPayloadError",
    "MissingHeaderError",
    "Settings",
    "SignatureMismatchError",
    "TokenExchangeError",
    "UnsignedRequestError",
    "WebhookDispatcher",
    "WebhookError",
    "WebhookEvent",
    "WebhookEventName",
    "WebhookResponse",
    "build_on",
    "generate_secret",
    "load_settings",
    "on",
    "webhooks",
]
