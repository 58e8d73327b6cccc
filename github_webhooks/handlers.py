"""Event handler types and the ``on`` builder."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, TypeVar, Union

from pydantic import BaseModel

from github_webhooks.context import Context
from github_webhooks.events import WebhookEvent, WebhookEventName

C = TypeVar("C", bound=Context)

HandlerResult = Union[C, None, Awaitable[Union[C, None]]]

# (event name, payload, context) -> new context or None
EventHandler = Callable[[WebhookEventName, WebhookEvent, C], HandlerResult]

# (payload, context) -> new context or None
PayloadHandler = Callable[[Any, C], HandlerResult]


async def resolve(result: Any) -> Any:
    """Await *result* if a handler returned an awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result


def on(
    target: WebhookEventName,
    handler: PayloadHandler,
    *,
    model: type[BaseModel] | None = None,
) -> EventHandler:
    """Build a handler that only runs for *target* events.

    The wrapped *handler* receives ``(payload, context)``. With *model* the
    payload is validated into that pydantic model first. Its return value, or
    the unchanged context when it returns ``None``, becomes the next context.
    For any other event the built handler returns ``None``.
    """
    target = str(getattr(target, "value", target))

    async def _handler(event: WebhookEventName, payload: WebhookEvent, context: Any) -> Any:
        if event != target:
            return None
        data: Any = model.model_validate(payload) if model is not None else payload
        return await resolve(handler(data, context)) or context

    _handler.__name__ = f"on_{target}"
    _handler.__qualname__ = _handler.__name__
    return _handler


def build_on(context_class: type[C]) -> Callable[..., EventHandler]:
    """Return ``on`` for handlers working with a ``Context`` subclass."""
    if not (isinstance(context_class, type) and issubclass(context_class, Context)):
        raise TypeError(f"{context_class!r} is not a Context subclass")

    def _on(
        target: WebhookEventName,
        handler: Callable[[Any, C], HandlerResult],
        *,
        model: type[BaseModel] | None = None,
    ) -> EventHandler:
        return on(target, handler, model=model)

    return _on
