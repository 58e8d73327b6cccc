"""Per-delivery context threaded through the handler chain."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Context:
    """Information gathered about a delivery before handlers run.

    Extend it by subclassing with extra defaulted fields and passing the
    subclass to the dispatcher as ``context_class``. Handlers return a new
    instance (e.g. via ``dataclasses.replace``) to change it for the handlers
    that follow.
    """

    # A token to use on requests to the GitHub API
    token: str | None = None
    # The installation ID that triggered the event
    installation_id: int | None = None
