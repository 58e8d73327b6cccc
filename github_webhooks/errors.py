"""Errors raised while processing a webhook delivery.

Every error carries the HTTP status the dispatcher answers with. Errors that
do not come from this module are answered with their own ``status``,
``status_code`` or ``code`` attribute when it looks like an HTTP status, and
500 otherwise.
"""

from __future__ import annotations


class WebhookError(Exception):
    """Base class for delivery failures."""

    status: int = 500

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        if status is not None:
            self.status = status


class MissingHeaderError(WebhookError):
    def __init__(self, header: str) -> None:
        super().__init__(f'Header "{header}" not present')
        self.header = header


class UnsignedRequestError(WebhookError):
    def __init__(self) -> None:
        super().__init__("Unsigned request")


class InvalidPayloadError(WebhookError):
    status = 400


class SignatureMismatchError(WebhookError):
    status = 401

    def __init__(self) -> None:
        super().__init__("Signature does not match payload")


class TokenExchangeError(WebhookError):
    """The installation access token could not be obtained."""

    status = 502

    def __init__(self, message: str, status: int | None = None, installation_id: int | None = None) -> None:
        super().__init__(message, status)
        self.installation_id = installation_id


def status_of(error: BaseException) -> int:
    """Return the HTTP status to answer *error* with."""
    for attr in ("status", "status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and 100 <= value <= 599:
            return value
    return 500
