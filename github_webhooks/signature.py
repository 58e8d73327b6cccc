"""Webhook signature computation and verification."""

from __future__ import annotations

import hashlib
import hmac
import json
import re
from typing import Any

SIGNATURE_PREFIX = "sha256="

# A run of backslashes followed by "u" and four hex digits. Only an odd run
# is a real escape; an even run is escaped backslashes followed by a "u".
_UNICODE_ESCAPE_RE = re.compile(r"(\\+)u([0-9a-fA-F]{4})")


def _upper_escape(match: re.Match[str]) -> str:
    backslashes, digits = match.groups()
    if len(backslashes) % 2 == 0:
        return match.group(0)
    return f"{backslashes}u{digits.upper()}"


def canonicalize(payload: Any) -> str:
    """Serialize *payload* the way GitHub signed it.

    Non-ASCII text is written as-is. The characters that still need an
    escape (control characters) come out of ``json.dumps`` with lowercase hex
    digits while GitHub uses uppercase ones (``\\u001F``), so the digits of
    every escape are uppercased. Applying this to its own output is a no-op.
    """
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return _UNICODE_ESCAPE_RE.sub(_upper_escape, text)


def sign_body(body: bytes, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature of raw *body* bytes."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def sign(payload: Any, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature of a parsed payload."""
    return sign_body(canonicalize(payload).encode("utf-8"), secret)


def _matches(expected: str, signature: str) -> bool:
    if len(signature) != len(expected):
        return False
    return hmac.compare_digest(expected.encode(), signature.encode())


def verify(payload: Any, signature: str, secret: str) -> bool:
    """Check *signature* against the canonical serialization of *payload*."""
    return _matches(sign(payload, secret), signature)


def verify_body(body: bytes, signature: str, secret: str) -> bool:
    """Check *signature* against the raw request body."""
    return _matches(sign_body(body, secret), signature)
