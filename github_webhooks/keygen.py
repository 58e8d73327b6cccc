"""Webhook secret generation."""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.ascii_letters + string.digits


def generate_secret(length: int = 32) -> str:
    """Generate a random alphanumeric secret to sign and verify deliveries."""
    if length < 1:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
