"""GitHub App assertion signing and installation token exchange."""

from __future__ import annotations

import time
from typing import Any

import httpx
import jwt

from github_webhooks.config import DEFAULT_GITHUB_URL
from github_webhooks.errors import TokenExchangeError
from github_webhooks.utils.logging import get_logger

log = get_logger(__name__)

USER_AGENT = "github_webhooks"
MEDIA_TYPE = "application/vnd.github.v3+json"

# GitHub rejects app JWTs valid for more than ten minutes
JWT_LIFETIME_SECONDS = 10 * 60
# Backdated to tolerate clock drift between us and GitHub
JWT_CLOCK_SKEW_SECONDS = 60


def create_app_jwt(app_id: str, private_key: str, now: float | None = None) -> str:
    """Create an RS256 JWT that authenticates as the GitHub App itself."""
    issued = int(time.time() if now is None else now)
    payload: dict[str, Any] = {
        "iat": issued - JWT_CLOCK_SKEW_SECONDS,
        "exp": issued + JWT_LIFETIME_SECONDS,
        "iss": app_id,
    }
    return jwt.encode(payload, private_key, algorithm="RS256")


async def fetch_token(
    app_id: str,
    installation_id: int,
    private_key: str,
    *,
    github_url: str = DEFAULT_GITHUB_URL,
    client: httpx.AsyncClient | None = None,
    timeout: float = 10.0,
) -> str:
    """Exchange an app JWT for an installation access token.

    Args:
        app_id: The GitHub App ID, used as the JWT issuer.
        installation_id: Installation the token is scoped to.
        private_key: PEM encoded RSA private key of the app.
        github_url: API origin, overridable for tests and GitHub Enterprise.
        client: Optional shared client. It is left open.
        timeout: Seconds before the request is abandoned.

    Returns:
        The installation access token.

    Raises:
        TokenExchangeError: On network errors, non-2xx responses or a
            response without a ``token`` field.
    """
    app_token = create_app_jwt(app_id, private_key)
    url = f"{github_url.rstrip('/')}/app/installations/{installation_id}/access_tokens"
    headers = {
        "authorization": f"Bearer {app_token}",
        "accept": MEDIA_TYPE,
        "content-type": MEDIA_TYPE,
        "user-agent": USER_AGENT,
    }

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout)
    try:
        resp = await client.post(url, headers=headers, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPStatusError as e:
        log.error(
            "token_exchange_rejected",
            installation_id=installation_id,
            status=e.response.status_code,
        )
        raise TokenExchangeError(
            f"Token exchange failed with HTTP {e.response.status_code}",
            status=e.response.status_code,
            installation_id=installation_id,
        ) from e
    except httpx.HTTPError as e:
        log.error("token_exchange_unreachable", installation_id=installation_id, error=str(e))
        raise TokenExchangeError(
            f"Token exchange request failed: {e}",
            installation_id=installation_id,
        ) from e
    except ValueError as e:
        raise TokenExchangeError(
            "Token exchange returned a malformed response",
            installation_id=installation_id,
        ) from e
    finally:
        if owns_client:
            await client.aclose()

    token = data.get("token") if isinstance(data, dict) else None
    if not isinstance(token, str) or not token:
        raise TokenExchangeError(
            "Token exchange response has no token",
            installation_id=installation_id,
        )

    log.debug("token_exchanged", installation_id=installation_id, expires_at=data.get("expires_at"))
    return token
