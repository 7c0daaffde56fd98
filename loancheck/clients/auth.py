from __future__ import annotations

import logging
import math
from typing import Optional

import httpx

from loancheck.core.config import RemoteConfig, config
from loancheck.core.errors import TokenFetchFailed
from loancheck.core.token_cache import TokenCache

logger = logging.getLogger(__name__)


def fetch_token(remote: Optional[RemoteConfig] = None) -> tuple[str, float]:
    """Authenticates with the configured client credentials.

    Returns the issued bearer token and its lifetime in seconds. Any transport,
    HTTP or response-shape failure raises TokenFetchFailed; nothing is retried.
    """
    remote = remote or config.remote
    headers = {"Content-Type": "application/json"}
    try:
        response = httpx.post(
            remote.auth_url,
            json=remote.credentials_payload(),
            headers=headers,
            timeout=remote.timeout_s,
        )
        response.raise_for_status()
        body = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Token fetch failed (url=%s): %s", remote.auth_url, exc)
        raise TokenFetchFailed() from exc

    data = body.get("data") if isinstance(body, dict) else None
    token = data.get("jwtToken") if isinstance(data, dict) else None
    if not token or not isinstance(token, str):
        logger.warning("Token fetch returned no jwtToken (url=%s)", remote.auth_url)
        raise TokenFetchFailed()

    expires_in = data.get("expiresIn") or remote.default_expires_in_s
    try:
        expires_in_s = float(expires_in)
    except (TypeError, ValueError):
        expires_in_s = float(remote.default_expires_in_s)
    if not math.isfinite(expires_in_s):
        logger.warning("Token fetch returned unusable expiresIn=%r; using default", expires_in)
        expires_in_s = float(remote.default_expires_in_s)
    logger.info("Token issued (expires_in_s=%s)", expires_in_s)
    return token, expires_in_s


class TokenProvider:
    """Hands out a valid bearer token, authenticating at most once per call."""

    def __init__(self, cache: TokenCache, remote: Optional[RemoteConfig] = None) -> None:
        self.cache = cache
        self.remote = remote

    def cached(self) -> Optional[str]:
        return self.cache.read_valid()

    def refresh(self) -> str:
        token, expires_in_s = fetch_token(self.remote)
        self.cache.save(token, expires_in_s)
        return token

    def get_token(self) -> Optional[str]:
        token = self.cache.read_valid()
        if token:
            return token
        return self.refresh()

    def invalidate(self) -> None:
        self.cache.invalidate()
