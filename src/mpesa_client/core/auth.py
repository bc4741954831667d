"""
OAuth2 client-credentials exchange against the gateway's token endpoint.
"""

from __future__ import annotations

import base64
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .errors import AuthenticationFailed, AuthFailureReason, GatewayRejected

__all__ = [
    "AUTHENTICATION_PATH",
    "AccessToken",
    "authenticate",
    "basic_auth_header",
    "parse_gateway_error",
]

AUTHENTICATION_PATH = "/oauth/v1/generate"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    access_token: str = field(repr=False)
    expires_in: int
    issued_at: float = field(default_factory=time.time)

    @property
    def expires_at(self) -> float:
        return self.issued_at + self.expires_in

    def is_expired(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return now >= self.expires_at

    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "AccessToken":
        token = payload["access_token"]
        if not isinstance(token, str) or not token:
            raise ValueError("access_token must be a non-empty string")
        return cls(access_token=token, expires_in=int(payload["expires_in"]))


def basic_auth_header(consumer_key: str, consumer_secret: str) -> str:
    raw = f"{consumer_key}:{consumer_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def parse_gateway_error(status_code: int, text: str) -> Optional[GatewayRejected]:
    """
    Interpret ``text`` as the gateway's error envelope.

    Returns ``None`` when the body is not JSON or lacks ``errorCode`` /
    ``errorMessage``.
    """
    try:
        body = json.loads(text)
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    code = body.get("errorCode")
    message = body.get("errorMessage")
    if code is None or message is None:
        return None
    request_id = body.get("requestId")
    return GatewayRejected(
        status_code=status_code,
        error_code=str(code),
        error_message=str(message),
        request_id=None if request_id is None else str(request_id),
    )


def authenticate(
    session: requests.Session,
    consumer_key: str,
    consumer_secret: str,
    base_url: str,
    *,
    timeout: float = 30,
) -> AccessToken:
    """
    Exchange the consumer key and secret for a bearer token.

    Exactly one HTTP request is made. Any failure raises
    :class:`AuthenticationFailed` whose ``reason`` tells a network problem
    apart from rejected credentials and from an unreadable response.
    """
    url = f"{base_url.rstrip('/')}{AUTHENTICATION_PATH}"
    logger.debug("Requesting access token from %s", url)

    try:
        response = session.get(
            url,
            params={"grant_type": "client_credentials"},
            headers={
                "Authorization": basic_auth_header(consumer_key, consumer_secret),
                "Accept": "application/json",
            },
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise AuthenticationFailed(
            f"Token request to {url} failed: {exc}",
            reason=AuthFailureReason.NETWORK,
        ) from exc

    if not 200 <= response.status_code < 300:
        raise AuthenticationFailed(
            f"Token endpoint responded with {response.status_code}: {response.text}",
            reason=AuthFailureReason.INVALID_CREDENTIALS,
            status_code=response.status_code,
            gateway_error=parse_gateway_error(response.status_code, response.text),
        )

    try:
        payload = response.json()
        return AccessToken.from_response(payload)
    except (ValueError, KeyError, TypeError) as exc:
        raise AuthenticationFailed(
            f"Malformed token response from {url}: {response.text}",
            reason=AuthFailureReason.MALFORMED_RESPONSE,
            status_code=response.status_code,
        ) from exc
