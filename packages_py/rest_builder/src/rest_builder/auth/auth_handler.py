"""
Auth handlers for rest_builder, implemented as httpx auth flows.
"""
import base64
import logging
from typing import Generator, Optional

import httpx

from ..config import AuthConfig
from ..types import AuthType

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH]"


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


def _basic_header(username: str, password: str) -> str:
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


class PreemptiveBasicAuth(httpx.Auth):
    """Basic auth sent on the first request."""

    def __init__(self, username: str, password: str):
        self._username = username
        self._auth_header = _basic_header(username, password)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = self._auth_header
        logger.debug(f"{LOG_PREFIX} PreemptiveBasicAuth: username={_mask_value(self._username)}")
        yield request


class ChallengeBasicAuth(httpx.Auth):
    """
    Basic auth that waits for the server to ask for it.

    The request goes out without credentials; only a 401 carrying a
    ``WWW-Authenticate: Basic`` challenge triggers a second, authenticated
    attempt.
    """

    def __init__(self, username: str, password: str):
        self._username = username
        self._auth_header = _basic_header(username, password)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        response = yield request
        if response.status_code != 401:
            return

        challenge = response.headers.get("www-authenticate", "")
        if not challenge.lower().startswith("basic"):
            logger.debug(f"{LOG_PREFIX} ChallengeBasicAuth: unsupported challenge '{challenge}'")
            return

        logger.debug(
            f"{LOG_PREFIX} ChallengeBasicAuth: answering challenge, username={_mask_value(self._username)}"
        )
        request.headers["Authorization"] = self._auth_header
        yield request


class BearerAuth(httpx.Auth):
    """Bearer token auth handler."""

    def __init__(self, token: str):
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        logger.debug(f"{LOG_PREFIX} BearerAuth: token={_mask_value(self._token)}")
        yield request


def create_auth_handler(config: Optional[AuthConfig]) -> Optional[httpx.Auth]:
    """Create auth handler from config; None when no auth applies."""
    if config is None or config.type == AuthType.NONE:
        return None

    logger.debug(
        f"{LOG_PREFIX} create_auth_handler: type={config.type.value}, "
        f"username={_mask_value(config.username)}, secret={_mask_value(config.token)}"
    )

    if config.type == AuthType.BASIC:
        return ChallengeBasicAuth(config.username, config.token)

    if config.type == AuthType.PREEMPTIVE_BASIC:
        return PreemptiveBasicAuth(config.username, config.token)

    if config.type == AuthType.BEARER_TOKEN:
        return BearerAuth(config.token)

    raise ValueError(f"Unsupported auth type: {config.type}")
