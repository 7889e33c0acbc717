"""
Tests for auth handlers.
"""
import base64

import httpx
import respx

from rest_builder.auth.auth_handler import (
    BearerAuth,
    ChallengeBasicAuth,
    PreemptiveBasicAuth,
    _mask_value,
    create_auth_handler,
)
from rest_builder.config import AuthConfig
from rest_builder.types import AuthType

BASIC_USER_PASS = "Basic " + base64.b64encode(b"user:pass").decode()


def test_create_auth_handler_types():
    assert create_auth_handler(None) is None
    assert create_auth_handler(AuthConfig(type=AuthType.NONE)) is None

    basic = AuthConfig(type=AuthType.BASIC, username="user", password="pass")
    assert isinstance(create_auth_handler(basic), ChallengeBasicAuth)

    preemptive = AuthConfig(type=AuthType.PREEMPTIVE_BASIC, username="user", password="pass")
    assert isinstance(create_auth_handler(preemptive), PreemptiveBasicAuth)

    bearer = AuthConfig(type=AuthType.BEARER_TOKEN, password="token")
    assert isinstance(create_auth_handler(bearer), BearerAuth)


def test_preemptive_basic_sends_credentials_first():
    with respx.mock(base_url="https://example.com") as mock:
        route = mock.get("/secure").respond(200)
        with httpx.Client(auth=PreemptiveBasicAuth("user", "pass")) as client:
            client.get("https://example.com/secure")

        assert route.call_count == 1
        assert route.calls.last.request.headers["Authorization"] == BASIC_USER_PASS


def test_challenge_basic_answers_401():
    # Headers are captured at send time; the auth flow reuses the request object
    seen = []

    def server(request):
        auth = request.headers.get("Authorization")
        seen.append(auth)
        if auth is None:
            return httpx.Response(401, headers={"WWW-Authenticate": 'Basic realm="api"'})
        return httpx.Response(200, json={"ok": True})

    with respx.mock(base_url="https://example.com") as mock:
        route = mock.get("/secure").mock(side_effect=server)
        with httpx.Client(auth=ChallengeBasicAuth("user", "pass")) as client:
            response = client.get("https://example.com/secure")

        assert response.status_code == 200
        assert route.call_count == 2
        assert seen == [None, BASIC_USER_PASS]


def test_challenge_basic_without_challenge_sends_no_credentials():
    with respx.mock(base_url="https://example.com") as mock:
        route = mock.get("/open").respond(200)
        with httpx.Client(auth=ChallengeBasicAuth("user", "pass")) as client:
            client.get("https://example.com/open")

        assert route.call_count == 1
        assert "Authorization" not in route.calls.last.request.headers


def test_challenge_basic_ignores_other_schemes():
    with respx.mock(base_url="https://example.com") as mock:
        route = mock.get("/secure").respond(401, headers={"WWW-Authenticate": "Digest realm=x"})
        with httpx.Client(auth=ChallengeBasicAuth("user", "pass")) as client:
            response = client.get("https://example.com/secure")

        assert response.status_code == 401
        assert route.call_count == 1


def test_bearer_header():
    with respx.mock(base_url="https://example.com") as mock:
        route = mock.get("/me").respond(200)
        with httpx.Client(auth=BearerAuth("abc123")) as client:
            client.get("https://example.com/me")

        assert route.calls.last.request.headers["Authorization"] == "Bearer abc123"


def test_mask_value():
    assert _mask_value(None) == "<empty>"
    assert _mask_value("short") == "*****"
    assert _mask_value("0123456789abc") == "0123456789***"
