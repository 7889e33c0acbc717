"""
Tests for config models.
"""
import pytest
from pydantic import SecretStr, ValidationError

from rest_builder import RequestBuilder
from rest_builder.config import (
    DEFAULT_TIMEOUT_MS,
    AuthConfig,
    RequestConfig,
    TimeoutConfig,
    normalize_timeout,
    resolve_timeout_ms,
)
from rest_builder.types import AuthType


def test_auth_config_validation_basic():
    """Basic auth needs username and password."""
    config = AuthConfig(type=AuthType.BASIC, username="user", password=SecretStr("pass"))
    assert config.token == "pass"

    with pytest.raises(ValidationError) as exc:
        AuthConfig(type=AuthType.PREEMPTIVE_BASIC, username="user")
    assert "preemptive_basic auth requires 'username' and 'password'" in str(exc.value)


def test_auth_config_validation_bearer():
    config = AuthConfig(type="bearer_token", password="tok")
    assert config.type == AuthType.BEARER_TOKEN
    assert config.token == "tok"

    with pytest.raises(ValidationError):
        AuthConfig(type=AuthType.BEARER_TOKEN)


def test_auth_config_hides_secret_in_repr():
    config = AuthConfig(type=AuthType.BASIC, username="user", password="s3cret")
    assert "s3cret" not in repr(config)


def test_base_uri_is_trimmed():
    config = RequestConfig().with_base_uri("  https://api.example.com  ")
    assert config.base_uri == "https://api.example.com"


def test_empty_base_uri_is_ignored():
    config = RequestConfig(base_uri="https://a.example.com")
    assert config.with_base_uri("") is config
    assert config.with_base_uri(None) is config


def test_new_base_uri_clears_base_path():
    config = RequestConfig().with_base_uri("https://a.example.com").with_base_path("/v1/users")
    assert config.base_path == "/v1/users"

    changed = config.with_base_uri("https://b.example.com")
    assert changed.base_path is None
    assert config.base_path == "/v1/users"


def test_same_base_uri_keeps_base_path():
    config = RequestConfig().with_base_uri("https://a.example.com").with_base_path("/v1")
    assert config.with_base_uri(" https://a.example.com ").base_path == "/v1"


def test_base_path_requires_base_uri():
    assert RequestConfig().with_base_path("/v1").base_path is None
    with pytest.raises(ValidationError):
        RequestConfig(base_path="/v1")


def test_endpoint_joins_uri_and_path():
    config = RequestConfig(base_uri="https://a.example.com")
    assert config.endpoint == "https://a.example.com"
    assert config.with_base_path("/items").endpoint == "https://a.example.com/items"
    assert RequestConfig().endpoint is None


def test_request_config_is_frozen():
    config = RequestConfig(base_uri="https://a.example.com")
    with pytest.raises(ValidationError):
        config.base_uri = "https://b.example.com"


def test_with_auth_none_type_clears_auth():
    config = RequestConfig().with_auth(AuthConfig(type=AuthType.BEARER_TOKEN, password="t"))
    assert config.auth is not None
    assert config.with_auth(AuthConfig(type=AuthType.NONE)).auth is None


def test_default_timeout(monkeypatch):
    monkeypatch.delenv("REST_BUILDER_TIMEOUT_MS", raising=False)
    assert resolve_timeout_ms() == DEFAULT_TIMEOUT_MS
    timeout = RequestConfig().timeout
    assert timeout.connect == timeout.read == timeout.write == timeout.pool == 160.0


def test_timeout_from_env(monkeypatch):
    monkeypatch.setenv("REST_BUILDER_TIMEOUT_MS", "2500")
    assert TimeoutConfig.from_millis().read == 2.5
    # Explicit argument wins
    assert TimeoutConfig.from_millis(1000).read == 1.0


def test_timeout_from_env_invalid_falls_back(monkeypatch):
    monkeypatch.setenv("REST_BUILDER_TIMEOUT_MS", "soon")
    assert resolve_timeout_ms() == DEFAULT_TIMEOUT_MS


def test_normalize_timeout():
    assert normalize_timeout(3).connect == 3.0
    custom = TimeoutConfig(connect=1, read=2, write=3)
    assert normalize_timeout(custom) is custom


def test_timeout_units_agree_between_builder_and_config():
    from_millis = RequestBuilder().timeout(1500).build().timeout
    from_seconds = RequestConfig().with_timeout(timeout_s=1.5).timeout
    assert from_millis == from_seconds
    assert normalize_timeout(timeout_s=1.5).read == 1.5
