"""
Configuration models and validation for rest-builder.
"""
import os
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

from .types import AuthType

# Constants
DEFAULT_TIMEOUT_MS = 160000
TIMEOUT_ENV_KEYS = ["REST_BUILDER_TIMEOUT_MS"]


def resolve_timeout_ms(arg: Optional[int] = None) -> int:
    """
    Resolve the request timeout in milliseconds, in priority order:
    1. Direct argument (if not None)
    2. Environment variables
    3. Default value
    """
    if arg is not None:
        return int(arg)

    for key in TIMEOUT_ENV_KEYS:
        val = os.getenv(key)
        if val is not None:
            try:
                return int(val)
            except ValueError:
                return DEFAULT_TIMEOUT_MS

    return DEFAULT_TIMEOUT_MS


class TimeoutConfig(BaseModel):
    """Timeout configuration, in seconds."""
    model_config = ConfigDict(frozen=True)

    connect: float
    read: float
    write: float
    pool: Optional[float] = None

    @classmethod
    def from_millis(cls, millis: Optional[int] = None) -> "TimeoutConfig":
        seconds = resolve_timeout_ms(millis) / 1000.0
        return cls(connect=seconds, read=seconds, write=seconds, pool=seconds)


def normalize_timeout(timeout_s: Optional[Union[float, TimeoutConfig]]) -> TimeoutConfig:
    """
    Normalize timeout to TimeoutConfig object.

    A plain number is seconds, as in httpx. None resolves the default
    through ``resolve_timeout_ms``.
    """
    if timeout_s is None:
        return TimeoutConfig.from_millis()
    if isinstance(timeout_s, (int, float)):
        seconds = float(timeout_s)
        return TimeoutConfig(connect=seconds, read=seconds, write=seconds, pool=seconds)
    return timeout_s


class AuthConfig(BaseModel):
    """Authentication descriptor. ``password`` holds the bearer token for BEARER_TOKEN."""
    model_config = ConfigDict(frozen=True)

    type: AuthType
    username: Optional[str] = None
    password: Optional[SecretStr] = None

    @property
    def token(self) -> Optional[str]:
        return self.password.get_secret_value() if self.password else None

    @model_validator(mode="after")
    def validate_auth_config(self) -> "AuthConfig":
        """Validate that required fields are present for the selected auth type."""
        t = self.type
        has_user = bool(self.username)
        has_pass = bool(self.password and self.password.get_secret_value())

        if t in (AuthType.BASIC, AuthType.PREEMPTIVE_BASIC) and not (has_user and has_pass):
            raise ValueError(f"{t.value} auth requires 'username' and 'password'")

        if t == AuthType.BEARER_TOKEN and not has_pass:
            raise ValueError("bearer_token auth requires a token")

        return self


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class RequestConfig(BaseModel):
    """
    Immutable request target: base URI, base path, auth and timeouts.

    The ``with_*`` methods return a new config; a base path is only kept
    while the base URI it was set under stays the same.
    """
    model_config = ConfigDict(frozen=True)

    base_uri: Optional[str] = None
    base_path: Optional[str] = None
    auth: Optional[AuthConfig] = None
    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig.from_millis)

    @field_validator("base_uri", "base_path")
    @classmethod
    def strip_value(cls, v: Optional[str]) -> Optional[str]:
        return _clean(v)

    @model_validator(mode="after")
    def validate_base_path(self) -> "RequestConfig":
        if self.base_path and not self.base_uri:
            raise ValueError("base_path requires base_uri")
        return self

    def with_base_uri(self, base_uri: Optional[str]) -> "RequestConfig":
        uri = _clean(base_uri)
        if uri is None:
            return self
        update = {"base_uri": uri}
        if self.base_uri is not None and self.base_uri != uri:
            update["base_path"] = None
        return self.model_copy(update=update)

    def with_base_path(self, base_path: Optional[str]) -> "RequestConfig":
        path = _clean(base_path)
        if not self.base_uri or path is None:
            return self
        return self.model_copy(update={"base_path": path})

    def with_auth(self, auth: Optional[AuthConfig]) -> "RequestConfig":
        if auth is not None and auth.type == AuthType.NONE:
            auth = None
        return self.model_copy(update={"auth": auth})

    def with_timeout(self, timeout_s: Optional[Union[float, TimeoutConfig]]) -> "RequestConfig":
        """Replace the timeouts; a plain number is seconds."""
        return self.model_copy(update={"timeout": normalize_timeout(timeout_s)})

    @property
    def endpoint(self) -> Optional[str]:
        """Base URI alone, or base URI + base path when a base path is set."""
        if self.base_uri is None:
            return None
        if self.base_path:
            return self.base_uri + self.base_path
        return self.base_uri
