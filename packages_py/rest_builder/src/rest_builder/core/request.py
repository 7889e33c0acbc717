"""
Request builder helper.
"""
from typing import Any, Dict, Optional, Type, TypeVar, Union

import httpx

from ..config import AuthConfig, RequestConfig, TimeoutConfig
from ..types import AuthType, BodyType, ContentType, HttpMethod, Serializer
from .dispatcher import decode_response, dispatch_request, running_method
from .serializers import JsonSerializer, XmlSerializer

T = TypeVar("T")


class RequestBuilder:
    """
    Fluent session for firing requests at one base URI.

    Setters replace an immutable RequestConfig; every ``process*`` call
    dispatches a snapshot of it. Not safe for concurrent use.
    """

    def __init__(
        self,
        base_uri: Optional[str] = None,
        base_path: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._config = (
            RequestConfig(timeout=TimeoutConfig.from_millis(timeout_ms))
            .with_base_uri(base_uri)
            .with_base_path(base_path)
        )
        self._transport = transport
        self._last_serialized_request: Optional[str] = None

    def auth(
        self,
        auth_type: Union[AuthType, str],
        username: Optional[str] = None,
        password_token: Optional[str] = None,
    ) -> "RequestBuilder":
        """
        Set authentication.

        ``username`` is needed for the basic types; ``password_token`` is the
        password, or the token for BEARER_TOKEN.
        """
        auth_type = AuthType(auth_type)
        auth = None
        if auth_type != AuthType.NONE:
            auth = AuthConfig(type=auth_type, username=username, password=password_token)
        self._config = self._config.with_auth(auth)
        return self

    basic = auth

    def base_uri(self, base_uri: Optional[str]) -> "RequestBuilder":
        self._config = self._config.with_base_uri(base_uri)
        return self

    def base_path(self, base_path: Optional[str]) -> "RequestBuilder":
        self._config = self._config.with_base_path(base_path)
        return self

    def timeout(self, timeout_ms: int) -> "RequestBuilder":
        """Set every timeout to ``timeout_ms`` milliseconds."""
        self._config = self._config.with_timeout(TimeoutConfig.from_millis(timeout_ms))
        return self

    def build(self) -> RequestConfig:
        """Get the current immutable config."""
        return self._config

    @property
    def endpoint(self) -> Optional[str]:
        return self._config.endpoint

    @property
    def last_serialized_request(self) -> Optional[str]:
        """Serialized body of the most recent request, for diagnostics."""
        return self._last_serialized_request

    def process(
        self,
        method: HttpMethod = "GET",
        body_type: BodyType = BodyType.EMPTY,
        payload: Any = None,
        content_type: Optional[Union[str, ContentType]] = None,
        headers: Optional[Dict[str, str]] = None,
        *,
        mapper: Optional[Serializer] = None,
        stack_depth: int = 1,
    ) -> Optional[httpx.Response]:
        """Send a request; returns None when it failed (see the log)."""
        return self._execute(
            method, body_type, payload, content_type, headers, mapper, running_method(stack_depth)
        )

    def process_as(
        self,
        response_type: Type[T],
        method: HttpMethod = "GET",
        body_type: BodyType = BodyType.EMPTY,
        payload: Any = None,
        content_type: Optional[Union[str, ContentType]] = None,
        headers: Optional[Dict[str, str]] = None,
        *,
        mapper: Optional[Serializer] = None,
        stack_depth: int = 1,
    ) -> Optional[T]:
        """Send a request and decode the JSON response into ``response_type``."""
        response = self._execute(
            method, body_type, payload, content_type, headers, mapper, running_method(stack_depth)
        )
        return decode_response(response, response_type, JsonSerializer())

    def process_xml(
        self,
        response_type: Type[T],
        method: HttpMethod = "GET",
        body_type: BodyType = BodyType.EMPTY,
        payload: Any = None,
        content_type: Optional[Union[str, ContentType]] = None,
        headers: Optional[Dict[str, str]] = None,
        *,
        mapper: Optional[Serializer] = None,
        stack_depth: int = 1,
    ) -> Optional[T]:
        """Send a request and decode the XML response into ``response_type``."""
        response = self._execute(
            method, body_type, payload, content_type, headers, mapper, running_method(stack_depth)
        )
        return decode_response(response, response_type, XmlSerializer())

    def _execute(
        self,
        method: HttpMethod,
        body_type: BodyType,
        payload: Any,
        content_type: Optional[Union[str, ContentType]],
        headers: Optional[Dict[str, str]],
        mapper: Optional[Serializer],
        caller: str,
    ) -> Optional[httpx.Response]:
        result = dispatch_request(
            self._config,
            method,
            body_type,
            content_type,
            headers,
            payload,
            mapper=mapper,
            caller=caller,
            transport=self._transport,
        )
        self._last_serialized_request = result.serialized_request
        return result.response
