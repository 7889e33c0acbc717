"""
Stateless request dispatch on top of httpx.
"""
import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import httpx
from lxml import etree

from ..auth.auth_handler import create_auth_handler
from ..config import RequestConfig
from ..constants import CONTENT_TYPE_KEY, FORM_URLENCODED, NO_BASE_PATH, NO_BODY
from ..errors import DeserializationError, RestBuilderError
from ..types import BodyType, ContentType, HttpMethod, ParamSource, Payload, Serializer
from .params import encode_param_map, to_param_map
from .serializers import JsonSerializer

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[RestBuilder]"
SEPARATOR = "-" * 100
MAX_LOGGED_BODY = 5000
# PARAMS go to the query string for these methods, to a form body otherwise
QUERY_METHODS = ("GET", "HEAD", "DELETE", "OPTIONS")


def running_method(depth: int = 1) -> str:
    """Name of the function ``depth`` frames above the caller of this helper."""
    frame = inspect.currentframe()
    try:
        target = frame.f_back if frame else None
        for _ in range(depth):
            if target is None or target.f_back is None:
                break
            target = target.f_back
        return target.f_code.co_name if target else "<unknown>"
    finally:
        del frame


def _format_body(body: Any) -> str:
    """
    Format body for logging safeguards against binary data.
    """
    if body is None:
        return "<empty>"
    if isinstance(body, (bytes, bytearray)):
        return f"<binary data: {len(body)} bytes>"
    if isinstance(body, str):
        try:
            # Try to pretty print if it looks like JSON
            if body.strip().startswith(("{", "[")):
                body = json.dumps(json.loads(body), indent=2)
        except json.JSONDecodeError:
            pass
        if len(body) > MAX_LOGGED_BODY:
            return body[:MAX_LOGGED_BODY] + "... (truncated)"
        return body
    return str(body)


@dataclass
class PreparedRequest:
    """Everything needed to send one request."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    content: Optional[Union[str, bytes]] = None
    serialized: Optional[str] = None


@dataclass
class DispatchResult:
    """Outcome of one dispatch; ``response`` is None when the request failed."""
    response: Optional[httpx.Response]
    endpoint: Optional[str] = None
    serialized_request: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.response is not None and self.error is None


def _content_type_value(content_type: Union[str, ContentType]) -> str:
    if isinstance(content_type, ContentType):
        return content_type.value
    return content_type


def _set_default_content_type(headers: Dict[str, str], value: str) -> None:
    if not any(key.lower() == CONTENT_TYPE_KEY.lower() for key in headers):
        headers[CONTENT_TYPE_KEY] = value


def _append_query(url: str, query: str) -> str:
    if not query:
        return url
    return f"{url}{'&' if '?' in url else '?'}{query}"


def prepare_request(
    config: RequestConfig,
    method: HttpMethod,
    body_type: BodyType = BodyType.EMPTY,
    content_type: Optional[Union[str, ContentType]] = None,
    headers: Optional[Dict[str, str]] = None,
    payload: Any = None,
    mapper: Optional[Serializer] = None,
) -> PreparedRequest:
    """Resolve endpoint, headers and encoded payload for a request."""
    endpoint = config.endpoint
    if endpoint is None:
        raise RestBuilderError("base_uri is required before dispatching a request")

    method = method.upper()
    body_type = BodyType(body_type)
    prepared = PreparedRequest(method=method, url=endpoint, headers=dict(headers or {}))
    if content_type is not None:
        for key in [k for k in prepared.headers if k.lower() == CONTENT_TYPE_KEY.lower()]:
            del prepared.headers[key]
        prepared.headers[CONTENT_TYPE_KEY] = _content_type_value(content_type)

    payload = Payload.of(payload)
    if payload is None or body_type == BodyType.EMPTY:
        return prepared

    value = payload.value
    if body_type == BodyType.BODY:
        if isinstance(value, (bytes, bytearray)):
            prepared.content = bytes(value)
            prepared.serialized = _format_body(value)
        elif payload.source == ParamSource.STRING:
            prepared.content = value
            prepared.serialized = value
        else:
            serializer = JsonSerializer()
            prepared.content = serializer.serialize(value)
            prepared.serialized = prepared.content
            _set_default_content_type(prepared.headers, serializer.content_type)

    elif body_type == BodyType.BODY_MAPPED:
        serializer = mapper or JsonSerializer()
        prepared.content = serializer.serialize(value)
        prepared.serialized = prepared.content
        _set_default_content_type(prepared.headers, serializer.content_type)

    else:
        params = to_param_map(payload)
        prepared.serialized = json.dumps(params)
        encoded = encode_param_map(params)
        as_query = body_type == BodyType.QUERY_PARAM or (
            body_type == BodyType.PARAMS and method in QUERY_METHODS
        )
        if as_query:
            prepared.url = _append_query(endpoint, encoded)
        else:
            prepared.content = encoded
            _set_default_content_type(prepared.headers, FORM_URLENCODED)

    return prepared


def _format_summary(
    caller: str,
    method: str,
    body_type: BodyType,
    response: httpx.Response,
    config: RequestConfig,
    endpoint: str,
    serialized: Optional[str],
) -> str:
    blocks = [
        SEPARATOR,
        f"Running Method: {caller}",
        f"Operation: {method}",
        f"BodyType: {body_type.value}",
        f"Status Code: {response.status_code}",
        f"BaseUrl: {config.base_uri}",
        f"BasePath: {config.base_path or NO_BASE_PATH}",
        f"Final EndPoint To Hit: {endpoint}",
        "#############################-REQUEST-#############################",
        serialized if serialized is not None else NO_BODY,
        "###########################-REQUEST_END-###########################",
        "#############################-RESPONSE-#############################",
        _format_body(response.text),
        "###########################-RESPONSE_END-###########################",
        SEPARATOR,
    ]
    return "\n \n" + "\n \n".join(blocks) + "\n \n"


def dispatch_request(
    config: RequestConfig,
    method: HttpMethod,
    body_type: BodyType = BodyType.EMPTY,
    content_type: Optional[Union[str, ContentType]] = None,
    headers: Optional[Dict[str, str]] = None,
    payload: Any = None,
    *,
    mapper: Optional[Serializer] = None,
    caller: Optional[str] = None,
    stack_depth: int = 1,
    transport: Optional[httpx.BaseTransport] = None,
) -> DispatchResult:
    """
    Prepare, send and log one request.

    Never raises: any failure is logged at error level and reported as a
    result without a response. The client built for the call is always
    closed before returning.
    """
    if caller is None:
        caller = running_method(stack_depth)

    result = DispatchResult(response=None, endpoint=config.endpoint)
    client: Optional[httpx.Client] = None
    try:
        prepared = prepare_request(config, method, body_type, content_type, headers, payload, mapper)
        result.endpoint = prepared.url
        result.serialized_request = prepared.serialized

        timeout = config.timeout
        client = httpx.Client(
            timeout=httpx.Timeout(
                connect=timeout.connect,
                read=timeout.read,
                write=timeout.write,
                pool=timeout.pool,
            ),
            auth=create_auth_handler(config.auth),
            transport=transport,
            follow_redirects=True,
        )

        logger.debug(f"{LOG_PREFIX} Request: {prepared.method} {prepared.url}")
        response = client.request(
            prepared.method,
            prepared.url,
            headers=prepared.headers,
            content=prepared.content,
        )
        result.response = response
        logger.info(
            _format_summary(
                caller,
                prepared.method,
                BodyType(body_type),
                response,
                config,
                prepared.url,
                prepared.serialized,
            )
        )
    except Exception as e:
        logger.error(f"{LOG_PREFIX} {caller}: {str(method).upper()} {result.endpoint} failed: {e!r}")
        result.response = None
        result.error = e
    finally:
        if client is not None:
            client.close()
    return result


def dispatch(
    config: RequestConfig,
    method: HttpMethod,
    body_type: BodyType = BodyType.EMPTY,
    content_type: Optional[Union[str, ContentType]] = None,
    headers: Optional[Dict[str, str]] = None,
    payload: Any = None,
    *,
    mapper: Optional[Serializer] = None,
    caller: Optional[str] = None,
    stack_depth: int = 1,
    transport: Optional[httpx.BaseTransport] = None,
) -> Optional[httpx.Response]:
    """Dispatch a request and return the raw response, or None when it failed."""
    if caller is None:
        caller = running_method(stack_depth)
    return dispatch_request(
        config,
        method,
        body_type,
        content_type,
        headers,
        payload,
        mapper=mapper,
        caller=caller,
        transport=transport,
    ).response


def decode_response(response: Optional[httpx.Response], target: Any, serializer: Serializer) -> Any:
    """Deserialize a response body into ``target``; None when absent or undecodable."""
    if response is None:
        return None
    try:
        return serializer.deserialize(response.content, target)
    except (ValueError, TypeError, etree.LxmlError) as e:
        error = DeserializationError(target, e, response.text)
        logger.error(f"{LOG_PREFIX} {error}")
        return None
