"""
Core type definitions for rest-builder.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Protocol, Union, runtime_checkable

# HTTP Methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"]

# Query/form/generic params: duplicate keys collect into a list, None is an explicit null
ParamMap = Dict[str, List[Optional[str]]]


class AuthType(str, Enum):
    NONE = "none"
    # Credentials sent only after a 401 challenge
    BASIC = "basic"
    PREEMPTIVE_BASIC = "preemptive_basic"
    BEARER_TOKEN = "bearer_token"


class BodyType(str, Enum):
    """How a supplied payload is encoded into the outgoing request."""
    EMPTY = "empty"
    BODY = "body"
    BODY_MAPPED = "body_mapped"
    PARAMS = "params"
    FORM_PARAM = "form_param"
    QUERY_PARAM = "query_param"


class ContentType(str, Enum):
    ANY = "*/*"
    TEXT = "text/plain"
    JSON = "application/json"
    XML = "application/xml"
    HTML = "text/html"
    URLENC = "application/x-www-form-urlencoded"
    BINARY = "application/octet-stream"


class ParamSource(str, Enum):
    MAPPING = "mapping"
    STRING = "string"
    OBJECT = "object"


@dataclass(frozen=True)
class Payload:
    """A request payload tagged with the shape the caller supplied it in."""
    value: Any
    source: ParamSource = ParamSource.OBJECT

    @classmethod
    def mapping(cls, value: Mapping[str, Any]) -> "Payload":
        return cls(value, ParamSource.MAPPING)

    @classmethod
    def string(cls, value: str) -> "Payload":
        return cls(value, ParamSource.STRING)

    @classmethod
    def object(cls, value: Any) -> "Payload":
        return cls(value, ParamSource.OBJECT)

    @classmethod
    def of(cls, value: Any) -> Optional["Payload"]:
        """Wrap a plain value; existing payloads and None pass through."""
        if value is None or isinstance(value, Payload):
            return value
        if isinstance(value, Mapping):
            return cls.mapping(value)
        if isinstance(value, str):
            return cls.string(value)
        return cls.object(value)


@runtime_checkable
class Serializer(Protocol):
    """Protocol for body/response codecs."""
    content_type: str

    def serialize(self, data: Any) -> str: ...
    def deserialize(self, data: Union[str, bytes], target: Any = None) -> Any: ...
