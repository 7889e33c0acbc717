"""
Rest Builder - fluent HTTP request builder for API tests
"""

__version__ = "0.1.0"

from .config import AuthConfig, RequestConfig, TimeoutConfig
from .types import AuthType, BodyType, ContentType, ParamSource, Payload
from .errors import RestBuilderError, PayloadError, DeserializationError
from .core.request import RequestBuilder
from .core.dispatcher import DispatchResult, dispatch, dispatch_request
from .core.params import parse_param_string, object_to_map, to_param_map
from .core.serializers import JsonSerializer, XmlSerializer
from .auth.auth_handler import create_auth_handler

__all__ = [
    "AuthConfig", "RequestConfig", "TimeoutConfig",
    "AuthType", "BodyType", "ContentType", "ParamSource", "Payload",
    "RestBuilderError", "PayloadError", "DeserializationError",
    "RequestBuilder",
    "DispatchResult", "dispatch", "dispatch_request",
    "parse_param_string", "object_to_map", "to_param_map",
    "JsonSerializer", "XmlSerializer",
    "create_auth_handler",
]
