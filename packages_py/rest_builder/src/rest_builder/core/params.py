"""
Conversions from caller payloads to param maps.
"""
import json
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote_plus

import pydantic_core

from ..errors import PayloadError
from ..types import ParamMap, ParamSource, Payload

NULL_LITERAL = "null"


def parse_param_string(text: str) -> ParamMap:
    """
    Parse ``key1=val1,key2=val2,key1=val3`` into a param map.

    Repeated keys collect their values in encounter order. Only the first
    ``=`` of a segment splits key from value. A value of exactly ``null``
    becomes None; a missing or empty value becomes "". Blank segments
    are skipped.

    >>> parse_param_string("email=hello,email=,email=null,id=1")
    {'email': ['hello', '', None], 'id': ['1']}
    """
    params: ParamMap = {}
    for segment in text.split(","):
        if not segment.strip():
            continue
        key, sep, value = segment.partition("=")
        values = params.setdefault(key.strip(), [])
        if not sep:
            values.append("")
            continue
        value = value.strip()
        values.append(None if value == NULL_LITERAL else value)
    return params


def json_fallback(value: Any) -> Any:
    """Serialize plain objects by their public attributes."""
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    return str(value)


def object_to_map(obj: Any) -> Dict[str, Any]:
    """
    Convert a structured value into a flat field -> value mapping by a JSON round trip.

    None-valued fields are dropped.
    """
    try:
        raw = pydantic_core.to_json(obj, exclude_none=True, fallback=json_fallback)
    except pydantic_core.PydanticSerializationError as e:
        raise PayloadError(f"Cannot serialize {type(obj).__name__} to a map: {e}", obj) from e

    data = json.loads(raw)
    if not isinstance(data, dict):
        raise PayloadError(f"{type(obj).__name__} does not serialize to a JSON object", obj)
    return {key: value for key, value in data.items() if value is not None}


def to_param_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _to_param_values(value: Any) -> List[Optional[str]]:
    if isinstance(value, (list, tuple, set)):
        return [to_param_value(item) for item in value]
    return [to_param_value(value)]


def to_param_map(payload: Payload) -> ParamMap:
    """Normalize a payload of any declared source into a param map."""
    if payload.source == ParamSource.STRING:
        if not isinstance(payload.value, str):
            raise PayloadError("string payload must be a str", payload.value)
        return parse_param_string(payload.value)

    if payload.source == ParamSource.MAPPING:
        if not isinstance(payload.value, Mapping):
            raise PayloadError("mapping payload must be a Mapping", payload.value)
        mapping = payload.value
    else:
        mapping = object_to_map(payload.value)

    return {str(key): _to_param_values(value) for key, value in mapping.items()}


def encode_param_map(params: ParamMap) -> str:
    """URL-encode a param map; None renders as a bare key, "" as ``key=``."""
    parts = []
    for key, values in params.items():
        name = quote_plus(key)
        for value in values:
            if value is None:
                parts.append(name)
            else:
                parts.append(f"{name}={quote_plus(value)}")
    return "&".join(parts)
