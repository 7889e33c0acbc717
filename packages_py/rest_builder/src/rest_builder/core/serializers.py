"""
JSON and XML codecs used for request bodies and typed responses.
"""
import json
from typing import Any, Dict, Mapping, Optional, Union

import pydantic_core
from lxml import etree
from pydantic import TypeAdapter

from .params import json_fallback, to_param_value, object_to_map


class JsonSerializer:
    """Default JSON serializer."""
    content_type = "application/json"

    def serialize(self, data: Any) -> str:
        return pydantic_core.to_json(data, fallback=json_fallback).decode("utf-8")

    def deserialize(self, data: Union[str, bytes], target: Any = None) -> Any:
        if target is None:
            return json.loads(data)
        return TypeAdapter(target).validate_json(data)


def make_xml_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    """
    XML parser that never touches the network or expands entities.

    ``encoding`` overrides the document's own declaration; leave it unset
    for raw bytes so the declared encoding is honoured.
    """
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        remove_blank_text=True,
    )


def _element_to_value(element: etree._Element) -> Any:
    """
    Map an element to plain data.

    Attributes and child elements become keys; repeated children collect
    into a list. A leaf becomes its stripped text, or None when empty.
    Text next to attributes is stored under ``value``.
    """
    children = [child for child in element if isinstance(child.tag, str)]
    text = (element.text or "").strip()

    if not children and not element.attrib:
        return text or None

    result: Dict[str, Any] = {etree.QName(k).localname: v for k, v in element.attrib.items()}
    if not children and text:
        result["value"] = text

    for child in children:
        name = etree.QName(child).localname
        value = _element_to_value(child)
        if name not in result:
            result[name] = value
        elif isinstance(result[name], list):
            result[name].append(value)
        else:
            result[name] = [result[name], value]
    return result


def _append_value(parent: etree._Element, name: str, value: Any) -> None:
    if isinstance(value, (list, tuple)):
        for item in value:
            _append_value(parent, name, item)
        return

    child = etree.SubElement(parent, name)
    if isinstance(value, Mapping):
        for key, item in value.items():
            _append_value(child, str(key), item)
    elif value is not None:
        child.text = to_param_value(value)


class XmlSerializer:
    """
    XML codec.

    The root element stands for the object itself; its children are the
    object's fields.
    """
    content_type = "application/xml"

    def __init__(self, root_tag: str = "root"):
        self.root_tag = root_tag

    def serialize(self, data: Any) -> str:
        mapping = data if isinstance(data, Mapping) else object_to_map(data)
        root = etree.Element(self.root_tag)
        for key, value in mapping.items():
            _append_value(root, str(key), value)
        return etree.tostring(root, encoding="unicode")

    def deserialize(self, data: Union[str, bytes], target: Any = None) -> Any:
        if isinstance(data, str):
            # Already decoded; any encoding declaration no longer applies
            root = etree.fromstring(data.encode("utf-8"), make_xml_parser("utf-8"))
        else:
            root = etree.fromstring(bytes(data), make_xml_parser())
        value = _element_to_value(root)
        if target is None:
            return value
        return TypeAdapter(target).validate_python(value)
