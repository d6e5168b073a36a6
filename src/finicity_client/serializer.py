"""
XML codec for the Finicity models

Reads and writes the dataclasses in ``models`` by walking their fields. Every
model declares its root element in ``XML_TAG``; per-field mapping overrides
live in the field metadata (see ``models.xml``).
"""
import dataclasses
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from .exceptions import ParseError

T = TypeVar('T')


def _options(f: dataclasses.Field) -> dict:
    return f.metadata.get('xml') or {}


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def _element_name(f: dataclasses.Field) -> str:
    return _options(f).get('name') or _camel(f.name)


def _unwrap_optional(tp: Any) -> Any:
    if get_origin(tp) is Union:
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


# --- Scalars ----------------------------------------------------------------

def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _from_text(text: Any, tp: Any) -> Any:
    if text is None:
        text = ''
    if tp is str:
        return text
    text = text.strip()
    if text == '':
        return None
    if tp is bool:
        lowered = text.lower()
        if lowered not in ('true', 'false'):
            raise ValueError(f"Not a boolean: {text!r}")
        return lowered == 'true'
    if tp is int:
        return int(text)
    if tp is float:
        return float(text)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return tp(text)
    raise TypeError(f"Unsupported field type {tp!r}")


# --- Reading ----------------------------------------------------------------

def _read_value(elem: ET.Element, tp: Any) -> Any:
    if dataclasses.is_dataclass(tp):
        return _read(elem, tp)
    return _from_text(elem.text, tp)


def _read(elem: ET.Element, cls: Type[T]) -> T:
    hints = get_type_hints(cls)
    values = {}

    for f in dataclasses.fields(cls):
        opts = _options(f)
        if opts.get('skip'):
            continue
        name = _element_name(f)
        tp = _unwrap_optional(hints[f.name])
        origin = get_origin(tp)

        if opts.get('attribute'):
            raw = elem.get(name)
            if raw is not None:
                values[f.name] = _from_text(raw, tp)
        elif origin is list:
            (item_tp,) = get_args(tp)
            container = elem.find(opts['wrapper']) if opts.get('wrapper') else elem
            if container is not None:
                values[f.name] = [_read_value(child, item_tp)
                                  for child in container.findall(opts.get('item') or name)]
        elif origin is dict:
            container = elem if opts.get('inline') else elem.find(opts.get('wrapper') or name)
            if container is not None:
                values[f.name] = {
                    child.get('value', child.text or ''): child.text or ''
                    for child in container.findall(opts.get('item') or name)
                }
        else:
            child = elem.find(name)
            if child is not None:
                value = _read_value(child, tp)
                if value is not None:
                    values[f.name] = value

    return cls(**values)


def deserialize(text: str, cls: Type[T]) -> T:
    """Parse an XML document into an instance of ``cls``"""
    if not text or not text.strip():
        raise ParseError(f"Empty body, expected {cls.__name__}", text)

    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed XML, expected {cls.__name__}", text, exc) from exc

    expected = getattr(cls, 'XML_TAG', None)
    if expected and root.tag != expected:
        raise ParseError(f"Expected <{expected}>, got <{root.tag}>", text)

    try:
        return _read(root, cls)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Unable to read {cls.__name__}: {exc}", text, exc) from exc


# --- Writing ----------------------------------------------------------------

def _write_value(value: Any, tag: str) -> ET.Element:
    if dataclasses.is_dataclass(value):
        return _write(value, tag)
    elem = ET.Element(tag)
    elem.text = _to_text(value)
    return elem


def _write(obj: Any, tag: str = None) -> ET.Element:
    elem = ET.Element(tag or type(obj).XML_TAG)

    for f in dataclasses.fields(obj):
        opts = _options(f)
        value = getattr(obj, f.name)
        if opts.get('skip') or value is None:
            continue
        name = _element_name(f)

        if opts.get('attribute'):
            elem.set(name, _to_text(value))
        elif isinstance(value, list):
            if not value:
                continue
            container = ET.SubElement(elem, opts['wrapper']) if opts.get('wrapper') else elem
            for item in value:
                container.append(_write_value(item, opts.get('item') or name))
        elif isinstance(value, dict):
            if not value:
                continue
            if opts.get('inline'):
                container = elem
            else:
                container = ET.SubElement(elem, opts.get('wrapper') or name)
            for key, label in value.items():
                child = ET.SubElement(container, opts.get('item') or name, value=str(key))
                child.text = _to_text(label)
        else:
            elem.append(_write_value(value, name))

    return elem


def serialize(obj: Any) -> str:
    """Render a model instance as an XML document"""
    return ET.tostring(_write(obj), encoding='unicode')
