"""
Scalar formatting and optional-element helpers for hand-written XML shapes.

Most models never touch these: `XmlModel` reads and writes declared fields
on its own. The helpers exist for the shapes that are not a plain sequence of
fields, such as the thing envelope.
"""

import math
from typing import Any, Protocol, TypeVar
from xml.etree import ElementTree as ET

from healthitems.domain.errors import ItemParseError


class _XmlReadable(Protocol):
    @classmethod
    def from_xml(cls, element: ET.Element) -> Any: ...


ModelT = TypeVar("ModelT", bound=_XmlReadable)

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


def parse_bool(text: str) -> bool:
    """Parse an xsd:boolean lexical value."""
    value = text.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value: {text!r}")


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_double(value: float) -> str:
    """
    Format a double the way xsd:double expects it.

    Integral values lose their fractional part ("80" rather than "80.0") and
    the special values use the XML spellings INF, -INF and NaN.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def parse_fragment(text: str | bytes) -> ET.Element:
    """Parse an XML string into its root element."""
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise ItemParseError("document", str(exc)) from exc


def read_opt_text(element: ET.Element, name: str) -> str | None:
    child = element.find(name)
    if child is None or not child.text:
        return None
    return child.text


def read_opt_int(element: ET.Element, name: str) -> int | None:
    text = read_opt_text(element, name)
    return None if text is None else int(text)


def read_opt(element: ET.Element, name: str, model: type[ModelT]) -> ModelT | None:
    child = element.find(name)
    return None if child is None else model.from_xml(child)


def write_text(element: ET.Element, name: str, value: str) -> ET.Element:
    child = ET.SubElement(element, name)
    child.text = value
    return child


def write_opt_text(element: ET.Element, name: str, value: str | None) -> None:
    if value:
        write_text(element, name, value)


def write_opt_int(element: ET.Element, name: str, value: int | None) -> None:
    if value is not None:
        write_text(element, name, str(value))

