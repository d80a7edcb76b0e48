"""
Declarative XML codec shared by every value type and item type.

Design principles:
- Pydantic models are the single source of truth for fields and validation
- Field declaration order is element order
- Field aliases are element names (snake_case becomes kebab-case)
- Annotated markers move a field into an attribute or the element text, or
  wrap a list in a container element
- Optional fields that are None and empty lists are not written
"""

import functools
import types
import typing
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, NamedTuple, Self, Union
from uuid import UUID
from xml.etree import ElementTree as ET

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from pydantic.fields import FieldInfo

from healthitems.domain.errors import ItemParseError, ItemSerializationError
from healthitems.domain.xmlhelpers import format_bool, format_double, parse_bool


def to_element_name(field_name: str) -> str:
    """Map a Python field name to its XML element name."""
    return field_name.replace("_", "-")


class XmlAttribute:
    """Marks a field as an attribute of the owning element."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name


class XmlText:
    """Marks a field as the text content of the owning element."""


class XmlWrapped:
    """Marks a list field written inside one container element, one child per item."""

    def __init__(self, item_name: str) -> None:
        self.item_name = item_name


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty or whitespace")
    return value


# Strings that must carry visible content whenever they are set
NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class _FieldShape(NamedTuple):
    field_name: str
    kind: Literal["attribute", "text", "element"]
    xml_name: str
    value_type: Any
    many: bool
    required: bool
    item_name: str | None = None


def _unwrap(annotation: Any) -> tuple[Any, bool]:
    """Reduce an annotation to (value type, is list)."""
    many = False
    while True:
        origin = typing.get_origin(annotation)
        if origin is Annotated:
            annotation = typing.get_args(annotation)[0]
        elif origin in (Union, types.UnionType):
            args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            if len(args) != 1:
                raise TypeError(f"unsupported union in XML model: {annotation!r}")
            annotation = args[0]
        elif origin is list:
            many = True
            annotation = typing.get_args(annotation)[0]
        elif origin is Literal:
            annotation = type(typing.get_args(annotation)[0])
        else:
            return annotation, many


@functools.cache
def _shapes(model: type["XmlModel"]) -> tuple[_FieldShape, ...]:
    shapes = []
    for field_name, field in model.xml_fields().items():
        value_type, many = _unwrap(field.annotation)
        kind: Literal["attribute", "text", "element"] = "element"
        item_name = None
        xml_name = model.element_name(field_name, field)
        for marker in field.metadata:
            if isinstance(marker, XmlAttribute):
                kind = "attribute"
                xml_name = marker.name or xml_name
            elif isinstance(marker, XmlWrapped):
                item_name = marker.item_name
            elif isinstance(marker, XmlText):
                kind = "text"
        shapes.append(
            _FieldShape(
                field_name, kind, xml_name, value_type, many, field.is_required(), item_name
            )
        )
    return tuple(shapes)


def _is_model(value_type: Any) -> bool:
    return isinstance(value_type, type) and issubclass(value_type, XmlModel)


def read_scalar(text: str, value_type: Any) -> Any:
    """Convert XML text to a Python scalar of the given type."""
    if value_type is bool:
        return parse_bool(text)
    if isinstance(value_type, type) and issubclass(value_type, Enum):
        if issubclass(value_type, int):
            return value_type(int(text))
        return value_type(text.strip())
    if value_type is int:
        return int(text)
    if value_type is float:
        return float(text)
    if value_type is Decimal:
        return Decimal(text.strip())
    if value_type is UUID:
        return UUID(text.strip())
    if value_type is datetime:
        return datetime.fromisoformat(text.strip())
    if value_type is date:
        return date.fromisoformat(text.strip())
    return text


def format_scalar(value: Any) -> str:
    """Convert a Python scalar to its XML text."""
    if isinstance(value, bool):
        return format_bool(value)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return format_double(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _read_element(child: ET.Element, value_type: Any) -> Any:
    if _is_model(value_type):
        return value_type.from_xml(child)
    text = child.text or ""
    if value_type is str:
        return text
    if not text.strip():
        return None
    return read_scalar(text, value_type)


def _write_element(parent: ET.Element, name: str, value: Any) -> None:
    if isinstance(value, XmlModel):
        value.to_xml(name, parent)
    else:
        ET.SubElement(parent, name).text = format_scalar(value)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into `loc: message` pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}"
        for error in exc.errors()
    )


class XmlModel(BaseModel):
    """
    Base model that maps its fields onto a fixed-shape XML element.

    Subclasses declare fields in schema order. Validation runs on
    construction, on parse and on every assignment.
    """

    model_config = ConfigDict(
        alias_generator=to_element_name,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    @classmethod
    def xml_fields(cls) -> dict[str, FieldInfo]:
        """Fields that take part in the XML shape, in element order."""
        return dict(cls.model_fields)

    @classmethod
    def element_name(cls, field_name: str, field: FieldInfo) -> str:
        return field.alias or field_name

    @classmethod
    def from_xml(cls, element: ET.Element, **extra: Any) -> Self:
        """
        Build an instance from the element that holds its content.

        `extra` supplies values for fields that live outside the element.
        """
        try:
            return cls.model_validate({**cls.read_content(element), **extra})
        except ItemParseError:
            raise
        except ValidationError as exc:
            raise ItemParseError(element.tag, describe_validation_error(exc)) from exc
        except (ValueError, ArithmeticError) as exc:
            raise ItemParseError(element.tag, str(exc)) from exc

    @classmethod
    def read_content(cls, element: ET.Element) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for shape in _shapes(cls):
            if shape.kind == "attribute":
                raw = element.get(shape.xml_name)
                if raw is not None:
                    values[shape.field_name] = read_scalar(raw, shape.value_type)
            elif shape.kind == "text":
                if element.text is not None and element.text.strip():
                    values[shape.field_name] = read_scalar(element.text, shape.value_type)
            elif shape.many:
                container = element if shape.item_name is None else element.find(shape.xml_name)
                children = [] if container is None else container.findall(
                    shape.item_name or shape.xml_name
                )
                values[shape.field_name] = [
                    _read_element(child, shape.value_type) for child in children
                ]
            else:
                child = element.find(shape.xml_name)
                if child is not None:
                    value = _read_element(child, shape.value_type)
                    if value is not None:
                        values[shape.field_name] = value
        return values

    def to_xml(self, node_name: str, parent: ET.Element | None = None) -> ET.Element:
        """Write this value as `node_name`, appended to `parent` when given."""
        element = ET.Element(node_name) if parent is None else ET.SubElement(parent, node_name)
        self.write_content(element)
        return element

    def write_content(self, element: ET.Element) -> None:
        for shape in _shapes(type(self)):
            value = getattr(self, shape.field_name, None)
            if value is None:
                if shape.required:
                    raise ItemSerializationError(
                        f"<{element.tag}> requires a value for '{shape.xml_name}'"
                    )
                continue
            if shape.kind == "attribute":
                element.set(shape.xml_name, format_scalar(value))
            elif shape.kind == "text":
                element.text = format_scalar(value)
            elif shape.many:
                container = element
                if shape.item_name is not None and value:
                    container = ET.SubElement(element, shape.xml_name)
                for item in value:
                    _write_element(container, shape.item_name or shape.xml_name, item)
            else:
                _write_element(element, shape.xml_name, value)
