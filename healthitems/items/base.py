"""
Base class for health record items and the data every item carries.

Key patterns:
- Each item type is an `XmlModel` with a fixed root element and type id
- Envelope fields (key, state, flags, effective date, common data, tags)
  belong to the surrounding <thing> and are excluded from the item's own XML
- `__str__` is the item's one-line summary
"""

import copy
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, ClassVar, Self
from uuid import UUID
from xml.etree import ElementTree as ET

from pydantic import Field, ValidationError
from pydantic.fields import FieldInfo

from healthitems.domain.base import (
    NonBlankStr,
    XmlAttribute,
    XmlModel,
    XmlText,
    describe_validation_error,
)
from healthitems.domain.dates import ApproximateDateTime, HealthServiceDate, HealthServiceDateTime
from healthitems.domain.errors import (
    ItemParseError,
    ItemSerializationError,
    UnexpectedRootError,
)
from healthitems.domain.xmlhelpers import parse_fragment


def summarize(*parts: object, separator: str = ", ") -> str:
    """Join the non-empty parts of a summary."""
    texts = (str(part) for part in parts if part is not None)
    return separator.join(text for text in texts if text)


class ItemState(str, Enum):
    ACTIVE = "Active"
    DELETED = "Deleted"


class ThingKey(XmlModel):
    """Identity of a stored item: its id and the version it was read at."""

    id: Annotated[UUID, XmlText()]
    version_stamp: Annotated[UUID | None, XmlAttribute()] = None

    def __str__(self) -> str:
        return str(self.id)


class ItemRelationship(XmlModel):
    """A link from one item to another, by key or by client id."""

    thing_id: UUID | None = None
    version_stamp: UUID | None = None
    client_thing_id: NonBlankStr | None = None
    relationship_type: NonBlankStr | None = None

    def write_content(self, element: ET.Element) -> None:
        if self.thing_id is None and self.client_thing_id is None:
            raise ItemSerializationError("a related item needs a thing id or a client thing id")
        super().write_content(element)


class CommonItemData(XmlModel):
    """Data shared by all item types, written as <common> inside <data-xml>."""

    source: NonBlankStr | None = None
    note: NonBlankStr | None = None
    tags: NonBlankStr | None = None
    related_thing: list[ItemRelationship] = Field(default_factory=list)
    client_thing_id: NonBlankStr | None = None

    def is_empty(self) -> bool:
        return not (
            self.source or self.note or self.tags or self.related_thing or self.client_thing_id
        )


class HealthRecordItem(XmlModel):
    """
    Base for every item type.

    Subclasses set TYPE_ID, TYPE_NAME and ROOT_ELEMENT and declare their
    fields in schema order.
    """

    TYPE_ID: ClassVar[UUID | None] = None
    TYPE_NAME: ClassVar[str] = ""
    ROOT_ELEMENT: ClassVar[str] = ""
    ENVELOPE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"thing_key", "effective_date", "thing_state", "thing_flags", "common", "tags"}
    )

    thing_key: ThingKey | None = None
    effective_date: datetime | None = None
    thing_state: ItemState = ItemState.ACTIVE
    thing_flags: int = Field(default=0, ge=0)
    common: CommonItemData = Field(default_factory=CommonItemData)
    tags: list[NonBlankStr] = Field(default_factory=list)

    @classmethod
    def xml_fields(cls) -> dict[str, FieldInfo]:
        return {
            name: field
            for name, field in cls.model_fields.items()
            if name not in cls.ENVELOPE_FIELDS
        }

    @property
    def type_id(self) -> UUID | None:
        return self.TYPE_ID

    @property
    def type_name(self) -> str:
        return self.TYPE_NAME

    @property
    def root_element(self) -> str:
        return self.ROOT_ELEMENT

    @property
    def when_value(self) -> datetime | None:
        """The item's main timestamp, if it has an exact or structured one."""
        when = getattr(self, "when", None)
        if isinstance(when, HealthServiceDateTime):
            return when.to_datetime()
        if isinstance(when, HealthServiceDate):
            return datetime.combine(when.to_date(), datetime.min.time())
        if isinstance(when, ApproximateDateTime) and when.approximate_date is not None:
            day = when.approximate_date
            return datetime(day.y, day.m or 1, day.d or 1)
        return None

    @classmethod
    def parse_xml(cls, element: ET.Element, **envelope: Any) -> Self:
        """Parse the type-specific XML; `envelope` fills the thing-level fields."""
        if element.tag != cls.ROOT_ELEMENT:
            raise UnexpectedRootError(cls.ROOT_ELEMENT, element.tag)
        return cls.from_xml(element, **envelope)

    def write_xml(self, parent: ET.Element | None = None) -> ET.Element:
        """Write the type-specific XML."""
        return self.to_xml(self.ROOT_ELEMENT, parent)

    def __str__(self) -> str:
        return self.TYPE_NAME


class UnknownItem(HealthRecordItem):
    """
    An item whose type id has no registered class.

    The type-specific XML is kept verbatim so the item can be written back
    without loss.
    """

    TYPE_NAME = "Unknown"

    raw_type_id: UUID
    raw_type_name: str | None = None
    data_xml: NonBlankStr

    @classmethod
    def xml_fields(cls) -> dict[str, FieldInfo]:
        return {}

    @classmethod
    def from_element(
        cls,
        element: ET.Element,
        type_id: UUID,
        type_name: str | None = None,
        **envelope: Any,
    ) -> Self:
        snapshot = copy.copy(element)
        snapshot.tail = None
        try:
            return cls.model_validate(
                {
                    "raw_type_id": type_id,
                    "raw_type_name": type_name,
                    "data_xml": ET.tostring(snapshot, encoding="unicode"),
                    **envelope,
                }
            )
        except ValidationError as exc:
            raise ItemParseError(element.tag, describe_validation_error(exc)) from exc

    @property
    def type_id(self) -> UUID:
        return self.raw_type_id

    @property
    def type_name(self) -> str:
        return self.raw_type_name or self.TYPE_NAME

    @property
    def root_element(self) -> str:
        return parse_fragment(self.data_xml).tag

    def write_xml(self, parent: ET.Element | None = None) -> ET.Element:
        element = parse_fragment(self.data_xml)
        if parent is not None:
            parent.append(element)
        return element

    def __str__(self) -> str:
        return f"{self.type_name} ({self.raw_type_id})"
