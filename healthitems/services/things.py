"""
Reading and writing items inside their <thing> envelope.

Key patterns:
- The envelope (key, type id, state, flags, effective date, common data,
  tags) is handled here; the item class only sees its own root element
- Type ids are resolved through an `ItemTypeRegistry`
- Batch reads return one `Result` per thing so a bad thing never hides
  the good ones
"""

from datetime import datetime
from typing import Any
from uuid import UUID
from xml.etree import ElementTree as ET

import structlog

from healthitems.config import AppConfig, get_config
from healthitems.domain.errors import HealthItemError, ItemParseError, UnknownItemTypeError
from healthitems.domain.xmlhelpers import (
    parse_fragment,
    read_opt,
    read_opt_int,
    read_opt_text,
    write_opt_int,
    write_opt_text,
    write_text,
)
from healthitems.items import item_types
from healthitems.items.base import (
    CommonItemData,
    HealthRecordItem,
    ItemState,
    ThingKey,
    UnknownItem,
)
from healthitems.items.registry import ItemTypeRegistry
from healthitems.services.result import Result

logger = structlog.get_logger(__name__)

THING_ELEMENT = "thing"
TAG_SEPARATOR = ","


def item_to_element(item: HealthRecordItem, *, write_type_name: bool = True) -> ET.Element:
    """Wrap an item's XML in a <thing> element."""
    thing = ET.Element(THING_ELEMENT)
    if item.thing_key is not None:
        item.thing_key.to_xml("thing-id", thing)

    type_id = write_text(thing, "type-id", str(item.type_id))
    if write_type_name and item.type_name:
        type_id.set("name", item.type_name)

    write_text(thing, "thing-state", item.thing_state.value)
    write_opt_int(thing, "flags", item.thing_flags or None)

    effective = item.effective_date or item.when_value
    if effective is not None:
        write_text(thing, "eff-date", effective.isoformat())

    data_xml = ET.SubElement(thing, "data-xml")
    item.write_xml(data_xml)
    if not item.common.is_empty():
        item.common.to_xml("common", data_xml)

    write_opt_text(thing, "tags", TAG_SEPARATOR.join(item.tags))
    return thing


def serialize_item(item: HealthRecordItem, *, config: AppConfig | None = None) -> str:
    """Serialize an item with its envelope to XML text."""
    settings = (config or get_config()).serialization
    element = item_to_element(item, write_type_name=settings.write_type_name)
    if settings.indent is not None:
        ET.indent(element, space=" " * settings.indent)
    text = ET.tostring(element, encoding="unicode")
    if settings.xml_declaration:
        separator = "\n" if settings.indent is not None else ""
        text = f'<?xml version="1.0" encoding="{settings.encoding}"?>{separator}{text}'
    return text


def _read_envelope(thing: ET.Element) -> tuple[UUID, str | None, dict[str, Any]]:
    type_element = thing.find("type-id")
    if type_element is None or not (type_element.text or "").strip():
        raise ItemParseError(THING_ELEMENT, "missing <type-id>")
    try:
        type_id = UUID(type_element.text.strip())
        state = read_opt_text(thing, "thing-state")
        eff_date = read_opt_text(thing, "eff-date")
        envelope: dict[str, Any] = {
            "thing_key": read_opt(thing, "thing-id", ThingKey),
            "thing_state": ItemState(state.strip()) if state else ItemState.ACTIVE,
            "thing_flags": read_opt_int(thing, "flags") or 0,
            "effective_date": datetime.fromisoformat(eff_date.strip()) if eff_date else None,
            "tags": [
                tag.strip()
                for tag in (read_opt_text(thing, "tags") or "").split(TAG_SEPARATOR)
                if tag.strip()
            ],
        }
    except ValueError as exc:
        if isinstance(exc, ItemParseError):
            raise
        raise ItemParseError(THING_ELEMENT, str(exc)) from exc
    return type_id, type_element.get("name"), envelope


def _split_data_xml(thing: ET.Element) -> tuple[ET.Element, CommonItemData | None]:
    data_xml = thing.find("data-xml")
    if data_xml is None:
        raise ItemParseError(THING_ELEMENT, "missing <data-xml>")
    roots = [child for child in data_xml if child.tag != "common"]
    if len(roots) != 1:
        raise ItemParseError("data-xml", f"expected one item element, found {len(roots)}")
    common = read_opt(data_xml, "common", CommonItemData)
    return roots[0], common


def thing_from_element(
    thing: ET.Element,
    *,
    registry: ItemTypeRegistry | None = None,
    strict: bool | None = None,
) -> HealthRecordItem:
    """Build an item from a parsed <thing> element."""
    if thing.tag != THING_ELEMENT:
        raise ItemParseError(thing.tag, f"expected <{THING_ELEMENT}>")
    registry = registry if registry is not None else item_types
    if strict is None:
        strict = get_config().parsing.unknown_types == "error"

    type_id, type_name, envelope = _read_envelope(thing)
    root, common = _split_data_xml(thing)
    if common is not None:
        envelope["common"] = common

    item_class = registry.get(type_id)
    if item_class is None:
        if strict:
            raise UnknownItemTypeError(type_id)
        item: HealthRecordItem = UnknownItem.from_element(root, type_id, type_name, **envelope)
    else:
        item = item_class.parse_xml(root, **envelope)

    logger.debug(
        "thing_deserialized",
        type_id=str(type_id),
        item_class=type(item).__name__,
        thing_id=str(item.thing_key) if item.thing_key is not None else None,
    )
    return item


def deserialize_item(
    xml: str | bytes,
    *,
    registry: ItemTypeRegistry | None = None,
    strict: bool | None = None,
) -> HealthRecordItem:
    """
    Parse one <thing> document into the registered item class.

    Unregistered type ids give an `UnknownItem` holding the raw XML, or raise
    `UnknownItemTypeError` when `strict` (default from configuration).
    """
    return thing_from_element(parse_fragment(xml), registry=registry, strict=strict)


def _iter_things(element: ET.Element):
    if element.tag == THING_ELEMENT:
        yield element
        return
    for child in element:
        yield from _iter_things(child)


def deserialize_items(
    xml: str | bytes,
    *,
    registry: ItemTypeRegistry | None = None,
    strict: bool | None = None,
) -> list[Result[HealthRecordItem, HealthItemError]]:
    """Parse every <thing> in a document, each independently of the others."""
    results: list[Result[HealthRecordItem, HealthItemError]] = []
    for index, thing in enumerate(_iter_things(parse_fragment(xml))):
        try:
            item = thing_from_element(thing, registry=registry, strict=strict)
        except HealthItemError as exc:
            logger.warning("thing_parse_failed", index=index, error=str(exc))
            results.append(Result.err(exc))
        else:
            results.append(Result.ok(item))
    return results
