"""
Tests for reading and writing items in their <thing> envelope.

Covers:
- Envelope layout and the type name attribute
- Round trips through XML text
- Unregistered type ids, kept generically or rejected
- Batch reads that keep going past bad things
- Output formatting settings
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from uuid import UUID
from xml.etree import ElementTree as ET

import pytest

from healthitems.config import AppConfig, SerializationConfig, get_config
from healthitems.domain.dates import HealthServiceDateTime
from healthitems.domain.errors import ItemParseError, UnknownItemTypeError
from healthitems.domain.measurements import WeightValue
from healthitems.items.base import CommonItemData, ItemState, ThingKey, UnknownItem
from healthitems.items.legal import Payer
from healthitems.items.registry import ItemTypeRegistry
from healthitems.items.vitals import Weight
from healthitems.services.things import (
    deserialize_item,
    deserialize_items,
    item_to_element,
    serialize_item,
    thing_from_element,
)

TAKEN_AT = datetime(2024, 3, 1, 7, 30)
THING_ID = UUID("0f8fad5b-d9cb-469f-a165-70867728950e")
VERSION = UUID("7c9e6679-7425-40de-944b-e07fc1f90ae7")
MYSTERY_TYPE = "11111111-2222-3333-4444-555555555555"

WEIGHT_THING = f"""
<thing>
  <thing-id version-stamp="{VERSION}">{THING_ID}</thing-id>
  <type-id name="Weight">3d34d87e-7fc1-4153-800f-f56592cb0d17</type-id>
  <thing-state>Deleted</thing-state>
  <flags>4</flags>
  <eff-date>2024-03-01T07:30:00</eff-date>
  <data-xml>
    <weight>
      <when><date><y>2024</y><m>3</m><d>1</d></date><time><h>7</h><m>30</m></time></when>
      <value><kg>80</kg></value>
    </weight>
    <common><note>after run</note></common>
  </data-xml>
  <tags>morning, scale</tags>
</thing>
"""

MYSTERY_THING = f"""
<thing>
  <type-id name="Mystery">{MYSTERY_TYPE}</type-id>
  <data-xml><mystery><a>1</a></mystery></data-xml>
</thing>
"""

BAD_WEIGHT_THING = """
<thing>
  <type-id>3d34d87e-7fc1-4153-800f-f56592cb0d17</type-id>
  <data-xml><weight><value><kg>-1</kg></value></weight></data-xml>
</thing>
"""

BAD_MYSTERY_THING = f"""
<thing>
  <type-id>{MYSTERY_TYPE}</type-id>
  <flags>-1</flags>
  <data-xml><mystery/></data-xml>
</thing>
"""

COMPACT = AppConfig()


@pytest.fixture(autouse=True)
def clear_config_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("UNKNOWN_ITEM_TYPES", raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def _weight(**envelope: object) -> Weight:
    return Weight(
        when=HealthServiceDateTime.from_datetime(TAKEN_AT),
        value=WeightValue(value=80),
        **envelope,
    )


class TestItemToElement:
    def test_envelope_layout(self) -> None:
        weight = _weight(
            thing_key=ThingKey(id=THING_ID, version_stamp=VERSION),
            tags=["morning", "scale"],
            common=CommonItemData(note="after run"),
        )

        thing = item_to_element(weight)

        assert [child.tag for child in thing] == [
            "thing-id",
            "type-id",
            "thing-state",
            "eff-date",
            "data-xml",
            "tags",
        ]
        assert thing.findtext("thing-id") == str(THING_ID)
        assert thing.find("thing-id").get("version-stamp") == str(VERSION)
        assert thing.find("type-id").get("name") == "Weight"
        assert thing.findtext("thing-state") == "Active"
        assert thing.findtext("eff-date") == "2024-03-01T07:30:00"
        assert [child.tag for child in thing.find("data-xml")] == ["weight", "common"]
        assert thing.findtext("tags") == "morning,scale"

    def test_minimal_envelope(self) -> None:
        thing = item_to_element(Payer(plan_name="Plan"), write_type_name=False)

        assert [child.tag for child in thing] == ["type-id", "thing-state", "data-xml"]
        assert thing.find("type-id").get("name") is None

    def test_flags_are_written_when_set(self) -> None:
        assert item_to_element(_weight(thing_flags=2)).findtext("flags") == "2"

    def test_effective_date_wins_over_when(self) -> None:
        thing = item_to_element(_weight(effective_date=datetime(2024, 1, 1)))

        assert thing.findtext("eff-date") == "2024-01-01T00:00:00"


class TestDeserializeItem:
    def test_reads_envelope_and_item(self) -> None:
        weight = deserialize_item(WEIGHT_THING, strict=False)

        assert isinstance(weight, Weight)
        assert weight.value == WeightValue(value=80)
        assert weight.thing_key == ThingKey(id=THING_ID, version_stamp=VERSION)
        assert weight.thing_state is ItemState.DELETED
        assert weight.thing_flags == 4
        assert weight.effective_date == TAKEN_AT
        assert weight.common.note == "after run"
        assert weight.tags == ["morning", "scale"]

    def test_round_trip(self) -> None:
        weight = _weight(
            thing_key=ThingKey(id=THING_ID),
            effective_date=TAKEN_AT,
            tags=["morning"],
            common=CommonItemData(source="scale"),
        )

        text = serialize_item(weight, config=COMPACT)

        assert deserialize_item(text, strict=True) == weight

    def test_unknown_type_is_kept(self) -> None:
        item = deserialize_item(MYSTERY_THING, strict=False)

        assert isinstance(item, UnknownItem)
        assert item.type_id == UUID(MYSTERY_TYPE)
        assert str(item) == f"Mystery ({MYSTERY_TYPE})"
        thing = item_to_element(item)
        assert thing.find("type-id").get("name") == "Mystery"
        assert ET.tostring(thing.find("data-xml/mystery"), encoding="unicode") == (
            "<mystery><a>1</a></mystery>"
        )

    def test_unknown_type_in_strict_mode(self) -> None:
        with pytest.raises(UnknownItemTypeError, match=MYSTERY_TYPE):
            deserialize_item(MYSTERY_THING, strict=True)

    def test_strict_default_comes_from_configuration(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("UNKNOWN_ITEM_TYPES", "error")
        get_config.cache_clear()

        with pytest.raises(UnknownItemTypeError):
            deserialize_item(MYSTERY_THING)

    def test_invalid_envelope_on_unknown_type(self) -> None:
        with pytest.raises(ItemParseError, match="flags"):
            deserialize_item(BAD_MYSTERY_THING, strict=False)

    def test_custom_registry(self) -> None:
        item = deserialize_item(WEIGHT_THING, registry=ItemTypeRegistry(), strict=False)

        assert isinstance(item, UnknownItem)
        assert item.root_element == "weight"

    @pytest.mark.parametrize(
        "xml,reason",
        [
            ("<thing><data-xml><weight/></data-xml></thing>", "type-id"),
            ("<thing><type-id>not-a-uuid</type-id><data-xml/></thing>", "thing"),
            (f"<thing><type-id>{MYSTERY_TYPE}</type-id></thing>", "data-xml"),
            ("<item/>", "expected <thing>"),
            ("<thing>", "document"),
        ],
    )
    def test_malformed_envelopes(self, xml: str, reason: str) -> None:
        with pytest.raises(ItemParseError, match=reason):
            deserialize_item(xml, strict=False)

    def test_data_xml_needs_exactly_one_item(self) -> None:
        thing = ET.fromstring(
            f"<thing><type-id>{MYSTERY_TYPE}</type-id><data-xml><a/><b/></data-xml></thing>"
        )

        with pytest.raises(ItemParseError, match="found 2"):
            thing_from_element(thing, strict=False)


class TestDeserializeItems:
    def test_bad_things_do_not_hide_good_ones(self) -> None:
        document = f"<things>{WEIGHT_THING}{BAD_WEIGHT_THING}{MYSTERY_THING}</things>"

        results = deserialize_items(document, strict=False)

        assert [result.is_ok() for result in results] == [True, False, True]
        assert isinstance(results[0].unwrap(), Weight)
        assert isinstance(results[1].unwrap_err(), ItemParseError)
        assert isinstance(results[2].unwrap(), UnknownItem)

    def test_invalid_unknown_thing_is_a_result(self) -> None:
        document = f"<things>{BAD_MYSTERY_THING}{WEIGHT_THING}</things>"

        results = deserialize_items(document, strict=False)

        assert [result.is_ok() for result in results] == [False, True]
        assert isinstance(results[0].unwrap_err(), ItemParseError)
        assert isinstance(results[1].unwrap(), Weight)

    def test_strict_failures_are_results(self) -> None:
        results = deserialize_items(f"<group>{MYSTERY_THING}</group>", strict=True)

        assert isinstance(results[0].unwrap_err(), UnknownItemTypeError)

    def test_single_thing_document(self) -> None:
        assert len(deserialize_items(WEIGHT_THING, strict=False)) == 1

    def test_nested_groups(self) -> None:
        document = f"<response><group>{WEIGHT_THING}</group><group>{WEIGHT_THING}</group></response>"

        assert len(deserialize_items(document, strict=False)) == 2


class TestSerializeItem:
    def test_compact_output(self) -> None:
        text = serialize_item(Payer(plan_name="Plan"), config=COMPACT)

        assert text.startswith("<thing><type-id")
        assert "\n" not in text

    def test_indent_and_declaration(self) -> None:
        config = AppConfig(serialization=SerializationConfig(indent=2, xml_declaration=True))

        text = serialize_item(Payer(plan_name="Plan"), config=config)

        assert text.startswith('<?xml version="1.0" encoding="utf-8"?>\n<thing>\n  <type-id')
        assert "\n      <plan-name>Plan</plan-name>" in text

    def test_type_name_setting(self) -> None:
        config = AppConfig(serialization=SerializationConfig(write_type_name=False))

        text = serialize_item(Payer(plan_name="Plan"), config=config)

        assert 'name="Payer"' not in text
