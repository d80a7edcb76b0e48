"""
Tests that run over every registered item type.

Covers:
- Writing a fully populated item and reading it back unchanged
- Element order following field declaration order
- A non-empty summary for every populated item
- Bounds and required values of the medication, respiratory, allergy,
  contraindication and discharge summary types
"""

from __future__ import annotations

import types
import typing
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union
from uuid import UUID
from xml.etree import ElementTree as ET

import pytest
from pydantic import ValidationError
from pydantic.fields import FieldInfo

from healthitems.domain.base import XmlAttribute, XmlModel, XmlText
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDateTime, HealthServiceDateTime
from healthitems.domain.errors import ItemParseError
from healthitems.domain.measurements import FlowMeasurement, InsulinInjectionMeasurement
from healthitems.items import item_types
from healthitems.items.base import HealthRecordItem
from healthitems.items.conditions import AllergicEpisode, Contraindication
from healthitems.items.encounters import DischargeSummary
from healthitems.items.fitness import HeartRateBound
from healthitems.items.medications import AsthmaInhalerUse, InsulinInjection
from healthitems.items.profiles import GlucoseBound
from healthitems.items.vitals import RespiratoryProfile

Parse = Callable[[str], ET.Element]

SAMPLE_TIME = datetime(2024, 3, 1, 7, 30)
SAMPLE_ID = UUID("0f8fad5b-d9cb-469f-a165-70867728950e")
MAX_DEPTH = 4

# Models whose validators tie fields together
SPECIAL_SAMPLES: dict[type, Any] = {
    ApproximateDateTime: lambda: ApproximateDateTime.from_datetime(SAMPLE_TIME),
    GlucoseBound: lambda: GlucoseBound(absolute_glucose={"value": 5.5}),
    HeartRateBound: lambda: HeartRateBound(absolute_heartrate=120),
}


def _bounded(start: float, field: FieldInfo | None) -> float:
    value = start
    for constraint in field.metadata if field is not None else ():
        if getattr(constraint, "gt", None) is not None:
            value = max(value, constraint.gt + 1)
        if getattr(constraint, "ge", None) is not None:
            value = max(value, constraint.ge)
        if getattr(constraint, "lt", None) is not None:
            value = min(value, constraint.lt - 1)
        if getattr(constraint, "le", None) is not None:
            value = min(value, constraint.le)
    return value


def _sample_value(annotation: Any, field: FieldInfo | None, depth: int) -> Any:
    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if origin is Annotated:
        return _sample_value(args[0], field, depth)
    if origin in (Union, types.UnionType):
        return _sample_value(next(arg for arg in args if arg is not type(None)), field, depth)
    if origin is list:
        return [_sample_value(args[0], None, depth)]
    if origin is Literal:
        return args[0]
    if annotation in SPECIAL_SAMPLES:
        return SPECIAL_SAMPLES[annotation]()
    if isinstance(annotation, type) and issubclass(annotation, XmlModel):
        return sample_model(annotation, depth + 1)
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return next(iter(annotation))
    if annotation is bool:
        return True
    if annotation is int:
        return int(_bounded(1, field))
    if annotation is float:
        return float(_bounded(1, field))
    if annotation is Decimal:
        return Decimal("1.5")
    if annotation is UUID:
        return SAMPLE_ID
    if annotation is datetime:
        return SAMPLE_TIME
    if annotation is date:
        return SAMPLE_TIME.date()
    if annotation is str:
        return "sample"
    raise TypeError(f"no sample for {annotation!r}")


def sample_model(model: type[XmlModel], depth: int = 0) -> Any:
    """Build `model` with every XML field set, or only required ones when nested deeply."""
    values = {
        name: _sample_value(field.annotation, field, depth)
        for name, field in model.xml_fields().items()
        if depth < MAX_DEPTH or field.is_required()
    }
    return model.model_validate(values)


def _expected_children(item_class: type[HealthRecordItem]) -> list[str]:
    return [
        item_class.element_name(name, field)
        for name, field in item_class.xml_fields().items()
        if not any(isinstance(marker, (XmlAttribute, XmlText)) for marker in field.metadata)
    ]


CATALOGUE = sorted(item_types.registered_types.values(), key=lambda item_class: item_class.__name__)


@pytest.mark.parametrize("item_class", CATALOGUE, ids=lambda item_class: item_class.__name__)
class TestEveryItemType:
    def test_round_trip(self, item_class: type[HealthRecordItem]) -> None:
        item = sample_model(item_class)

        text = ET.tostring(item.write_xml(), encoding="unicode")

        assert item_class.parse_xml(ET.fromstring(text)) == item

    def test_element_order(self, item_class: type[HealthRecordItem]) -> None:
        element = sample_model(item_class).write_xml()

        assert element.tag == item_class.ROOT_ELEMENT
        assert [child.tag for child in element] == _expected_children(item_class)

    def test_summary(self, item_class: type[HealthRecordItem]) -> None:
        assert str(sample_model(item_class)).strip()


class TestAsthmaInhalerUse:
    def test_dose_count_bounds(self) -> None:
        use = AsthmaInhalerUse(drug=CodableValue(text="albuterol"), dose_count=0)
        assert str(use) == "albuterol: 0 doses"

        with pytest.raises(ValidationError):
            use.dose_count = -1

    def test_dose_count_is_required(self, parse: Parse) -> None:
        with pytest.raises(ItemParseError, match="dose-count"):
            AsthmaInhalerUse.parse_xml(
                parse("<asthma-inhaler-use><drug><text>albuterol</text></drug></asthma-inhaler-use>")
            )


class TestInsulinInjection:
    def test_negative_amount_is_rejected(self, parse: Parse) -> None:
        xml = (
            "<insulin-injection><type><text>rapid</text></type>"
            "<amount><IEv>-2</IEv></amount></insulin-injection>"
        )

        with pytest.raises(ItemParseError, match="must not be negative"):
            InsulinInjection.parse_xml(parse(xml))

    def test_summary(self) -> None:
        injection = InsulinInjection(
            type=CodableValue(text="rapid"), amount=InsulinInjectionMeasurement(value=4)
        )

        assert str(injection) == "rapid: 4 IE"
        assert injection.write_xml().findtext("amount/IEv") == "4"


class TestRespiratoryProfile:
    def test_boundaries_are_flows(self) -> None:
        profile = RespiratoryProfile(
            when=HealthServiceDateTime.from_datetime(SAMPLE_TIME),
            expiratory_flow_red_zone_upper_boundary=FlowMeasurement(value=2),
            expiratory_flow_yellow_zone_upper_boundary=FlowMeasurement(value=4.5),
        )

        assert str(profile) == "2 L/s / 4.5 L/s"
        element = profile.write_xml()
        assert element.findtext("expiratory-flow-red-zone-upper-boundary/liters-per-second") == "2"

    def test_negative_flow_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RespiratoryProfile(expiratory_flow_red_zone_upper_boundary=FlowMeasurement(value=-1))


class TestRequiredCodes:
    def test_allergic_episode_needs_a_name(self, parse: Parse) -> None:
        with pytest.raises(ItemParseError, match="name"):
            AllergicEpisode.parse_xml(
                parse("<allergic-episode><reaction><text>hives</text></reaction></allergic-episode>")
            )

    def test_contraindication_needs_a_status(self) -> None:
        with pytest.raises(ValidationError, match="status"):
            Contraindication(substance=CodableValue(text="penicillin"))

    def test_contraindication_summary(self) -> None:
        item = Contraindication(
            substance=CodableValue(text="penicillin"), status=CodableValue(text="active")
        )

        assert str(item) == "penicillin"


class TestDischargeSummary:
    def test_blank_text_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DischargeSummary(text="  ")

    def test_summary_joins_present_parts(self) -> None:
        item = DischargeSummary(
            when=HealthServiceDateTime.from_datetime(SAMPLE_TIME),
            principal_diagnosis=CodableValue(text="pneumonia"),
            text="Recovered well",
        )

        assert str(item).startswith("2024-03-01 07:30")
        assert str(item).endswith(", pneumonia, Recovered well")
