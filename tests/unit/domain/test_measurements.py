"""
Tests for measurements, ranges and people.

Covers:
- Base-unit element names and display values
- Sign checks and unit conversions
- Composite measurement invariants
- Range membership, open bounds and NaN bounds
- Name, address and contact summaries
"""

from __future__ import annotations

import math
from xml.etree import ElementTree as ET

import pytest
from hypothesis import given
from hypothesis import strategies as st

from healthitems.domain.codes import CodableValue
from healthitems.domain.measurements import (
    BloodGlucoseMeasurement,
    BodyCompositionValue,
    DoseValue,
    GeneralMeasurement,
    Length,
    StructuredMeasurement,
    TemperatureMeasurement,
    WeightValue,
)
from healthitems.domain.people import Address, ContactInfo, Name, Phone
from healthitems.domain.ranges import DoubleRange, IntRange, TestResultRange, WeightRange


class TestMeasurements:
    def test_value_element_is_the_unit(self) -> None:
        element = WeightValue.from_pounds(180).to_xml("value")

        assert [child.tag for child in element] == ["kg", "display"]
        assert element.find("display").get("units") == "lb"
        assert element.find("display").text == "180"

    def test_reads_base_unit(self) -> None:
        length = Length.from_xml(ET.fromstring("<value><m>1.8</m></value>"))

        assert length.value == 1.8
        assert str(length) == "1.8 m"

    def test_summary_prefers_display(self) -> None:
        assert str(WeightValue.from_pounds(180)) == "180 lb"
        assert str(WeightValue(value=80)) == "80 kg"

    @given(kg=st.floats(min_value=0.0, max_value=1000.0))
    def test_pounds_conversion(self, kg: float) -> None:
        weight = WeightValue(value=kg)

        assert math.isclose(weight.pounds, kg * WeightValue.POUNDS_PER_KG)

    def test_negative_values_are_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not be negative"):
            WeightValue(value=-1)

    def test_temperature_may_be_negative(self) -> None:
        assert TemperatureMeasurement(value=-5).value == -5.0

    def test_glucose_from_mg_per_dl(self) -> None:
        glucose = BloodGlucoseMeasurement.from_mg_per_dl(90)

        assert glucose.value == 5.0
        assert glucose.display.units == "mg/dL"

    def test_body_composition_needs_a_value(self) -> None:
        with pytest.raises(ValueError, match="mass or a percentage"):
            BodyCompositionValue()

    @given(percent=st.one_of(st.floats(max_value=-0.001), st.floats(min_value=1.001)))
    def test_body_composition_percent_bounds(self, percent: float) -> None:
        with pytest.raises(ValueError):
            BodyCompositionValue(percent_value=percent)

    def test_general_measurement(self) -> None:
        dose = GeneralMeasurement(
            display="2 tablets",
            structured=[StructuredMeasurement(value=2, units=CodableValue(text="tablets"))],
        )
        element = dose.to_xml("dose")

        assert element.findtext("structured/value") == "2"
        assert element.findtext("structured/units/text") == "tablets"
        assert str(dose) == "2 tablets"

    def test_dose_text(self) -> None:
        assert str(DoseValue(exact_dose=5)) == "5"
        assert str(DoseValue(min_dose=1, max_dose=2.5)) == "1-2.5"
        assert str(DoseValue(description="as needed")) == "as needed"
        with pytest.raises(ValueError):
            DoseValue(exact_dose=0)


class TestRanges:
    def test_membership(self) -> None:
        bounds = DoubleRange(minimum_range=1.0, maximum_range=2.0)

        assert 1.5 in bounds
        assert 1.0 in bounds
        assert 2.5 not in bounds

    def test_open_bounds(self) -> None:
        assert 100.0 in DoubleRange(minimum_range=1.0)
        assert -100.0 in DoubleRange(maximum_range=1.0)

    def test_nan_bound_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be a number"):
            DoubleRange(minimum_range=math.nan)

    def test_xml_shape(self) -> None:
        element = ET.fromstring(
            "<range><minimum-range>1</minimum-range><maximum-range>2.5</maximum-range></range>"
        )

        bounds = DoubleRange.from_xml(element)

        assert bounds == DoubleRange(minimum_range=1.0, maximum_range=2.5)
        assert ET.tostring(bounds.to_xml("range"), encoding="unicode") == ET.tostring(
            element, encoding="unicode"
        )

    def test_int_range_text(self) -> None:
        assert str(IntRange(minimum_range=1, maximum_range=5)) == "1 - 5"

    def test_weight_range_compares_kilograms(self) -> None:
        bounds = WeightRange(minimum_range=WeightValue(value=60), maximum_range=WeightValue(value=80))

        assert WeightValue(value=70) in bounds
        assert 85.0 not in bounds

    def test_test_result_range_order(self) -> None:
        normal = TestResultRange(
            type=CodableValue(text="normal"),
            text=CodableValue(text="3.9 - 5.5"),
            value=DoubleRange(minimum_range=3.9, maximum_range=5.5),
        )

        assert [child.tag for child in normal.to_xml("ranges")] == ["type", "text", "value"]
        assert str(normal) == "normal: 3.9 - 5.5"


class TestPeople:
    def test_name_from_parts(self) -> None:
        name = Name.from_parts("Ada", "Lovelace", middle="King")

        assert name.full == "Ada King Lovelace"
        assert str(name) == "Ada King Lovelace"

    def test_address_needs_a_street(self) -> None:
        with pytest.raises(ValueError):
            Address(street=[], city="Springfield", postcode="12345", country="US")

    def test_contact_prefers_primary_phone(self) -> None:
        contact = ContactInfo(
            phone=[Phone(number="555-0100"), Phone(number="555-0199", is_primary=True)]
        )

        assert contact.primary_phone.number == "555-0199"
        assert str(contact) == "555-0199"
