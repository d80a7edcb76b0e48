"""
Tests for coded values.

Covers:
- CodableValue XML shape with repeated <code> elements
- Building values from a vocabulary key
- Code matching by vocabulary and family
- Text validation
"""

from __future__ import annotations

from xml.etree import ElementTree as ET

import pytest

from healthitems.domain.codes import CodableValue, CodedValue, VocabularyKey

RXNORM = VocabularyKey(name="RxNorm", family="RxNorm", version="2024AA")


def test_text_only_value_writes_text() -> None:
    element = CodableValue(text="Aspirin").to_xml("name")

    assert ET.tostring(element, encoding="unicode") == "<name><text>Aspirin</text></name>"


def test_from_vocabulary_writes_code_in_schema_order() -> None:
    value = CodableValue.from_vocabulary("Aspirin", "1191", RXNORM)
    code = value.to_xml("name").find("code")

    assert [child.tag for child in code] == ["value", "family", "type", "version"]
    assert code.findtext("type") == "RxNorm"


def test_reads_multiple_codes() -> None:
    element = ET.fromstring(
        "<name><text>Hypertension</text>"
        "<code><value>I10</value><type>icd10</type></code>"
        "<code><value>38341003</value><family>snomed</family><type>SNOMED-CT</type></code>"
        "</name>"
    )

    value = CodableValue.from_xml(element)

    assert [code.value for code in value.codes] == ["I10", "38341003"]
    assert value.matches("I10", "icd10")
    assert value.matches("38341003", "SNOMED-CT", family="snomed")
    assert not value.matches("38341003", "SNOMED-CT", family="other")


def test_add_code_returns_the_code() -> None:
    value = CodableValue(text="Aspirin")

    code = value.add_code("1191", "RxNorm")

    assert value.codes == [code]
    assert code.vocabulary_name == "RxNorm"


def test_add_rejects_non_codes() -> None:
    value = CodableValue(text="Aspirin")

    with pytest.raises(ValueError):
        value.add("1191")  # type: ignore[arg-type]


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_blank_text_is_rejected(text: str) -> None:
    with pytest.raises(ValueError, match="whitespace"):
        CodableValue(text=text)


def test_summaries() -> None:
    code = CodedValue(value="1191", vocabulary_name="RxNorm", family="RxNorm")

    assert str(CodableValue(text="Aspirin")) == "Aspirin"
    assert str(code) == "RxNorm, RxNorm, 1191"
    assert str(RXNORM) == "RxNorm, RxNorm, 2024AA"
