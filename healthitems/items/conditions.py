"""Conditions, problems, allergies and family history."""

from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import (
    ApproximateDate,
    ApproximateDateTime,
    DurationValue,
    HealthServiceDateTime,
)
from healthitems.domain.people import Name, PersonItem
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


@register_item_type
class Condition(HealthRecordItem):
    TYPE_ID = UUID("7ea7a1f9-880b-4bd4-b593-f5660f20eda8")
    TYPE_NAME = "Condition"
    ROOT_ELEMENT = "condition"

    name: CodableValue
    onset_date: ApproximateDateTime | None = None
    status: CodableValue | None = None
    stop_date: ApproximateDateTime | None = None
    stop_reason: NonBlankStr | None = None

    def __str__(self) -> str:
        return self.name.text


@register_item_type
class Problem(HealthRecordItem):
    """A diagnosed problem with its durations and relative importance."""

    TYPE_ID = UUID("5E2C027E-3417-4CFC-BD10-5A6F2E91AD23")
    TYPE_NAME = "Problem"
    ROOT_ELEMENT = "problem"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    diagnosis: list[CodableValue] = Field(default_factory=list)
    duration: list[DurationValue] = Field(default_factory=list)
    importance: int | None = Field(default=None, ge=1, le=5)

    def __str__(self) -> str:
        return summarize(*self.diagnosis)


@register_item_type
class AllergicEpisode(HealthRecordItem):
    TYPE_ID = UUID("d65ad514-c492-4b59-bd05-f3f6cb43ceb3")
    TYPE_NAME = "Allergic Episode"
    ROOT_ELEMENT = "allergic-episode"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    name: CodableValue
    reaction: CodableValue | None = None
    treatment: CodableValue | None = None

    def __str__(self) -> str:
        return self.name.text


@register_item_type
class Contraindication(HealthRecordItem):
    """A substance that should not be given to the person."""

    TYPE_ID = UUID("046d0ad7-6d7f-4bfd-afd4-4192ca2e913d")
    TYPE_NAME = "Contraindication"
    ROOT_ELEMENT = "contraindication"

    substance: CodableValue
    status: CodableValue
    source: CodableValue | None = None
    documenter: PersonItem | None = None
    documented_date: ApproximateDateTime | None = None

    def __str__(self) -> str:
        return self.substance.text


@register_item_type
class FamilyHistoryPerson(HealthRecordItem):
    TYPE_ID = UUID("cc23422c-4fba-4a23-b52a-c01d6cd53fdf")
    TYPE_NAME = "Family History Person"
    ROOT_ELEMENT = "family-history-person"

    relative_name: Name
    relationship: CodableValue | None = None
    date_of_birth: ApproximateDate | None = None
    date_of_death: ApproximateDate | None = None

    def __str__(self) -> str:
        if self.relationship is None:
            return str(self.relative_name)
        return f"{self.relative_name} ({self.relationship})"


@register_item_type
class Allergy(HealthRecordItem):
    TYPE_ID = UUID("52bf9104-2c5e-4f1f-a66d-552ebcc53df7")
    TYPE_NAME = "Allergy"
    ROOT_ELEMENT = "allergy"

    name: CodableValue
    reaction: CodableValue | None = None
    first_observed: ApproximateDateTime | None = None
    allergen_type: CodableValue | None = None
    allergen_code: CodableValue | None = None
    treatment_provider: PersonItem | None = None
    treatment: CodableValue | None = None
    is_negated: bool | None = None

    def __str__(self) -> str:
        return self.name.text


class ConditionEntry(XmlModel):
    """A condition as recorded in someone's family history."""

    name: CodableValue
    onset_date: ApproximateDate | None = None
    resolution_date: ApproximateDate | None = None
    resolution: NonBlankStr | None = None
    occurrence: CodableValue | None = None
    severity: CodableValue | None = None

    def __str__(self) -> str:
        return self.name.text


class FamilyHistoryRelativeV3(XmlModel):
    relationship: CodableValue
    relative_name: PersonItem | None = None
    date_of_birth: ApproximateDate | None = None
    date_of_death: ApproximateDate | None = None
    region_of_origin: CodableValue | None = None

    def __str__(self) -> str:
        if self.relative_name is None:
            return str(self.relationship)
        return f"{self.relative_name} ({self.relationship})"


@register_item_type
class FamilyHistoryV3(HealthRecordItem):
    """Conditions of one relative."""

    TYPE_ID = UUID("4a04fcc8-19c1-4d59-a8c7-2031a03f21de")
    TYPE_NAME = "Family History"
    ROOT_ELEMENT = "family-history"

    condition: list[ConditionEntry] = Field(default_factory=list)
    relative: FamilyHistoryRelativeV3 | None = None

    def __str__(self) -> str:
        conditions = summarize(*self.condition)
        if self.relative is None:
            return conditions
        return f"{self.relative}: {conditions}" if conditions else str(self.relative)
