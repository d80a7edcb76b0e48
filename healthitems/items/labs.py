"""Lab results: radiology, microbiology, HbA1C, cholesterol, genetics and lab panels."""

from enum import IntEnum
from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDateTime, HealthServiceDateTime
from healthitems.domain.measurements import ConcentrationValue, GeneralMeasurement, HbA1CMeasurement
from healthitems.domain.people import Organization
from healthitems.domain.ranges import DoubleRange, TestResultRange
from healthitems.domain.xmlhelpers import format_double
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


class LabResultType(XmlModel):
    """The value of one lab test with its reference and toxic ranges."""

    value: float | None = None
    unit: CodableValue | None = None
    reference_range: DoubleRange | None = None
    toxic_range: DoubleRange | None = None
    text_value: NonBlankStr | None = None
    flag: list[CodableValue] = Field(default_factory=list)

    def __str__(self) -> str:
        if self.value is None:
            return self.text_value or ""
        value = format_double(self.value)
        return f"{value} {self.unit}" if self.unit is not None else value


class LabTestType(XmlModel):
    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    name: NonBlankStr | None = None
    substance: CodableValue | None = None
    collection_method: CodableValue | None = None
    abbreviation: NonBlankStr | None = None
    description: NonBlankStr | None = None
    code: list[CodableValue] = Field(default_factory=list)
    result: LabResultType | None = None
    status: CodableValue | None = None

    def __str__(self) -> str:
        label = self.name or self.abbreviation
        if self.result is None:
            return label or ""
        return f"{label}: {self.result}" if label else str(self.result)


@register_item_type
class RadiologyLabResults(HealthRecordItem):
    TYPE_ID = UUID("E4911BD3-61BF-4E10-AE78-9C574B888B8F")
    TYPE_NAME = "Radiology Result"
    ROOT_ELEMENT = "radiology-lab-results"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    title: NonBlankStr | None = None
    anatomic_site: NonBlankStr | None = None
    result_text: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(self.title, self.anatomic_site) or str(self.when)


@register_item_type
class MicrobiologyLabResults(HealthRecordItem):
    TYPE_ID = UUID("B8FCB138-F8E6-436A-A15D-E3A2D6916094")
    TYPE_NAME = "Microbiology Lab Test Result"
    ROOT_ELEMENT = "microbiology-lab-results"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    lab_tests: list[LabTestType] = Field(default_factory=list)
    sensitivity_agent: CodableValue | None = None
    sensitivity_value: CodableValue | None = None
    sensitivity_interpretation: NonBlankStr | None = None
    specimen_type: CodableValue | None = None
    organism_name: CodableValue | None = None
    organism_comment: NonBlankStr | None = None

    def __str__(self) -> str:
        if self.organism_name is not None:
            return str(self.organism_name)
        return summarize(*self.lab_tests) or str(self.when)


@register_item_type
class HbA1C(HealthRecordItem):
    """Glycated hemoglobin as a fraction of total hemoglobin."""

    TYPE_ID = UUID("227F55FB-1001-4D4E-9F6A-8D893E07B451")
    TYPE_NAME = "HbA1C Measurement"
    ROOT_ELEMENT = "HbA1C"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    value: float = Field(ge=0.0, le=1.0)
    assay_method: CodableValue | None = Field(default=None, alias="HbA1C-assay-method")
    device_id: NonBlankStr | None = None

    def __str__(self) -> str:
        return f"{format_double(self.value * 100.0)}%"


@register_item_type
class HbA1CV2(HealthRecordItem):
    TYPE_ID = UUID("62160199-b80f-4905-a55a-ac4ba825ceae")
    TYPE_NAME = "HbA1C Measurement V2"
    ROOT_ELEMENT = "HbA1C"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    value: HbA1CMeasurement
    assay_method: CodableValue | None = Field(default=None, alias="HbA1C-assay-method")
    device_id: NonBlankStr | None = None

    def __str__(self) -> str:
        return str(self.value)


@register_item_type
class CholesterolProfileV2(HealthRecordItem):
    """Lipid panel results as concentrations."""

    TYPE_ID = UUID("98F76958-E34F-459B-A760-83C1699ADD38")
    TYPE_NAME = "Cholesterol Profile V2"
    ROOT_ELEMENT = "cholesterol-profile"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    ldl: ConcentrationValue | None = None
    hdl: ConcentrationValue | None = None
    total_cholesterol: ConcentrationValue | None = None
    triglyceride: ConcentrationValue | None = None

    def __str__(self) -> str:
        if self.total_cholesterol is not None:
            return f"Total {self.total_cholesterol}"
        if self.ldl is not None and self.hdl is not None:
            return f"LDL {self.ldl} / HDL {self.hdl}"
        if self.ldl is not None:
            return f"LDL {self.ldl}"
        if self.hdl is not None:
            return f"HDL {self.hdl}"
        if self.triglyceride is not None:
            return f"Triglyceride {self.triglyceride}"
        return ""


class NumberingScheme(IntEnum):
    ZERO_BASED = 0
    ONE_BASED = 1


@register_item_type
class GeneticSnpResults(HealthRecordItem):
    """
    Metadata for a set of single nucleotide polymorphism results.

    The results themselves travel in an attached file and are not parsed.
    """

    TYPE_ID = UUID("9d006053-116c-43cc-9554-e0cda43558cb")
    TYPE_NAME = "Genetic SNP Results"
    ROOT_ELEMENT = "genetic-snp-results"

    when: ApproximateDateTime | None = None
    genome_build: NonBlankStr
    chromosome: NonBlankStr
    numbering_scheme: NumberingScheme
    ordered_by: Organization | None = None
    test_provider: Organization | None = None
    laboratory_name: Organization | None = None
    annotation_version: NonBlankStr | None = None
    dbsnp_build: NonBlankStr | None = Field(default=None, alias="dbSNP-build")
    platform: NonBlankStr | None = None

    def __str__(self) -> str:
        return f"Chromosome {self.chromosome} ({self.genome_build})"


class LabTestResultValue(XmlModel):
    measurement: GeneralMeasurement
    ranges: list[TestResultRange] = Field(default_factory=list)
    flag: list[CodableValue] = Field(default_factory=list)

    def __str__(self) -> str:
        return summarize(self.measurement, *self.ranges, *self.flag)


class LabTestResultDetails(XmlModel):
    when: ApproximateDateTime | None = None
    name: NonBlankStr | None = None
    substance: CodableValue | None = None
    collection_method: CodableValue | None = None
    clinical_code: CodableValue | None = None
    value: LabTestResultValue | None = None
    status: CodableValue | None = None
    note: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(
            self.when,
            self.name,
            self.substance,
            self.collection_method,
            self.clinical_code,
            self.value,
            self.status,
            self.note,
            separator=" ",
        )


class LabTestResultGroup(XmlModel):
    """A named group of results, possibly split into sub-groups."""

    group_name: CodableValue
    laboratory_name: Organization | None = None
    status: CodableValue | None = None
    sub_groups: list["LabTestResultGroup"] = Field(default_factory=list)
    results: list[LabTestResultDetails] = Field(default_factory=list)

    def all_results(self) -> list[LabTestResultDetails]:
        """Results of this group and of every sub-group, depth first."""
        found = list(self.results)
        for group in self.sub_groups:
            found.extend(group.all_results())
        return found

    def __str__(self) -> str:
        return summarize(
            self.group_name, self.laboratory_name, self.status, *self.sub_groups, *self.results
        )


@register_item_type
class LabTestResults(HealthRecordItem):
    TYPE_ID = UUID("5800eab5-a8c2-482a-a4d6-f1db25ae08c3")
    TYPE_NAME = "Lab Test Results"
    ROOT_ELEMENT = "lab-test-results"

    when: ApproximateDateTime | None = None
    lab_group: list[LabTestResultGroup] = Field(min_length=1)
    ordered_by: Organization | None = None

    def __str__(self) -> str:
        return summarize(*self.lab_group)
