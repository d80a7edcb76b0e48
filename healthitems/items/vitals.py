"""Vital signs, body measurements and defibrillator episodes."""

from typing import Annotated
from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel, XmlWrapped
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDateTime, HealthServiceDateTime
from healthitems.domain.measurements import (
    BloodGlucoseMeasurement,
    BodyCompositionValue,
    FlowMeasurement,
    Length,
    StructuredMeasurement,
    VolumeMeasurement,
    WeightValue,
)
from healthitems.domain.ratings import Normalcy
from healthitems.domain.xmlhelpers import format_double
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


@register_item_type
class Weight(HealthRecordItem):
    TYPE_ID = UUID("3d34d87e-7fc1-4153-800f-f56592cb0d17")
    TYPE_NAME = "Weight"
    ROOT_ELEMENT = "weight"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    value: WeightValue

    def __str__(self) -> str:
        return str(self.value)


@register_item_type
class Height(HealthRecordItem):
    TYPE_ID = UUID("40750a6a-89b2-455c-bd8d-b420a4cb500b")
    TYPE_NAME = "Height"
    ROOT_ELEMENT = "height"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    value: Length

    def __str__(self) -> str:
        return str(self.value)


@register_item_type
class BloodPressure(HealthRecordItem):
    """Systolic and diastolic pressure in mmHg, with optional pulse."""

    TYPE_ID = UUID("ca3c57f4-f4c1-4e15-be67-0a3caf5414ed")
    TYPE_NAME = "Blood Pressure"
    ROOT_ELEMENT = "blood-pressure"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    systolic: int = Field(ge=0, description="mmHg")
    diastolic: int = Field(ge=0, description="mmHg")
    pulse: int | None = Field(default=None, ge=0, description="Beats per minute")
    irregular_heartbeat: bool | None = None

    def __str__(self) -> str:
        return f"{self.systolic}/{self.diastolic}"


@register_item_type
class BloodGlucose(HealthRecordItem):
    TYPE_ID = UUID("879e7c04-4e8a-4707-9ad3-b054df467ce4")
    TYPE_NAME = "Blood Glucose"
    ROOT_ELEMENT = "blood-glucose"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    value: BloodGlucoseMeasurement
    glucose_measurement_type: CodableValue
    outside_operating_temp: bool | None = None
    is_control_test: bool | None = None
    normalcy: Normalcy | None = None
    measurement_context: CodableValue | None = None

    def __str__(self) -> str:
        return str(self.value)


@register_item_type
class BloodOxygenSaturation(HealthRecordItem):
    TYPE_ID = UUID("3a54f95f-03d8-4f62-815f-f691fc94a500")
    TYPE_NAME = "Blood Oxygen Saturation"
    ROOT_ELEMENT = "blood-oxygen-saturation"

    when: HealthServiceDateTime
    value: float = Field(ge=0.0, le=1.0, description="Fraction of hemoglobin saturated")
    measurement_method: CodableValue | None = None
    measurement_flags: CodableValue | None = None

    def __str__(self) -> str:
        return f"{format_double(self.value * 100.0)}%"


@register_item_type
class HeartRate(HealthRecordItem):
    TYPE_ID = UUID("b81eb4a6-6eac-4292-ae93-3872d6870994")
    TYPE_NAME = "Heart Rate"
    ROOT_ELEMENT = "heart-rate"

    when: HealthServiceDateTime
    value: int = Field(ge=0, description="Beats per minute")
    measurement_method: CodableValue | None = None
    measurement_conditions: CodableValue | None = None
    measurement_flags: CodableValue | None = None

    def __str__(self) -> str:
        return f"{self.value} bpm"


@register_item_type
class PeakFlow(HealthRecordItem):
    """Peak expiratory flow and forced expiratory volumes."""

    TYPE_ID = UUID("5d8419af-90f0-4875-a370-0f881c18f6b3")
    TYPE_NAME = "Peak Flow"
    ROOT_ELEMENT = "peak-flow"

    when: ApproximateDateTime
    pef: FlowMeasurement | None = None
    fev1: VolumeMeasurement | None = None
    fev6: VolumeMeasurement | None = None
    measurement_flags: list[CodableValue] = Field(default_factory=list)

    def __str__(self) -> str:
        return summarize(
            f"PEF {self.pef}" if self.pef is not None else None,
            f"FEV1 {self.fev1}" if self.fev1 is not None else None,
            f"FEV6 {self.fev6}" if self.fev6 is not None else None,
        )


@register_item_type
class BodyDimension(HealthRecordItem):
    TYPE_ID = UUID("dd710b31-2b6f-45bd-9552-253562b9a7c1")
    TYPE_NAME = "Body Dimension"
    ROOT_ELEMENT = "body-dimension"

    when: ApproximateDateTime
    measurement_name: CodableValue
    value: Length

    def __str__(self) -> str:
        return f"{self.measurement_name}: {self.value}"


@register_item_type
class BodyComposition(HealthRecordItem):
    TYPE_ID = UUID("18adc276-5144-4e7e-bf6c-e56d8250adf8")
    TYPE_NAME = "Body Composition"
    ROOT_ELEMENT = "body-composition"

    when: ApproximateDateTime
    measurement_name: CodableValue
    value: BodyCompositionValue
    measurement_method: CodableValue | None = None
    site: CodableValue | None = None

    def __str__(self) -> str:
        return summarize(self.measurement_name, self.value, self.measurement_method)


class VitalSignsResultType(XmlModel):
    """One vital sign reading inside a `VitalSigns` item."""

    title: CodableValue
    value: float | None = None
    unit: CodableValue | None = None
    reference_minimum: float | None = None
    reference_maximum: float | None = None
    text_value: NonBlankStr | None = None
    flag: CodableValue | None = None

    def __str__(self) -> str:
        reading = None
        if self.value is not None:
            reading = summarize(format_double(self.value), self.unit, separator=" ")
        return summarize(self.title, reading or self.text_value, separator=" ")


@register_item_type
class VitalSigns(HealthRecordItem):
    TYPE_ID = UUID("73822612-C15F-4B49-9E65-6AF369E55C65")
    TYPE_NAME = "Vital Signs"
    ROOT_ELEMENT = "vital-signs"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    vital_signs_results: list[VitalSignsResultType] = Field(default_factory=list)
    site: NonBlankStr | None = None
    position: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(*self.vital_signs_results)


@register_item_type
class RespiratoryProfile(HealthRecordItem):
    """Expiratory flow zone boundaries for asthma action plans."""

    TYPE_ID = UUID("5fd15cb7-b717-4b1c-89e0-1dbcf7f815dd")
    TYPE_NAME = "Respiratory Profile"
    ROOT_ELEMENT = "respiratory-profile"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    expiratory_flow_red_zone_upper_boundary: FlowMeasurement | None = None
    expiratory_flow_orange_zone_upper_boundary: FlowMeasurement | None = None
    expiratory_flow_yellow_zone_upper_boundary: FlowMeasurement | None = None

    def __str__(self) -> str:
        return summarize(
            self.expiratory_flow_red_zone_upper_boundary,
            self.expiratory_flow_orange_zone_upper_boundary,
            self.expiratory_flow_yellow_zone_upper_boundary,
            separator=" / ",
        )


class DefibrillatorEpisodeField(XmlModel):
    """One named measurement reported by the device for an episode."""

    name: CodableValue
    value: StructuredMeasurement

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


@register_item_type
class DefibrillatorEpisode(HealthRecordItem):
    """An arrhythmia episode recorded by an implanted defibrillator."""

    TYPE_ID = UUID("a3d38add-b7b2-4ccd-856b-9b14bbc4e075")
    TYPE_NAME = "Defibrillator Episode"
    ROOT_ELEMENT = "defibrillator-episode"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    episode_type_group: CodableValue | None = None
    episode_type: CodableValue | None = None
    data_source: CodableValue | None = None
    duration_in_seconds: int | None = Field(default=None, ge=0)
    episode_fields: Annotated[
        list[DefibrillatorEpisodeField], XmlWrapped("episode-field")
    ] = Field(default_factory=list)

    def __str__(self) -> str:
        return summarize(
            self.episode_type_group,
            self.episode_type,
            self.data_source,
            f"{self.duration_in_seconds} seconds" if self.duration_in_seconds is not None else None,
        ) or str(self.when)
