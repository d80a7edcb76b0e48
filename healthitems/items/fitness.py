"""
Exercise sessions, aerobic profiles and weekly aerobic goals.

Key patterns:
- `AerobicData` describes one session and is shared by the weekly goal
- Heart rate zone bounds are either absolute or a fraction of the maximum
"""

from typing import Annotated, Self
from uuid import UUID

from pydantic import Field, model_validator

from healthitems.domain.base import NonBlankStr, XmlAttribute, XmlModel
from healthitems.domain.codes import CodableValue, CodedValue
from healthitems.domain.dates import ApproximateDateTime, HealthServiceDateTime
from healthitems.domain.measurements import (
    AltitudeMeasurement,
    Length,
    PaceMeasurement,
    PowerMeasurement,
    SpeedMeasurement,
    StructuredMeasurement,
    TemperatureMeasurement,
    TorqueMeasurement,
)
from healthitems.domain.ratings import RelativeRating
from healthitems.domain.xmlhelpers import format_double
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


def _minutes(value: float | None) -> str | None:
    return None if value is None else f"{format_double(value)} minutes"


class AerobicData(XmlModel):
    """One aerobic session: distance, time, heart rate, speed, power and so on."""

    mode: CodableValue | None = None
    distance: Length | None = None
    minutes: float | None = Field(default=None, gt=0)
    intensity: RelativeRating | None = None
    peak_heartrate: int | None = Field(default=None, gt=0)
    avg_heartrate: int | None = Field(default=None, gt=0)
    min_heartrate: int | None = Field(default=None, gt=0)
    energy: float | None = Field(default=None, gt=0, description="Calories")
    energy_from_fat: float | None = Field(default=None, gt=0, description="Calories")
    peak_speed: SpeedMeasurement | None = None
    avg_speed: SpeedMeasurement | None = None
    min_speed: SpeedMeasurement | None = None
    peak_pace: PaceMeasurement | None = None
    avg_pace: PaceMeasurement | None = None
    min_pace: PaceMeasurement | None = None
    peak_power: PowerMeasurement | None = None
    avg_power: PowerMeasurement | None = None
    min_power: PowerMeasurement | None = None
    peak_torque: TorqueMeasurement | None = None
    avg_torque: TorqueMeasurement | None = None
    min_torque: TorqueMeasurement | None = None
    left_right_balance: float | None = Field(default=None, ge=0.0, le=1.0)
    peak_cadence: float | None = Field(default=None, gt=0)
    avg_cadence: float | None = Field(default=None, gt=0)
    min_cadence: float | None = Field(default=None, gt=0)
    peak_temperature: TemperatureMeasurement | None = None
    avg_temperature: TemperatureMeasurement | None = None
    min_temperature: TemperatureMeasurement | None = None
    peak_altitude: AltitudeMeasurement | None = None
    avg_altitude: AltitudeMeasurement | None = None
    min_altitude: AltitudeMeasurement | None = None
    elevation_gain: Length | None = None
    elevation_loss: Length | None = None
    number_of_steps: int | None = Field(default=None, ge=0)
    number_of_aerobic_steps: int | None = Field(default=None, ge=0)
    aerobic_step_minutes: float | None = Field(default=None, gt=0)

    def __str__(self) -> str:
        return summarize(self.distance, _minutes(self.minutes))


class ExerciseDetail(XmlModel):
    name: CodedValue
    value: StructuredMeasurement

    def __str__(self) -> str:
        return f"{self.name.value}: {self.value}"


class ExerciseSegment(XmlModel):
    activity: CodableValue
    title: NonBlankStr | None = None
    distance: Length | None = None
    duration: float | None = Field(default=None, gt=0, description="minutes")
    offset: float | None = Field(default=None, ge=0, description="minutes from the start")
    detail: list[ExerciseDetail] = Field(default_factory=list)

    def __str__(self) -> str:
        return self.activity.text


@register_item_type
class Exercise(HealthRecordItem):
    """A workout with optional per-segment breakdown and named details."""

    TYPE_ID = UUID("85a21ddb-db20-4c65-8d30-33c899ccf612")
    TYPE_NAME = "Exercise"
    ROOT_ELEMENT = "exercise"

    when: ApproximateDateTime
    activity: CodableValue
    title: NonBlankStr | None = None
    distance: Length | None = None
    duration: float | None = Field(default=None, gt=0, description="minutes")
    detail: list[ExerciseDetail] = Field(default_factory=list)
    segment: list[ExerciseSegment] = Field(default_factory=list)

    def detail_value(self, name: str) -> StructuredMeasurement | None:
        """The first detail whose code value is `name`."""
        return next((item.value for item in self.detail if item.name.value == name), None)

    def __str__(self) -> str:
        return summarize(self.activity, self.title, self.distance, _minutes(self.duration))


@register_item_type
class ExerciseSamples(HealthRecordItem):
    TYPE_ID = UUID("e1f92d7f-9699-4483-8223-8442874ec6d9")
    TYPE_NAME = "Exercise Samples"
    ROOT_ELEMENT = "exercise-samples"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    name: CodableValue
    unit: CodableValue
    sampling_interval: float | None = Field(default=None, gt=0, description="seconds")

    def __str__(self) -> str:
        return f"{self.name} ({self.unit})"


class HeartRateBound(XmlModel):
    absolute_heartrate: int | None = Field(default=None, gt=0)
    percent_max_heartrate: float | None = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def exactly_one(self) -> Self:
        if (self.absolute_heartrate is None) == (self.percent_max_heartrate is None):
            raise ValueError("a heart rate bound is either absolute or a percentage of maximum")
        return self

    def __str__(self) -> str:
        if self.absolute_heartrate is not None:
            return f"{self.absolute_heartrate} bpm"
        return f"{format_double(self.percent_max_heartrate * 100.0)}%"


class HeartRateZone(XmlModel):
    name: Annotated[NonBlankStr | None, XmlAttribute()] = None
    lower_bound: HeartRateBound
    upper_bound: HeartRateBound

    def __str__(self) -> str:
        bounds = f"{self.lower_bound} - {self.upper_bound}"
        return f"{self.name}: {bounds}" if self.name else bounds


class HeartRateZoneGroup(XmlModel):
    name: Annotated[NonBlankStr | None, XmlAttribute()] = None
    heartrate_zone: list[HeartRateZone] = Field(default_factory=list)


class VO2Max(XmlModel):
    absolute: float | None = Field(default=None, ge=0, description="mL/min")
    relative: float | None = Field(default=None, ge=0, description="mL/kg/min")


@register_item_type
class AerobicProfile(HealthRecordItem):
    TYPE_ID = UUID("7b2ea78c-4b78-4f75-a6a7-5396fe38b09a")
    TYPE_NAME = "Aerobic Exercise Profile"
    ROOT_ELEMENT = "aerobic-profile"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    max_heartrate: int | None = Field(default=None, gt=0)
    resting_heartrate: int | None = Field(default=None, gt=0)
    anaerobic_threshold: int | None = Field(default=None, gt=0)
    vo2_max: VO2Max | None = Field(default=None, alias="VO2-max")
    heartrate_zone_group: list[HeartRateZoneGroup] = Field(default_factory=list)

    def __str__(self) -> str:
        relative = self.vo2_max.relative if self.vo2_max is not None else None
        return summarize(
            f"max {self.max_heartrate} bpm" if self.max_heartrate is not None else None,
            f"resting {self.resting_heartrate} bpm" if self.resting_heartrate is not None else None,
            f"threshold {self.anaerobic_threshold} bpm"
            if self.anaerobic_threshold is not None
            else None,
            f"VO2 max {format_double(relative)} mL/kg/min" if relative is not None else None,
        )


@register_item_type
class AerobicWeeklyGoal(HealthRecordItem):
    TYPE_ID = UUID("e4501363-fb95-4a11-bb60-da64e98048b5")
    TYPE_NAME = "Aerobic Exercise Weekly Goal"
    ROOT_ELEMENT = "aerobic-weekly"

    session: AerobicData
    recurrence: int = Field(gt=0, description="sessions per week")

    def __str__(self) -> str:
        return summarize(self.session, f"{self.recurrence} times a week")
