"""Sleep journals and positive airway pressure (PAP) therapy sessions."""

from enum import IntEnum
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import Field

from healthitems.domain.base import XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateTime, HealthServiceDateTime
from healthitems.domain.measurements import (
    FlowMeasurement,
    Measurement,
    PressureMeasurement,
    RespiratoryRateMeasurement,
    VolumeMeasurement,
)
from healthitems.domain.xmlhelpers import format_double
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type

MeasurementT = TypeVar("MeasurementT", bound=Measurement)


class WakeState(IntEnum):
    WIDE_AWAKE = 1
    AWAKE_BUT_TIRED = 2
    SLEEPY = 3


class Sleepiness(IntEnum):
    VERY_SLEEPY = 1
    TIRED = 2
    ALERT = 3
    WIDE_AWAKE = 4


class Occurrence(XmlModel):
    """Something that started at a time of day and lasted some minutes."""

    when: ApproximateTime
    minutes: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.when} ({self.minutes} min)"


@register_item_type
class SleepJournalAm(HealthRecordItem):
    """Morning entry: how the night went."""

    TYPE_ID = UUID("11c52484-7f1a-11db-aeac-87d355d89593")
    TYPE_NAME = "Sleep Journal AM"
    ROOT_ELEMENT = "sleep-am"

    when: HealthServiceDateTime
    bed_time: ApproximateTime
    wake_time: ApproximateTime
    sleep_minutes: int = Field(gt=0)
    settling_minutes: int = Field(gt=0)
    awakening: list[Occurrence] = Field(default_factory=list)
    medications: CodableValue | None = None
    wake_state: WakeState

    def __str__(self) -> str:
        return f"{self.bed_time} - {self.wake_time}, {self.sleep_minutes} min"


@register_item_type
class SleepJournalPm(HealthRecordItem):
    """Evening entry: caffeine, alcohol, naps and exercise during the day."""

    TYPE_ID = UUID("031f5706-7f1a-11db-ad56-7bd355d89593")
    TYPE_NAME = "Sleep Journal PM"
    ROOT_ELEMENT = "sleep-pm"

    when: HealthServiceDateTime
    caffeine: list[ApproximateTime] = Field(default_factory=list)
    alcohol: list[ApproximateTime] = Field(default_factory=list)
    nap: list[Occurrence] = Field(default_factory=list)
    exercise: list[Occurrence] = Field(default_factory=list)
    sleepiness: Sleepiness

    def __str__(self) -> str:
        return self.sleepiness.name.replace("_", " ").lower()


class PapSessionMeasurements(XmlModel, Generic[MeasurementT]):
    """Summary statistics of one measured quantity over a PAP session."""

    mean: MeasurementT | None = None
    median: MeasurementT | None = None
    maximum: MeasurementT | None = None
    percentile_95th: MeasurementT | None = None
    percentile_90th: MeasurementT | None = None

    def __str__(self) -> str:
        return summarize(
            f"mean {self.mean}" if self.mean is not None else None,
            f"median {self.median}" if self.median is not None else None,
            f"max {self.maximum}" if self.maximum is not None else None,
        )


@register_item_type
class PapSession(HealthRecordItem):
    TYPE_ID = UUID("9085cad9-e866-4564-8a91-7ad8685d204d")
    TYPE_NAME = "PAP Session"
    ROOT_ELEMENT = "pap-session"

    when: HealthServiceDateTime
    duration_minutes: float = Field(ge=0.0)
    apnea_hypopnea_index: float = Field(ge=0.0)
    apnea_index: float | None = Field(default=None, ge=0.0)
    hypopnea_index: float | None = Field(default=None, ge=0.0)
    oxygen_desaturation_index: float | None = Field(default=None, ge=0.0)
    pressure: PapSessionMeasurements[PressureMeasurement] | None = None
    leak_rate: PapSessionMeasurements[FlowMeasurement] | None = None
    tidal_volume: PapSessionMeasurements[VolumeMeasurement] | None = None
    minute_ventilation: PapSessionMeasurements[VolumeMeasurement] | None = None
    respiratory_rate: PapSessionMeasurements[RespiratoryRateMeasurement] | None = None

    def __str__(self) -> str:
        return f"AHI {format_double(self.apnea_hypopnea_index)}"
