"""Medications, prescriptions, fills, immunizations, insulin and inhalers."""

import calendar
from typing import Annotated
from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import (
    ApproximateDate,
    ApproximateDateTime,
    ApproximateTime,
    HealthServiceDate,
    HealthServiceDateTime,
)
from healthitems.domain.measurements import GeneralMeasurement, InsulinInjectionMeasurement
from healthitems.domain.people import Organization, PersonItem
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


class Prescription(XmlModel):
    """Who prescribed a medication, how much and for how long."""

    prescribed_by: PersonItem
    date_prescribed: ApproximateDateTime | None = None
    amount_prescribed: GeneralMeasurement | None = None
    substitution: CodableValue | None = None
    refills: int | None = Field(default=None, ge=0)
    days_supply: int | None = Field(default=None, gt=0)
    prescription_expiration: HealthServiceDate | None = None
    instructions: CodableValue | None = None

    def __str__(self) -> str:
        return str(self.prescribed_by)


@register_item_type
class Medication(HealthRecordItem):
    TYPE_ID = UUID("30cafccc-047d-4288-94ef-643571f7919d")
    TYPE_NAME = "Medication"
    ROOT_ELEMENT = "medication"

    name: CodableValue
    generic_name: CodableValue | None = None
    dose: GeneralMeasurement | None = None
    strength: GeneralMeasurement | None = None
    frequency: GeneralMeasurement | None = None
    route: CodableValue | None = None
    indication: CodableValue | None = None
    date_started: ApproximateDateTime | None = None
    date_discontinued: ApproximateDateTime | None = None
    prescribed: CodableValue | None = None
    prescription: Prescription | None = None

    def __str__(self) -> str:
        name = str(self.name)
        if self.generic_name is not None:
            name += f" ({self.generic_name})"
        return summarize(name, self.strength, self.dose, self.frequency)


@register_item_type
class MedicationFill(HealthRecordItem):
    TYPE_ID = UUID("167ecf6b-bb54-43f9-a473-507b334907e0")
    TYPE_NAME = "Medication Fill"
    ROOT_ELEMENT = "medication-fill"

    name: CodableValue
    date_filled: ApproximateDateTime | None = None
    days_supply: int | None = Field(default=None, gt=0)
    next_refill_date: HealthServiceDate | None = None
    refills_left: int | None = Field(default=None, ge=0)
    pharmacy: Organization | None = None
    prescription_number: NonBlankStr | None = None
    lot_number: NonBlankStr | None = None

    def __str__(self) -> str:
        if self.date_filled is None:
            return str(self.name)
        return f"{self.name} ({self.date_filled})"


@register_item_type
class DailyMedicationUsage(HealthRecordItem):
    """Doses of a drug taken on one day."""

    TYPE_ID = UUID("A9A76456-0357-493e-B840-598BBB9483FD")
    TYPE_NAME = "Daily Medication Usage"
    ROOT_ELEMENT = "daily-medication-usage"

    when: HealthServiceDate = Field(default_factory=HealthServiceDate.today)
    drug_name: CodableValue
    number_doses_consumed_in_day: int = Field(ge=0)
    purpose_of_use: CodableValue | None = None
    number_doses_intended_in_day: int | None = Field(default=None, ge=0)
    medication_usage_schedule: CodableValue | None = None
    drug_form: CodableValue | None = None
    prescription_type: CodableValue | None = None
    single_dose_description: CodableValue | None = None

    def __str__(self) -> str:
        doses = str(self.number_doses_consumed_in_day)
        if self.number_doses_intended_in_day is not None:
            doses += f"/{self.number_doses_intended_in_day}"
        return summarize(self.drug_name, self.purpose_of_use, f"{doses} doses")


@register_item_type
class Immunization(HealthRecordItem):
    TYPE_ID = UUID("cd3587b5-b6e1-4565-ab3b-1c3ad45eb04f")
    TYPE_NAME = "Immunization"
    ROOT_ELEMENT = "immunization"

    name: CodableValue
    administration_date: ApproximateDateTime | None = None
    administrator: PersonItem | None = None
    manufacturer: CodableValue | None = None
    lot: NonBlankStr | None = None
    route: CodableValue | None = None
    expiration_date: ApproximateDate | None = None
    sequence: NonBlankStr | None = None
    anatomic_surface: CodableValue | None = None
    adverse_event: NonBlankStr | None = None
    consent: NonBlankStr | None = None

    def __str__(self) -> str:
        if self.administration_date is None:
            return str(self.name)
        return f"{self.name} ({self.administration_date})"


@register_item_type
class InsulinInjection(HealthRecordItem):
    """An insulin injection regimen entry."""

    TYPE_ID = UUID("3B3C053B-B1FE-4E11-9E22-D4B480DE74E8")
    TYPE_NAME = "Insulin Injection"
    ROOT_ELEMENT = "insulin-injection"

    type: CodableValue
    amount: InsulinInjectionMeasurement
    device_id: NonBlankStr | None = None

    def __str__(self) -> str:
        return f"{self.type}: {self.amount}"


@register_item_type
class InsulinInjectionUse(HealthRecordItem):
    """A single insulin injection."""

    TYPE_ID = UUID("184166BE-8ADB-4D9C-8162-C403040E31AD")
    TYPE_NAME = "Insulin Injection Use"
    ROOT_ELEMENT = "diabetes-insulin-injection-use"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    type: CodableValue
    amount: InsulinInjectionMeasurement
    device_id: NonBlankStr | None = None

    def __str__(self) -> str:
        return f"{self.type}: {self.amount}"


@register_item_type
class AsthmaInhalerUse(HealthRecordItem):
    TYPE_ID = UUID("03efe378-976a-42f8-ae1e-507c497a8c6d")
    TYPE_NAME = "Asthma Inhaler Use"
    ROOT_ELEMENT = "asthma-inhaler-use"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    drug: CodableValue
    strength: CodableValue | None = None
    dose_count: int = Field(ge=0)
    device_id: NonBlankStr | None = None
    dose_purpose: CodableValue | None = None

    def __str__(self) -> str:
        return f"{self.drug}: {self.dose_count} doses"


class Alert(XmlModel):
    """Days of the week (1 is Sunday) and times at which to remind the person."""

    dow: list[Annotated[int, Field(ge=1, le=7)]] = Field(min_length=1)
    time: list[ApproximateTime] = Field(min_length=1)

    def __str__(self) -> str:
        days = ", ".join(calendar.day_abbr[(day + 5) % 7] for day in self.dow)
        return f"{days} at {summarize(*self.time)}"


@register_item_type
class AsthmaInhaler(HealthRecordItem):
    """An inhaler the person owns, with its dosing limits and reminders."""

    TYPE_ID = UUID("ff9ce191-2096-47d8-9300-5469a9883746")
    TYPE_NAME = "Asthma Inhaler"
    ROOT_ELEMENT = "asthma-inhaler"

    drug: CodableValue
    strength: CodableValue | None = None
    purpose: NonBlankStr | None = Field(default=None, description="prevention, relief or combination")
    start_date: ApproximateDateTime
    stop_date: ApproximateDateTime | None = None
    expiration_date: ApproximateDateTime | None = None
    device_id: NonBlankStr | None = None
    initial_doses: int | None = Field(default=None, ge=0)
    min_daily_doses: int | None = Field(default=None, ge=0)
    max_daily_doses: int | None = Field(default=None, ge=0)
    can_alert: bool | None = None
    alert: list[Alert] = Field(default_factory=list)

    def __str__(self) -> str:
        return self.drug.text
