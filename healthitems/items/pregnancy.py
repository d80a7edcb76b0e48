"""Pregnancies and their deliveries."""

from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDate, ApproximateDateTime, HealthServiceDate
from healthitems.domain.measurements import Length, WeightValue
from healthitems.domain.people import Name, Organization
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


class Baby(XmlModel):
    name: Name | None = None
    gender: CodableValue | None = None
    weight: WeightValue | None = None
    length: Length | None = None
    head_circumference: Length | None = None
    note: NonBlankStr | None = None

    def __str__(self) -> str:
        return summarize(self.name, self.weight, self.length)


class Delivery(XmlModel):
    """One delivery within a pregnancy."""

    location: Organization | None = None
    time_of_delivery: ApproximateDateTime | None = None
    labor_duration: float | None = Field(default=None, gt=0, description="minutes")
    complications: list[CodableValue] = Field(default_factory=list)
    anesthesia: list[CodableValue] = Field(default_factory=list)
    delivery_method: CodableValue | None = None
    outcome: CodableValue | None = None
    baby: Baby | None = None
    note: NonBlankStr | None = None

    def __str__(self) -> str:
        name = self.baby.name if self.baby is not None else None
        details = summarize(
            self.time_of_delivery,
            self.baby.weight if self.baby is not None else None,
            self.baby.length if self.baby is not None else None,
        )
        if not details:
            return str(name) if name is not None else ""
        return summarize(name, f"({details})", separator=" ")


@register_item_type
class Pregnancy(HealthRecordItem):
    TYPE_ID = UUID("46d485cf-2b84-429d-9159-83152ba801f4")
    TYPE_NAME = "Pregnancy"
    ROOT_ELEMENT = "pregnancy"

    due_date: ApproximateDate | None = None
    last_menstrual_period: HealthServiceDate | None = None
    conception_method: CodableValue | None = None
    fetus_count: int | None = Field(default=None, ge=0)
    gestational_age: int | None = Field(default=None, ge=0, description="weeks")
    delivery: list[Delivery] = Field(default_factory=list)

    def __str__(self) -> str:
        names = [
            delivery.baby.name
            for delivery in self.delivery
            if delivery.baby is not None and delivery.baby.name is not None
        ]
        if names:
            return summarize(*names)
        if self.due_date is not None:
            return str(self.due_date)
        return ""
