"""
Care plans and health goals.

Key patterns:
- A care plan groups its team, tasks and goal groups in container elements
- Goals point at the item type that tracks progress through `AssociatedTypeInfo`
- Goal ranges and recurrences are shared by care plan goals and health goals
"""

from typing import Annotated
from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr, XmlModel, XmlWrapped
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import ApproximateDateTime
from healthitems.domain.measurements import GeneralMeasurement
from healthitems.domain.people import PersonItem
from healthitems.items.base import HealthRecordItem
from healthitems.items.registry import register_item_type


class AssociatedTypeInfo(XmlModel):
    """The item type, and the values within it, that measure a goal or task."""

    thing_type_version_id: UUID
    thing_type_value_xpath: NonBlankStr | None = None
    thing_type_display_xpath: NonBlankStr | None = None


class GoalRange(XmlModel):
    name: CodableValue
    description: NonBlankStr | None = None
    minimum: GeneralMeasurement | None = None
    maximum: GeneralMeasurement | None = None

    def __str__(self) -> str:
        if self.minimum is not None and self.maximum is not None:
            return f"{self.minimum} - {self.maximum}"
        if self.minimum is not None:
            return f"at least {self.minimum}"
        if self.maximum is not None:
            return f"at most {self.maximum}"
        return self.name.text


class GoalRecurrence(XmlModel):
    interval: CodableValue
    times_in_interval: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.times_in_interval} per {self.interval}"


class CarePlanTaskRecurrence(XmlModel):
    """Either an iCalendar rule or a count per interval."""

    ical_recurrence: NonBlankStr | None = None
    interval: CodableValue | None = None
    times_in_interval: int | None = Field(default=None, ge=0)

    def __str__(self) -> str:
        if self.interval is not None and self.times_in_interval is not None:
            return f"{self.times_in_interval} per {self.interval}"
        return self.ical_recurrence or ""


class CarePlanTask(XmlModel):
    name: CodableValue
    description: NonBlankStr | None = None
    start_date: ApproximateDateTime | None = None
    end_date: ApproximateDateTime | None = None
    target_completion_date: ApproximateDateTime | None = None
    sequence_number: int | None = Field(default=None, ge=0)
    associated_type_info: AssociatedTypeInfo | None = None
    recurrence: CarePlanTaskRecurrence | None = None
    reference_id: NonBlankStr | None = None

    def __str__(self) -> str:
        if self.description is None:
            return self.name.text
        return f"{self.name}: {self.description}"


class CarePlanGoal(XmlModel):
    name: CodableValue
    description: NonBlankStr | None = None
    start_date: ApproximateDateTime | None = None
    end_date: ApproximateDateTime | None = None
    target_completion_date: ApproximateDateTime | None = None
    associated_type_info: AssociatedTypeInfo | None = None
    target_range: GoalRange | None = None
    goal_additional_ranges: list[GoalRange] = Field(default_factory=list)
    recurrence: GoalRecurrence | None = None
    reference_id: NonBlankStr | None = None

    def __str__(self) -> str:
        return self.name.text


class CarePlanGoalGroup(XmlModel):
    name: CodableValue
    description: NonBlankStr | None = None
    goals: Annotated[list[CarePlanGoal], XmlWrapped("goal")] = Field(min_length=1)

    def __str__(self) -> str:
        return self.name.text


@register_item_type
class CarePlan(HealthRecordItem):
    """A plan of care: who is involved, what to do and which goals to reach."""

    TYPE_ID = UUID("415c95e0-0533-4d9c-ac73-91dc5031186c")
    TYPE_NAME = "Care Plan"
    ROOT_ELEMENT = "care-plan"

    name: NonBlankStr
    start_date: ApproximateDateTime | None = None
    end_date: ApproximateDateTime | None = None
    status: CodableValue | None = None
    care_team: Annotated[list[PersonItem], XmlWrapped("person")] = Field(default_factory=list)
    care_plan_manager: PersonItem | None = None
    tasks: Annotated[list[CarePlanTask], XmlWrapped("task")] = Field(default_factory=list)
    goal_groups: Annotated[list[CarePlanGoalGroup], XmlWrapped("goal-group")] = Field(
        default_factory=list
    )

    @property
    def goals(self) -> list[CarePlanGoal]:
        return [goal for group in self.goal_groups for goal in group.goals]

    def __str__(self) -> str:
        if self.status is None:
            return self.name
        return f"{self.name} ({self.status})"


@register_item_type
class HealthGoal(HealthRecordItem):
    TYPE_ID = UUID("dad8bb47-9ad0-4f09-a020-0ff051d1d0f7")
    TYPE_NAME = "Health Goal"
    ROOT_ELEMENT = "health-goal"

    name: CodableValue
    description: NonBlankStr | None = None
    start_date: ApproximateDateTime | None = None
    end_date: ApproximateDateTime | None = None
    associated_type_info: AssociatedTypeInfo | None = None
    target_range: GoalRange | None = None
    goal_additional_ranges: list[GoalRange] = Field(default_factory=list)
    recurrence: GoalRecurrence | None = None

    def __str__(self) -> str:
        details = [str(part) for part in (self.target_range, self.recurrence) if part is not None]
        if not details:
            return self.name.text
        return f"{self.name}: {', '.join(details)}"
