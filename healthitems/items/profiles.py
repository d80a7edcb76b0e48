"""Demographics, contacts, risk profiles, goals, dietary guidelines and dietary intake."""

from enum import Enum
from typing import Annotated, Literal, Self
from uuid import UUID

from pydantic import Field, model_validator

from healthitems.domain.base import NonBlankStr, XmlAttribute, XmlModel, XmlWrapped
from healthitems.domain.codes import CodableValue
from healthitems.domain.dates import (
    ApproximateDate,
    ApproximateDateTime,
    HealthServiceDate,
    HealthServiceDateTime,
)
from healthitems.domain.measurements import (
    BloodGlucoseMeasurement,
    FoodEnergyValue,
    GeneralMeasurement,
    StructuredMeasurement,
    WeightValue,
)
from healthitems.domain.people import ContactInfo, Name
from healthitems.domain.xmlhelpers import format_double
from healthitems.items.base import HealthRecordItem, summarize
from healthitems.items.registry import register_item_type


class Language(XmlModel):
    language: CodableValue
    is_primary: bool | None = None

    def __str__(self) -> str:
        return str(self.language)


@register_item_type
class BasicV2(HealthRecordItem):
    """Basic demographics that are not personally identifying."""

    TYPE_ID = UUID("3b3e6b16-eb69-483c-8d7e-dfe116ae6092")
    TYPE_NAME = "Basic Demographic Information"
    ROOT_ELEMENT = "basic"

    gender: Literal["m", "f"] | None = None
    birthyear: int | None = Field(default=None, ge=1000, le=3000)
    country: CodableValue | None = None
    postcode: NonBlankStr | None = None
    city: NonBlankStr | None = None
    state: CodableValue | None = None
    firstdow: int | None = Field(default=None, ge=1, le=7, description="1 is Sunday")
    language: list[Language] = Field(default_factory=list)

    def __str__(self) -> str:
        gender = {"m": "Male", "f": "Female"}.get(self.gender) if self.gender else None
        return summarize(gender, self.birthyear, self.city, self.country)


@register_item_type
class Personal(HealthRecordItem):
    TYPE_ID = UUID("92ba621e-66b3-4a01-bd73-74844aed4f5b")
    TYPE_NAME = "Personal Demographic Information"
    ROOT_ELEMENT = "personal"

    name: Name | None = None
    birthdate: HealthServiceDateTime | None = None
    blood_type: CodableValue | None = None
    ethnicity: CodableValue | None = None
    ssn: NonBlankStr | None = None
    marital_status: CodableValue | None = None
    employment_status: NonBlankStr | None = None
    is_deceased: bool | None = None
    date_of_death: ApproximateDateTime | None = None
    religion: CodableValue | None = None
    is_veteran: bool | None = None
    highest_education_level: CodableValue | None = None
    is_disabled: bool | None = None
    organ_donor: NonBlankStr | None = None

    def __str__(self) -> str:
        if self.name is not None:
            return str(self.name)
        if self.birthdate is not None or self.ethnicity is not None:
            return summarize(self.birthdate, self.ethnicity)
        if self.common.note is not None:
            return self.common.note
        return self.TYPE_NAME


@register_item_type
class CardiacProfile(HealthRecordItem):
    TYPE_ID = UUID("adaf49ad-8e10-49f8-9783-174819e97051")
    TYPE_NAME = "Cardiac Profile"
    ROOT_ELEMENT = "cardiac-profile"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    on_hypertension_diet: bool | None = None
    on_hypertension_medication: bool | None = None
    renal_failure_diagnosed: bool | None = None
    diabetes_diagnosed: bool | None = None
    has_family_heart_disease_history: bool | None = None
    has_family_stroke_history: bool | None = None
    has_personal_heart_disease_history: bool | None = None
    # The stored element name really is "has-person-stroke-history"
    has_person_stroke_history: bool | None = None

    def __str__(self) -> str:
        flags = [
            name.replace("_", " ")
            for name in type(self).xml_fields()
            if name != "when" and getattr(self, name)
        ]
        return summarize(*flags) or str(self.when)


@register_item_type
class CholesterolProfile(HealthRecordItem):
    """Lipid panel results in mg/dL."""

    TYPE_ID = UUID("796C186F-B874-471c-8468-3EEFF73BF66E")
    TYPE_NAME = "Cholesterol Profile"
    ROOT_ELEMENT = "cholesterol-profile"

    when: HealthServiceDate = Field(default_factory=HealthServiceDate.today)
    ldl: int | None = Field(default=None, ge=0)
    hdl: int | None = Field(default=None, ge=0)
    total_cholesterol: int | None = Field(default=None, ge=0)
    triglyceride: int | None = Field(default=None, ge=0)

    def __str__(self) -> str:
        if self.total_cholesterol is not None:
            return f"Total {self.total_cholesterol} mg/dL"
        return summarize(
            f"LDL {self.ldl} mg/dL" if self.ldl is not None else None,
            f"HDL {self.hdl} mg/dL" if self.hdl is not None else None,
        )


class GlucoseBound(XmlModel):
    """One edge of a glucose zone: absolute, or relative to the maximum."""

    absolute_glucose: BloodGlucoseMeasurement | None = None
    percent_max_glucose: float | None = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def exactly_one(self) -> Self:
        if (self.absolute_glucose is None) == (self.percent_max_glucose is None):
            raise ValueError("a glucose bound is either absolute or a percentage of maximum")
        return self

    def __str__(self) -> str:
        if self.absolute_glucose is not None:
            return str(self.absolute_glucose)
        return f"{format_double(self.percent_max_glucose * 100.0)}%"


class TargetGlucoseZone(XmlModel):
    name: Annotated[NonBlankStr | None, XmlAttribute()] = None
    lower_bound: GlucoseBound
    upper_bound: GlucoseBound

    def __str__(self) -> str:
        bounds = f"{self.lower_bound} - {self.upper_bound}"
        return f"{self.name}: {bounds}" if self.name else bounds


class TargetGlucoseZoneGroup(XmlModel):
    name: Annotated[NonBlankStr | None, XmlAttribute()] = None
    target_glucose_zone: list[TargetGlucoseZone] = Field(default_factory=list)


@register_item_type
class DiabeticProfile(HealthRecordItem):
    TYPE_ID = UUID("80CF4080-AD3F-4BB5-A0B5-907C22F73017")
    TYPE_NAME = "Diabetic Profile"
    ROOT_ELEMENT = "diabetic-profile"

    when: HealthServiceDateTime = Field(default_factory=HealthServiceDateTime.now)
    max_hba1c: float | None = Field(default=None, alias="max-HbA1C", ge=0.0, le=1.0)
    target_glucose_zone_group: list[TargetGlucoseZoneGroup] = Field(default_factory=list)

    def __str__(self) -> str:
        if self.max_hba1c is None:
            return ""
        return f"{format_double(self.max_hba1c * 100.0)}%"


class Goal(XmlModel):
    target_date: ApproximateDate | None = None
    completion_date: ApproximateDate | None = None
    status: CodableValue | None = None


@register_item_type
class WeightGoal(HealthRecordItem):
    TYPE_ID = UUID("b7925180-d69e-48fa-ae1d-cb3748ca170e")
    TYPE_NAME = "Weight Goal"
    ROOT_ELEMENT = "weight-goal"

    initial: WeightValue | None = None
    minimum: WeightValue | None = None
    maximum: WeightValue | None = None
    goal_info: Goal | None = None

    def __str__(self) -> str:
        if self.minimum is not None and self.maximum is not None:
            result = f"{self.minimum} - {self.maximum}"
        elif self.minimum is not None:
            result = f"at least {self.minimum}"
        elif self.maximum is not None:
            result = str(self.maximum)
        else:
            result = ""
        if self.goal_info is not None and self.goal_info.target_date is not None:
            return summarize(result, f"by {self.goal_info.target_date}")
        return result


@register_item_type
class CalorieGuideline(HealthRecordItem):
    TYPE_ID = UUID("d3170d30-a41b-4bde-a116-87698c8a001a")
    TYPE_NAME = "Calorie Guideline"
    ROOT_ELEMENT = "calorie-guideline"

    when: ApproximateDateTime
    name: CodableValue
    calories: GeneralMeasurement

    def __str__(self) -> str:
        return f"{self.name}: {self.calories}"


@register_item_type
class DietaryDailyIntake(HealthRecordItem):
    """Nutrients eaten over one day."""

    TYPE_ID = UUID("9c29c6b9-f40e-44ff-b24e-fba6f3074638")
    TYPE_NAME = "Dietary Intake Daily"
    ROOT_ELEMENT = "dietary-intake-daily"

    when: HealthServiceDate = Field(default_factory=HealthServiceDate.today)
    calories: int | None = Field(default=None, ge=0)
    total_fat: WeightValue | None = None
    saturated_fat: WeightValue | None = None
    trans_fat: WeightValue | None = None
    protein: WeightValue | None = None
    total_carbohydrates: WeightValue | None = None
    dietary_fiber: WeightValue | None = None
    sugars: WeightValue | None = None
    sodium: WeightValue | None = None
    cholesterol: WeightValue | None = None

    def __str__(self) -> str:
        return summarize(
            f"{self.calories} calories" if self.calories is not None else None,
            f"fat {self.total_fat}" if self.total_fat is not None else None,
            f"protein {self.protein}" if self.protein is not None else None,
            f"carbohydrates {self.total_carbohydrates}"
            if self.total_carbohydrates is not None
            else None,
        )


class NutritionFact(XmlModel):
    name: CodableValue
    fact: StructuredMeasurement

    def __str__(self) -> str:
        return f"{self.name}: {self.fact}"


class DietaryIntakeItem(XmlModel):
    """One food eaten, with its serving and nutrient content."""

    food_item: CodableValue
    serving_size: CodableValue | None = None
    servings_consumed: float | None = Field(default=None, ge=0)
    meal: CodableValue | None = None
    when: HealthServiceDateTime | None = None
    energy: FoodEnergyValue | None = None
    energy_from_fat: FoodEnergyValue | None = None
    total_fat: WeightValue | None = None
    saturated_fat: WeightValue | None = None
    trans_fat: WeightValue | None = None
    monounsaturated_fat: WeightValue | None = None
    polyunsaturated_fat: WeightValue | None = None
    protein: WeightValue | None = None
    carbohydrates: WeightValue | None = None
    dietary_fiber: WeightValue | None = None
    sugars: WeightValue | None = None
    sodium: WeightValue | None = None
    cholesterol: WeightValue | None = None
    calcium: WeightValue | None = None
    iron: WeightValue | None = None
    magnesium: WeightValue | None = None
    phosphorus: WeightValue | None = None
    potassium: WeightValue | None = None
    zinc: WeightValue | None = None
    vitamin_a_rae: WeightValue | None = Field(default=None, alias="vitamin-A-RAE")
    vitamin_e: WeightValue | None = Field(default=None, alias="vitamin-E")
    vitamin_d: WeightValue | None = Field(default=None, alias="vitamin-D")
    vitamin_c: WeightValue | None = Field(default=None, alias="vitamin-C")
    thiamin: WeightValue | None = None
    riboflavin: WeightValue | None = None
    niacin: WeightValue | None = None
    vitamin_b_6: WeightValue | None = Field(default=None, alias="vitamin-B-6")
    folate_dfe: WeightValue | None = Field(default=None, alias="folate-DFE")
    vitamin_b_12: WeightValue | None = Field(default=None, alias="vitamin-B-12")
    vitamin_k: WeightValue | None = Field(default=None, alias="vitamin-K")
    additional_nutrition_facts: Annotated[
        list[NutritionFact], XmlWrapped("nutrition-fact")
    ] = Field(default_factory=list)

    def __str__(self) -> str:
        if self.servings_consumed is not None and self.serving_size is not None:
            servings = format_double(self.servings_consumed)
            return f"{self.food_item}, {servings} servings of {self.serving_size}"
        if self.serving_size is not None:
            return f"{self.food_item} ({self.serving_size})"
        return str(self.food_item)


@register_item_type
class DietaryIntake(DietaryIntakeItem, HealthRecordItem):
    TYPE_ID = UUID("089646a6-7e25-4495-ad15-3e28d4c1a71d")
    TYPE_NAME = "Dietary Intake"
    ROOT_ELEMENT = "dietary-intake"


@register_item_type
class MealDefinition(HealthRecordItem):
    """A named meal made of dietary items, for reuse when logging intake."""

    TYPE_ID = UUID("074e122a-335a-4a47-a63d-00a8f3e79e60")
    TYPE_NAME = "Meal Definition"
    ROOT_ELEMENT = "meal-definition"

    name: CodableValue
    meal_type: CodableValue | None = None
    description: NonBlankStr | None = None
    dietary_items: Annotated[
        list[DietaryIntakeItem], XmlWrapped("dietary-item")
    ] = Field(default_factory=list)

    def __str__(self) -> str:
        return self.name.text


class Gender(str, Enum):
    MALE = "m"
    FEMALE = "f"


@register_item_type
class Basic(HealthRecordItem):
    """The first version of basic demographics, with plain-text places."""

    TYPE_ID = UUID("bf516a61-5252-4c28-a979-27f45f62f78d")
    TYPE_NAME = "Basic Demographic Information V1"
    ROOT_ELEMENT = "basic"

    gender: Gender | None = None
    birthyear: int | None = Field(default=None, ge=1000, le=3000)
    country: NonBlankStr | None = None
    postcode: NonBlankStr | None = None
    city: NonBlankStr | None = None
    state: NonBlankStr | None = None
    firstdow: int | None = Field(default=None, ge=1, le=7, description="1 is Sunday")
    language: list[Language] = Field(default_factory=list)

    def __str__(self) -> str:
        gender = self.gender.name.capitalize() if self.gender is not None else None
        if gender is not None or self.birthyear is not None:
            return summarize(gender, f"born {self.birthyear}" if self.birthyear else None)
        if self.postcode is not None or self.country is not None:
            return summarize(self.postcode, self.country)
        return summarize(self.city, self.state)


@register_item_type
class Person(HealthRecordItem):
    """A contact: provider, emergency contact, relative and so on."""

    TYPE_ID = UUID("25c94a9f-9d3d-4576-96dc-6791178a8143")
    TYPE_NAME = "Personal Contact"
    ROOT_ELEMENT = "person"

    name: Name
    organization: NonBlankStr | None = None
    professional_training: NonBlankStr | None = None
    id: NonBlankStr | None = None
    contact: ContactInfo | None = None
    type: CodableValue | None = None

    def __str__(self) -> str:
        if self.type is None:
            return str(self.name)
        return f"{self.name} ({self.type.text})"
