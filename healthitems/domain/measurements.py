"""
Measured quantities.

Every concrete measurement stores its value in a fixed base unit (the
element name is the unit, e.g. <kg>) and may carry the value as the user
originally entered it in a `DisplayValue`.
"""

from typing import Annotated, ClassVar, Self

from pydantic import Field, field_validator, model_validator
from pydantic.fields import FieldInfo

from healthitems.domain.base import NonBlankStr, XmlAttribute, XmlModel, XmlText
from healthitems.domain.codes import CodableValue
from healthitems.domain.xmlhelpers import format_double


class DisplayValue(XmlModel):
    """A value as entered, in the units it was entered in."""

    value: Annotated[float, XmlText()]
    units: Annotated[NonBlankStr, XmlAttribute()]
    units_code: Annotated[NonBlankStr | None, XmlAttribute()] = None
    text: Annotated[NonBlankStr | None, XmlAttribute()] = None

    def __str__(self) -> str:
        if self.text:
            return self.text
        return f"{format_double(self.value)} {self.units}"


class Measurement(XmlModel):
    """
    Base for single-valued measurements.

    Subclasses set VALUE_ELEMENT (the element holding the base-unit value) and
    UNITS (the label used in summaries).
    """

    VALUE_ELEMENT: ClassVar[str] = "value"
    UNITS: ClassVar[str] = ""
    ALLOW_NEGATIVE: ClassVar[bool] = False

    value: float
    display: DisplayValue | None = None

    @field_validator("value")
    @classmethod
    def check_sign(cls, value: float) -> float:
        if not cls.ALLOW_NEGATIVE and value < 0:
            raise ValueError(f"{cls.__name__} must not be negative")
        return value

    @classmethod
    def element_name(cls, field_name: str, field: FieldInfo) -> str:
        if field_name == "value":
            return cls.VALUE_ELEMENT
        return super().element_name(field_name, field)

    @classmethod
    def with_display(cls, value: float, display_value: float, display_units: str) -> Self:
        return cls(value=value, display=DisplayValue(value=display_value, units=display_units))

    def __str__(self) -> str:
        if self.display is not None:
            return str(self.display)
        return f"{format_double(self.value)} {self.UNITS}".rstrip()


class WeightValue(Measurement):
    VALUE_ELEMENT = "kg"
    UNITS = "kg"

    POUNDS_PER_KG: ClassVar[float] = 2.20462262185

    @classmethod
    def from_pounds(cls, pounds: float) -> Self:
        return cls.with_display(pounds / cls.POUNDS_PER_KG, pounds, "lb")

    @property
    def pounds(self) -> float:
        return self.value * self.POUNDS_PER_KG


class Length(Measurement):
    VALUE_ELEMENT = "m"
    UNITS = "m"


class BloodGlucoseMeasurement(Measurement):
    VALUE_ELEMENT = "mmolPerL"
    UNITS = "mmol/L"

    MG_PER_DL_PER_MMOL: ClassVar[float] = 18.0

    @classmethod
    def from_mg_per_dl(cls, mg_per_dl: float) -> Self:
        return cls.with_display(mg_per_dl / cls.MG_PER_DL_PER_MMOL, mg_per_dl, "mg/dL")


class ConcentrationValue(Measurement):
    VALUE_ELEMENT = "mmolPerL"
    UNITS = "mmol/L"


class FlowMeasurement(Measurement):
    VALUE_ELEMENT = "liters-per-second"
    UNITS = "L/s"


class VolumeMeasurement(Measurement):
    VALUE_ELEMENT = "liters"
    UNITS = "L"


class PressureMeasurement(Measurement):
    VALUE_ELEMENT = "pascal"
    UNITS = "Pa"


class TemperatureMeasurement(Measurement):
    VALUE_ELEMENT = "celsius"
    UNITS = "\N{DEGREE SIGN}C"
    ALLOW_NEGATIVE = True


class InsulinInjectionMeasurement(Measurement):
    VALUE_ELEMENT = "IEv"
    UNITS = "IE"


class FoodEnergyValue(Measurement):
    VALUE_ELEMENT = "calories"
    UNITS = "kcal"


class RespiratoryRateMeasurement(Measurement):
    VALUE_ELEMENT = "breaths-per-minute"
    UNITS = "breaths/min"


class SpeedMeasurement(Measurement):
    VALUE_ELEMENT = "meters-per-second"
    UNITS = "m/s"


class PaceMeasurement(Measurement):
    VALUE_ELEMENT = "seconds-per-hundred-meters"
    UNITS = "s/100m"


class PowerMeasurement(Measurement):
    VALUE_ELEMENT = "watts"
    UNITS = "W"


class TorqueMeasurement(Measurement):
    VALUE_ELEMENT = "newton-meters"
    UNITS = "N\N{MIDDLE DOT}m"


class AltitudeMeasurement(Measurement):
    VALUE_ELEMENT = "m"
    UNITS = "m"
    ALLOW_NEGATIVE = True


class HbA1CMeasurement(Measurement):
    VALUE_ELEMENT = "mmol-per-mol"
    UNITS = "mmol/mol"


class StructuredMeasurement(XmlModel):
    value: float
    units: CodableValue

    def __str__(self) -> str:
        return f"{format_double(self.value)} {self.units}"


class GeneralMeasurement(XmlModel):
    """A free-text measurement with optional structured parts (e.g. "2 tablets")."""

    display: NonBlankStr
    structured: list[StructuredMeasurement] = Field(default_factory=list)

    def __str__(self) -> str:
        return self.display


class BodyCompositionValue(XmlModel):
    """Mass and/or fraction of body mass."""

    mass_value: WeightValue | None = None
    percent_value: float | None = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def needs_a_value(self) -> Self:
        if self.mass_value is None and self.percent_value is None:
            raise ValueError("body composition needs a mass or a percentage")
        return self

    def __str__(self) -> str:
        parts = []
        if self.mass_value is not None:
            parts.append(str(self.mass_value))
        if self.percent_value is not None:
            parts.append(f"{self.percent_value:.1%}")
        return ", ".join(parts)


class DoseValue(XmlModel):
    """A dose as an exact amount, a range, or free text."""

    description: NonBlankStr | None = None
    exact_dose: float | None = Field(default=None, gt=0)
    min_dose: float | None = Field(default=None, gt=0)
    max_dose: float | None = Field(default=None, gt=0)

    def __str__(self) -> str:
        if self.description:
            return self.description
        if self.exact_dose is not None:
            return format_double(self.exact_dose)
        if self.min_dose is not None and self.max_dose is not None:
            return f"{format_double(self.min_dose)}-{format_double(self.max_dose)}"
        return ""
