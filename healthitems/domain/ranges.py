"""Generic minimum/maximum ranges."""

import math
from typing import Any, Generic, TypeVar

from pydantic import field_validator

from healthitems.domain.base import XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.measurements import WeightValue

T = TypeVar("T")


class Range(XmlModel, Generic[T]):
    """
    A pair of bounds written as <minimum-range> and <maximum-range>.

    The bounds are not required to be ordered. Subclasses restrict the values
    each bound may take by overriding `check_bound`.
    """

    minimum_range: T | None = None
    maximum_range: T | None = None

    @field_validator("minimum_range", "maximum_range")
    @classmethod
    def _validate_bound(cls, value: Any) -> Any:
        if value is not None:
            cls.check_bound(value)
        return value

    @classmethod
    def check_bound(cls, value: T) -> None:
        """Raise ValueError when `value` is not an acceptable bound."""

    def __contains__(self, value: object) -> bool:
        if self.minimum_range is not None and value < self.minimum_range:  # type: ignore[operator]
            return False
        if self.maximum_range is not None and value > self.maximum_range:  # type: ignore[operator]
            return False
        return True

    def __str__(self) -> str:
        low = "" if self.minimum_range is None else str(self.minimum_range)
        high = "" if self.maximum_range is None else str(self.maximum_range)
        return f"{low} - {high}".strip()


class DoubleRange(Range[float]):
    @classmethod
    def check_bound(cls, value: float) -> None:
        if math.isnan(value):
            raise ValueError("a range bound must be a number")


class IntRange(Range[int]):
    pass


class WeightRange(Range[WeightValue]):
    """Weight bounds; the comparison is on kilograms."""

    def __contains__(self, value: object) -> bool:
        kg = value.value if isinstance(value, WeightValue) else value
        if self.minimum_range is not None and kg < self.minimum_range.value:  # type: ignore[operator]
            return False
        if self.maximum_range is not None and kg > self.maximum_range.value:  # type: ignore[operator]
            return False
        return True


class TestResultRange(XmlModel):
    """A named reference range for a test result (e.g. "normal")."""

    __test__ = False

    type: CodableValue
    text: CodableValue
    value: DoubleRange | None = None

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.type}: {self.value}"
        return f"{self.type}: {self.text}"
