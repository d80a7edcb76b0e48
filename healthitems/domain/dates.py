"""
Calendar values used by health record items.

Key patterns:
- Approximate values allow missing trailing components (a year with no
  month, a date with no time) and order a missing component before any
  present one
- Health service values are exact dates and date-times
- `ApproximateDateTime` is a choice between a structured value and free text
"""

import calendar
from datetime import date, datetime, time
from typing import Any, Self
from xml.etree import ElementTree as ET

from pydantic import Field, model_validator

from healthitems.domain.base import NonBlankStr, XmlModel
from healthitems.domain.codes import CodableValue
from healthitems.domain.errors import ItemParseError, ItemSerializationError


def _optional_key(value: int | None) -> tuple[int, int]:
    return (0, 0) if value is None else (1, value)


class _Ordered:
    """Rich comparisons built on `_compare_key` and `_coerce`."""

    def _compare_key(self) -> tuple[Any, ...]:
        raise NotImplementedError

    @classmethod
    def _coerce(cls, other: object) -> Any:
        return other if isinstance(other, cls) else None

    def _keys(self, other: object) -> tuple[tuple[Any, ...], tuple[Any, ...]] | None:
        coerced = self._coerce(other)
        if coerced is None:
            return None
        return self._compare_key(), coerced._compare_key()

    def __lt__(self, other: object) -> bool:
        keys = self._keys(other)
        return NotImplemented if keys is None else keys[0] < keys[1]

    def __le__(self, other: object) -> bool:
        keys = self._keys(other)
        return NotImplemented if keys is None else keys[0] <= keys[1]

    def __gt__(self, other: object) -> bool:
        keys = self._keys(other)
        return NotImplemented if keys is None else keys[0] > keys[1]

    def __ge__(self, other: object) -> bool:
        keys = self._keys(other)
        return NotImplemented if keys is None else keys[0] >= keys[1]


class ApproximateDate(_Ordered, XmlModel):
    """A year, optionally refined by month and day."""

    y: int = Field(ge=1000, le=9999, description="Year")
    m: int | None = Field(default=None, ge=1, le=12, description="Month")
    d: int | None = Field(default=None, ge=1, le=31, description="Day")

    @model_validator(mode="after")
    def day_fits_month(self) -> Self:
        if self.d is None:
            return self
        if self.m is None:
            raise ValueError("a day requires a month")
        if self.d > calendar.monthrange(self.y, self.m)[1]:
            raise ValueError(f"day {self.d} is out of range for {self.y:04d}-{self.m:02d}")
        return self

    @classmethod
    def from_date(cls, value: date) -> Self:
        return cls(y=value.year, m=value.month, d=value.day)

    @classmethod
    def _coerce(cls, other: object) -> Any:
        if isinstance(other, date):
            return ApproximateDate.from_date(other)
        return super()._coerce(other)

    def _compare_key(self) -> tuple[Any, ...]:
        return (self.y, _optional_key(self.m), _optional_key(self.d))

    def __str__(self) -> str:
        text = f"{self.y:04d}"
        if self.m is not None:
            text += f"-{self.m:02d}"
            if self.d is not None:
                text += f"-{self.d:02d}"
        return text


class ApproximateTime(_Ordered, XmlModel):
    """Hour and minute, optionally refined by second and millisecond."""

    h: int = Field(ge=0, le=23, description="Hour")
    m: int = Field(ge=0, le=59, description="Minute")
    s: int | None = Field(default=None, ge=0, le=59, description="Second")
    f: int | None = Field(default=None, ge=0, le=999, description="Millisecond")

    @classmethod
    def from_time(cls, value: time) -> Self:
        return cls(h=value.hour, m=value.minute, s=value.second, f=value.microsecond // 1000)

    @classmethod
    def now(cls) -> Self:
        return cls.from_time(datetime.now().time())

    def to_time(self) -> time:
        return time(self.h, self.m, self.s or 0, (self.f or 0) * 1000)

    @classmethod
    def _coerce(cls, other: object) -> Any:
        if isinstance(other, time):
            return ApproximateTime.from_time(other)
        return super()._coerce(other)

    def _compare_key(self) -> tuple[Any, ...]:
        return (self.h, self.m, _optional_key(self.s), _optional_key(self.f))

    def __str__(self) -> str:
        text = f"{self.h:02d}:{self.m:02d}"
        if self.s is not None:
            text += f":{self.s:02d}"
            if self.f is not None:
                text += f".{self.f:03d}"
        return text


class HealthServiceDate(_Ordered, XmlModel):
    """An exact calendar date."""

    y: int = Field(ge=1000, le=9999, description="Year")
    m: int = Field(ge=1, le=12, description="Month")
    d: int = Field(ge=1, le=31, description="Day")

    @model_validator(mode="after")
    def day_fits_month(self) -> Self:
        if self.d > calendar.monthrange(self.y, self.m)[1]:
            raise ValueError(f"day {self.d} is out of range for {self.y:04d}-{self.m:02d}")
        return self

    @classmethod
    def from_date(cls, value: date) -> Self:
        return cls(y=value.year, m=value.month, d=value.day)

    @classmethod
    def today(cls) -> Self:
        return cls.from_date(date.today())

    def to_date(self) -> date:
        return date(self.y, self.m, self.d)

    @classmethod
    def _coerce(cls, other: object) -> Any:
        if isinstance(other, date):
            return HealthServiceDate.from_date(other)
        return super()._coerce(other)

    def _compare_key(self) -> tuple[Any, ...]:
        return (self.y, self.m, self.d)

    def __str__(self) -> str:
        return f"{self.y:04d}-{self.m:02d}-{self.d:02d}"


class HealthServiceDateTime(_Ordered, XmlModel):
    """An exact date with optional time of day and time zone."""

    date: HealthServiceDate
    time: ApproximateTime | None = None
    tz: CodableValue | None = None

    @classmethod
    def from_datetime(cls, value: datetime) -> Self:
        return cls(
            date=HealthServiceDate.from_date(value.date()),
            time=ApproximateTime.from_time(value.time()),
        )

    @classmethod
    def now(cls) -> Self:
        return cls.from_datetime(datetime.now())

    def to_datetime(self) -> datetime:
        """Combine date and time; a missing time means midnight."""
        day = self.date.to_date()
        clock = self.time.to_time() if self.time is not None else time()
        return datetime.combine(day, clock)

    @classmethod
    def _coerce(cls, other: object) -> Any:
        if isinstance(other, datetime):
            return HealthServiceDateTime.from_datetime(other)
        return super()._coerce(other)

    def _compare_key(self) -> tuple[Any, ...]:
        return (self.to_datetime(),)

    def __str__(self) -> str:
        text = str(self.date)
        if self.time is not None:
            text += f" {self.time}"
        if self.tz is not None:
            text += f" {self.tz}"
        return text


class StructuredDateTime(XmlModel):
    """The structured branch of an approximate date-time."""

    date: ApproximateDate
    time: ApproximateTime | None = None
    tz: CodableValue | None = None


_OTHER_BRANCH = {"structured": "descriptive", "descriptive": "structured"}


class ApproximateDateTime(_Ordered, XmlModel):
    """
    A point in time known to some precision, or described in words.

    Exactly one of `structured` and `descriptive` is set when the value is
    written. Assigning either branch, or calling `set_date` or
    `set_description`, clears the other one.
    """

    structured: StructuredDateTime | None = None
    descriptive: NonBlankStr | None = None

    @model_validator(mode="after")
    def one_branch(self) -> Self:
        if self.structured is not None and self.descriptive is not None:
            raise ValueError("structured and descriptive values are mutually exclusive")
        return self

    def __setattr__(self, name: str, value: Any) -> None:
        # Setting one branch clears the other, unless the new value is rejected
        other = _OTHER_BRANCH.get(name)
        if other is None or value is None or getattr(self, other) is None:
            super().__setattr__(name, value)
            return
        previous = getattr(self, other)
        super().__setattr__(other, None)
        try:
            super().__setattr__(name, value)
        except ValueError:
            super().__setattr__(other, previous)
            raise

    @classmethod
    def from_date(
        cls,
        value: ApproximateDate,
        time: ApproximateTime | None = None,
        tz: CodableValue | None = None,
    ) -> Self:
        return cls(structured=StructuredDateTime(date=value, time=time, tz=tz))

    @classmethod
    def from_datetime(cls, value: datetime) -> Self:
        return cls.from_date(
            ApproximateDate.from_date(value.date()), ApproximateTime.from_time(value.time())
        )

    @classmethod
    def from_description(cls, text: str) -> Self:
        return cls(descriptive=text)

    @classmethod
    def now(cls) -> Self:
        return cls.from_datetime(datetime.now())

    @property
    def approximate_date(self) -> ApproximateDate | None:
        return self.structured.date if self.structured is not None else None

    @property
    def approximate_time(self) -> ApproximateTime | None:
        return self.structured.time if self.structured is not None else None

    @property
    def time_zone(self) -> CodableValue | None:
        return self.structured.tz if self.structured is not None else None

    def set_date(
        self,
        value: ApproximateDate,
        time: ApproximateTime | None = None,
        tz: CodableValue | None = None,
    ) -> None:
        """Switch to the structured branch, dropping any description."""
        self.structured = StructuredDateTime(date=value, time=time, tz=tz)

    def set_description(self, text: str) -> None:
        """
        Switch to the descriptive branch, dropping any date and time.

        A blank description is rejected and the current value is kept.
        """
        self.descriptive = text

    @classmethod
    def read_content(cls, element: ET.Element) -> dict[str, Any]:
        values = super().read_content(element)
        if not values:
            raise ItemParseError(element.tag, "expected <structured> or <descriptive>")
        return values

    def write_content(self, element: ET.Element) -> None:
        if self.structured is None and self.descriptive is None:
            raise ItemSerializationError(
                f"<{element.tag}> needs either a structured date or a description"
            )
        super().write_content(element)

    @classmethod
    def _coerce(cls, other: object) -> Any:
        if isinstance(other, datetime):
            return ApproximateDateTime.from_datetime(other)
        return super()._coerce(other)

    def _compare_key(self) -> tuple[Any, ...]:
        # Descriptive values sort before structured ones
        if self.structured is None:
            return (0, self.descriptive or "")
        time_key = () if self.structured.time is None else self.structured.time._compare_key()
        return (1, self.structured.date._compare_key(), time_key)

    def __str__(self) -> str:
        if self.structured is None:
            return self.descriptive or ""
        text = str(self.structured.date)
        if self.structured.time is not None:
            text += f" {self.structured.time}"
        if self.structured.tz is not None:
            text += f" {self.structured.tz}"
        return text


class DurationValue(XmlModel):
    """A span between two approximate dates."""

    start_date: ApproximateDate
    end_date: ApproximateDate

    def __str__(self) -> str:
        return f"{self.start_date} - {self.end_date}"
