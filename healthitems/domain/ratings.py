"""Five-point scales shared by several item types."""

from enum import IntEnum


class Normalcy(IntEnum):
    """How a measurement compares with the normal range."""

    WELL_BELOW_NORMAL = 1
    BELOW_NORMAL = 2
    NORMAL = 3
    ABOVE_NORMAL = 4
    WELL_ABOVE_NORMAL = 5


class RelativeRating(IntEnum):
    VERY_LOW = 1
    LOW = 2
    MODERATE = 3
    HIGH = 4
    VERY_HIGH = 5


class Mood(IntEnum):
    DEPRESSED = 1
    SAD = 2
    NEUTRAL = 3
    HAPPY = 4
    ELATED = 5


class Wellbeing(IntEnum):
    SICK = 1
    IMPAIRED = 2
    ABLE = 3
    HEALTHY = 4
    VIGOROUS = 5
