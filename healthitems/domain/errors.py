"""
Exception hierarchy for health record item handling.

Expected failures inside batch operations are reported through
`healthitems.services.result.Result`; everything else raises one of these.
Validation failures when a field is set surface as pydantic's
`ValidationError`, which is a `ValueError`.
"""


class HealthItemError(Exception):
    """Base class for errors raised by the package."""


class ItemParseError(HealthItemError, ValueError):
    """XML could not be turned into an item or value type."""

    def __init__(self, tag: str, reason: str) -> None:
        self.tag = tag
        self.reason = reason
        super().__init__(f"cannot parse <{tag}>: {reason}")


class UnexpectedRootError(ItemParseError):
    """The type-specific XML does not start with the expected root element."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        super().__init__(actual, f"expected root element <{expected}>")


class ItemSerializationError(HealthItemError):
    """An object is missing mandatory data and cannot be written."""


class TypeHandlerAlreadyRegisteredError(HealthItemError):
    """A type id is already mapped to an item class."""

    def __init__(self, type_id: object, existing: type) -> None:
        self.type_id = type_id
        self.existing = existing
        super().__init__(f"type id {type_id} is already registered to {existing.__name__}")


class UnknownItemTypeError(HealthItemError, LookupError):
    """No item class is registered for a type id."""

    def __init__(self, type_id: object) -> None:
        self.type_id = type_id
        super().__init__(f"no item type registered for type id {type_id}")
