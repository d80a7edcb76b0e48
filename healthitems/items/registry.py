"""
Mapping from type ids to item classes.

Item modules register their classes with `@register_item_type` at import
time. Deserialization looks classes up here by the <type-id> of a thing.
"""

from typing import TypeVar
from uuid import UUID

import structlog

from healthitems.domain.errors import TypeHandlerAlreadyRegisteredError
from healthitems.items.base import HealthRecordItem

logger = structlog.get_logger(__name__)

ItemClassT = TypeVar("ItemClassT", bound=type[HealthRecordItem])


class ItemTypeRegistry:
    """Type id to item class lookup."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, type[HealthRecordItem]] = {}

    def register(
        self, item_class: type[HealthRecordItem], *, overwrite: bool = False
    ) -> type[HealthRecordItem]:
        if not (isinstance(item_class, type) and issubclass(item_class, HealthRecordItem)):
            raise TypeError(f"{item_class!r} is not a HealthRecordItem subclass")
        type_id = item_class.TYPE_ID
        if type_id is None:
            raise ValueError(f"{item_class.__name__} does not declare a TYPE_ID")

        existing = self._by_id.get(type_id)
        if existing is not None and not overwrite:
            raise TypeHandlerAlreadyRegisteredError(type_id, existing)

        self._by_id[type_id] = item_class
        logger.debug(
            "item_type_registered",
            type_id=str(type_id),
            item_class=item_class.__name__,
            replaced=existing.__name__ if existing is not None else None,
        )
        return item_class

    def get(self, type_id: UUID | str) -> type[HealthRecordItem] | None:
        key = type_id if isinstance(type_id, UUID) else UUID(type_id)
        return self._by_id.get(key)

    def get_by_name(self, name: str) -> type[HealthRecordItem] | None:
        """Find a registered class by class name or type name, ignoring case."""
        wanted = name.casefold()
        for item_class in self._by_id.values():
            if wanted in (item_class.__name__.casefold(), item_class.TYPE_NAME.casefold()):
                return item_class
        return None

    @property
    def registered_types(self) -> dict[UUID, type[HealthRecordItem]]:
        return dict(self._by_id)

    def __contains__(self, type_id: object) -> bool:
        if isinstance(type_id, str):
            try:
                type_id = UUID(type_id)
            except ValueError:
                return False
        return type_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)


# Process-wide registry populated by the item modules
item_types = ItemTypeRegistry()


def register_item_type(item_class: ItemClassT) -> ItemClassT:
    """Class decorator registering `item_class` with the default registry."""
    item_types.register(item_class)
    return item_class
