"""
The item catalogue.

Importing this package imports every item module, which registers each
item class with `item_types`.
"""

from . import (
    careplans,
    conditions,
    encounters,
    files,
    fitness,
    journal,
    labs,
    legal,
    medications,
    pregnancy,
    profiles,
    sleep,
    vitals,
)
from .base import HealthRecordItem, UnknownItem
from .registry import ItemTypeRegistry, item_types, register_item_type

__all__ = [
    "HealthRecordItem",
    "ItemTypeRegistry",
    "UnknownItem",
    "careplans",
    "conditions",
    "encounters",
    "files",
    "fitness",
    "item_types",
    "journal",
    "labs",
    "legal",
    "medications",
    "pregnancy",
    "profiles",
    "register_item_type",
    "sleep",
    "vitals",
]
