"""
Services built on the item catalogue.

This package contains the thing envelope codec and the `Result` type used
for batch parsing.
"""

from .result import Result
from .things import (
    deserialize_item,
    deserialize_items,
    item_to_element,
    serialize_item,
    thing_from_element,
)

__all__ = [
    "Result",
    "deserialize_item",
    "deserialize_items",
    "item_to_element",
    "serialize_item",
    "thing_from_element",
]
