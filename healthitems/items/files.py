"""File attachments stored as items."""

from uuid import UUID

from pydantic import Field

from healthitems.domain.base import NonBlankStr
from healthitems.domain.codes import CodableValue
from healthitems.items.base import HealthRecordItem
from healthitems.items.registry import register_item_type


@register_item_type
class File(HealthRecordItem):
    """Name, size and content type of an attached file."""

    TYPE_ID = UUID("bd0403c5-4ae2-4b0e-a8db-1888678e4528")
    TYPE_NAME = "File"
    ROOT_ELEMENT = "file"

    name: NonBlankStr
    size: int = Field(gt=0, description="bytes")
    content_type: CodableValue | None = None

    def __str__(self) -> str:
        return self.name
