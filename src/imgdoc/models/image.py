from typing import Any

from pydantic import Field, field_validator

from imgdoc.models.base import Base64Bytes, RecordModel, ensure_image_id
from imgdoc.models.elements import ImageElement


class ImageRecord(RecordModel):
    """An image payload as stored in the metadata companion.

    Attributes:
        id: Stable token linking the record to its placeholder.
        data: The original encoded bytes (PNG, JPEG, ...), base64 when serialized.
        width: Declared display width in logical units.
        height: Declared display height in logical units.
    """

    id: str
    data: Base64Bytes
    width: int = Field(ge=0, strict=True)
    height: int = Field(ge=0, strict=True)

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, value: Any) -> str:
        return ensure_image_id(value)

    def to_element(self) -> ImageElement:
        return ImageElement(id=self.id, width=self.width, height=self.height)

    def resized(self, width: int, height: int) -> "ImageRecord":
        if width == self.width and height == self.height:
            return self
        return ImageRecord(id=self.id, data=self.data, width=width, height=height)


__all__ = ["ImageRecord"]
