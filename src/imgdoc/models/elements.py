"""Content elements: the two shapes a document line slot can take.

A slot holds either a line of text or a reference to one image. The union is
closed; code that branches on it should use ``match`` with ``assert_never``
in the fallback arm so a new kind cannot slip through unhandled.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Field, field_validator

from imgdoc.models.base import FrozenModel, ensure_image_id, ensure_single_line
from imgdoc.models.enums import ElementKind


class TextElement(FrozenModel):
    kind: Literal[ElementKind.TEXT] = ElementKind.TEXT
    line: str = ""

    @field_validator("line")
    @classmethod
    def _validate_line(cls, value: str) -> str:
        return ensure_single_line(value, "line")


class ImageElement(FrozenModel):
    """Reference to an image record; dimensions are cached for layout."""

    kind: Literal[ElementKind.IMAGE] = ElementKind.IMAGE
    id: str
    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, value: Any) -> str:
        return ensure_image_id(value)


ContentElement = Annotated[Union[TextElement, ImageElement], Field(discriminator="kind")]


__all__ = ["ContentElement", "ImageElement", "TextElement"]
