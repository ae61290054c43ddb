from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import assert_never

from imgdoc.errors import TypeMismatchError
from imgdoc.models.elements import ContentElement, ImageElement, TextElement
from imgdoc.models.image import ImageRecord


class Document:
    """An ordered sequence of line slots plus the image payloads they refer to.

    The element list is the single source of truth for order. Each slot holds
    either a ``TextElement`` or an ``ImageElement``; images never share a slot
    with text. ``images`` maps ids to the byte payloads known for this
    document. Records for deleted images are kept (ids are never reused) but
    only referenced ids are written out on save.
    """

    def __init__(
        self,
        elements: Iterable[ContentElement] | None = None,
        images: Iterable[ImageRecord] | None = None,
        file_path: Path | None = None,
    ) -> None:
        self._elements: list[ContentElement] = list(elements or [])
        self._images: dict[str, ImageRecord] = {record.id: record for record in images or []}
        self.file_path = file_path
        self.is_modified = False

    def __repr__(self) -> str:
        return (
            f"Document(elements={len(self._elements)}, images={len(self._images)}, "
            f"file_path={self.file_path!r}, is_modified={self.is_modified})"
        )

    def __iter__(self) -> Iterator[ContentElement]:
        return iter(self._elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._elements == other._elements

    __hash__ = None  # type: ignore[assignment]

    @property
    def elements(self) -> list[ContentElement]:
        """A copy of the element sequence."""
        return list(self._elements)

    @property
    def images(self) -> dict[str, ImageRecord]:
        return dict(self._images)

    # -- editing ---------------------------------------------------------

    def insert_line(self, at: int, text: str) -> int:
        """Insert a text line, clamping ``at`` into ``[0, len]``.

        Returns:
            The index the line was inserted at.
        """
        index = self._clamp(at)
        self._elements.insert(index, TextElement(line=text))
        self.is_modified = True
        return index

    def insert_image(
        self,
        at: int,
        image_id: str,
        width: int,
        height: int,
        data: bytes | None = None,
    ) -> int:
        """Insert an image reference into its own slot.

        When ``data`` is given the matching ``ImageRecord`` is registered too;
        the buffer is copied so the caller may reuse it.

        Returns:
            The index the image was inserted at.
        """
        element = ImageElement(id=image_id, width=width, height=height)
        if data is not None:
            self.register_image(
                ImageRecord(id=element.id, data=bytes(data), width=element.width, height=element.height)
            )
        elif image_id in self._images:
            self._images[image_id] = self._images[image_id].resized(element.width, element.height)
        index = self._clamp(at)
        self._elements.insert(index, element)
        self.is_modified = True
        return index

    def delete_element(self, at: int) -> ContentElement | None:
        """Remove the slot at ``at``; out-of-range indexes are a no-op."""
        if not 0 <= at < len(self._elements):
            return None
        removed = self._elements.pop(at)
        self.is_modified = True
        return removed

    def edit_text(self, at: int, new_text: str) -> None:
        """Replace the text of the line at ``at``.

        Raises:
            IndexError: If ``at`` is out of range.
            TypeMismatchError: If the slot holds an image.
        """
        element = self._require(at)
        match element:
            case TextElement():
                self._elements[at] = TextElement(line=new_text)
            case ImageElement():
                raise TypeMismatchError(f"Element {at} is an image, not text")
            case _:
                assert_never(element)
        self.is_modified = True

    def resize_image(self, at: int, width: int, height: int) -> None:
        """Change the declared size of the image at ``at`` without re-encoding it."""
        element = self._require(at)
        match element:
            case ImageElement():
                resized = ImageElement(id=element.id, width=width, height=height)
                self._elements[at] = resized
                record = self._images.get(element.id)
                if record is not None:
                    self._images[element.id] = record.resized(resized.width, resized.height)
            case TextElement():
                raise TypeMismatchError(f"Element {at} is text, not an image")
            case _:
                assert_never(element)
        self.is_modified = True

    def register_image(self, record: ImageRecord) -> None:
        self._images[record.id] = record

    # -- accessors -------------------------------------------------------

    def element_count(self) -> int:
        return len(self._elements)

    def char_count(self) -> int:
        total = 0
        for element in self._elements:
            match element:
                case TextElement(line=line):
                    total += len(line)
                case ImageElement():
                    pass
                case _:
                    assert_never(element)
        return total

    def line_number_of(self, index: int) -> int:
        self._require(index)
        return index + 1

    def element_at(self, index: int) -> ContentElement:
        return self._require(index)

    def image_record(self, image_id: str) -> ImageRecord | None:
        return self._images.get(image_id)

    def image_ids(self) -> list[str]:
        """Ids referenced by image slots, in document order."""
        return [element.id for element in self._elements if isinstance(element, ImageElement)]

    # -- lifecycle -------------------------------------------------------

    def mark_clean(self, path: Path) -> None:
        """Record a successful save or load of ``path``."""
        self.file_path = path
        self.is_modified = False

    def _clamp(self, at: int) -> int:
        return max(0, min(at, len(self._elements)))

    def _require(self, index: int) -> ContentElement:
        if not 0 <= index < len(self._elements):
            raise IndexError(f"element index {index} out of range (0..{len(self._elements) - 1})")
        return self._elements[index]


def new_document() -> Document:
    """Create an empty, never-saved document."""
    return Document()


__all__ = ["Document", "new_document"]
