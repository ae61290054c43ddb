"""Placeholder codec: converts documents to a plain-text stream plus metadata.

Every slot is written as one newline-terminated line. Image slots become a
placeholder line ``[img_load("<id>")]`` and their payload moves to the
``MetadataStore``.
A text line that would otherwise read back as a placeholder is written with
one extra leading backslash, which decoding strips again.
"""

import re
from typing import assert_never

import structlog

from imgdoc.errors import DanglingReferenceError
from imgdoc.models.base import TOKEN_PATTERN
from imgdoc.models.document import Document
from imgdoc.models.elements import ContentElement, ImageElement, TextElement
from imgdoc.models.image import ImageRecord
from imgdoc.models.metadata import MetadataStore

PLACEHOLDER_PREFIX = '[img_load("'
PLACEHOLDER_SUFFIX = '")]'

_PLACEHOLDER_RE = re.compile(
    rf"(?P<escapes>\\*){re.escape(PLACEHOLDER_PREFIX)}(?P<id>{TOKEN_PATTERN}){re.escape(PLACEHOLDER_SUFFIX)}"
)


def placeholder_for(image_id: str) -> str:
    return f"{PLACEHOLDER_PREFIX}{image_id}{PLACEHOLDER_SUFFIX}"


def match_placeholder(line: str) -> str | None:
    """Return the image id if ``line`` is exactly one unescaped placeholder."""
    match = _PLACEHOLDER_RE.fullmatch(line)
    if match is None or match.group("escapes"):
        return None
    return match.group("id")


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    # A final newline terminates the last line rather than starting a new one.
    if lines[-1] == "":
        lines.pop()
    return lines


class PlaceholderCodec:
    """Lossless mapping between a document and (text, metadata)."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger(__name__)

    def encode(self, document: Document) -> tuple[str, MetadataStore]:
        """Render a document as placeholder text and its metadata store.

        Args:
            document: The document to encode. It is not modified.

        Returns:
            The newline-terminated text and a store holding exactly the records
            of the ids referenced by image slots.

        Raises:
            DanglingReferenceError: If an image slot has no known record.
        """
        lines: list[str] = []
        records: dict[str, ImageRecord] = {}

        for element in document:
            match element:
                case TextElement(line=line):
                    lines.append(self._escape(line))
                case ImageElement(id=image_id, width=width, height=height):
                    record = document.image_record(image_id)
                    if record is None:
                        raise DanglingReferenceError(image_id)
                    records[image_id] = record.resized(width, height)
                    lines.append(placeholder_for(image_id))
                case _:
                    assert_never(element)

        self._logger.debug(
            "document_encoded",
            line_count=len(lines),
            image_count=len(records),
        )
        return "".join(f"{line}\n" for line in lines), MetadataStore(images=records)

    def decode(self, text: str, metadata: MetadataStore) -> Document:
        """Rebuild a document from placeholder text and its metadata store.

        Args:
            text: Newline-terminated lines; an empty string means no lines and
                a missing final newline is tolerated.
            metadata: Records for the ids the placeholders refer to.

        Returns:
            A clean document holding the referenced image records.

        Raises:
            DanglingReferenceError: If a placeholder names an id absent from
                ``metadata``.
        """
        elements: list[ContentElement] = []
        records: dict[str, ImageRecord] = {}

        for line in _split_lines(text):
            image_id = match_placeholder(line)
            if image_id is None:
                elements.append(TextElement(line=self._unescape(line)))
                continue
            record = metadata.get(image_id)
            if record is None:
                raise DanglingReferenceError(image_id)
            records[image_id] = record
            elements.append(record.to_element())

        unreferenced = metadata.ids() - records.keys()
        if unreferenced:
            self._logger.warning("unreferenced_images_dropped", image_ids=sorted(unreferenced))

        self._logger.debug(
            "document_decoded",
            element_count=len(elements),
            image_count=len(records),
        )
        return Document(elements=elements, images=records.values())

    def has_placeholders(self, text: str) -> bool:
        return any(match_placeholder(line) is not None for line in _split_lines(text))

    def _escape(self, line: str) -> str:
        if _PLACEHOLDER_RE.fullmatch(line):
            return "\\" + line
        return line

    def _unescape(self, line: str) -> str:
        match = _PLACEHOLDER_RE.fullmatch(line)
        if match is not None and match.group("escapes"):
            return line[1:]
        return line


__all__ = ["PlaceholderCodec", "match_placeholder", "placeholder_for"]
