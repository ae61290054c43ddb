"""Cursor-driven line editing on top of a Document.

Text slots follow ordinary line-editor rules: characters are inserted and
removed one at a time, Enter splits a line, and Backspace/Delete at a line
boundary merge neighbouring lines. Image slots are atomic: any delete that
reaches one removes the whole slot, never part of it and never its
neighbours.

A selection runs from an anchor to the cursor. Typing, Enter, Backspace,
Delete and image insertion remove an active selection before doing anything
else.
"""

import unicodedata
from typing import assert_never

import structlog
from pydantic import BaseModel, Field

from imgdoc.models.document import Document
from imgdoc.models.elements import ImageElement, TextElement
from imgdoc.services.images import ImageIntake

Position = tuple[int, int]


class DocumentStats(BaseModel):
    """Line and character totals for a status display."""

    line_count: int = Field(ge=0)
    char_count: int = Field(ge=0)

    model_config = {"frozen": True}


class LineEditor:
    """Applies editing keystrokes to a document at a (line, column) cursor.

    Both coordinates are 0-based; ``column`` counts characters and is always
    0 on an image slot. Every mutating method returns True when the document
    changed.
    """

    def __init__(
        self,
        document: Document,
        intake: ImageIntake | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._document = document
        self._intake = intake or ImageIntake()
        self._logger = logger or structlog.get_logger(__name__)
        self.line = 0
        self.column = 0
        self.selection_start: Position | None = None
        self.selection_end: Position | None = None

    @property
    def document(self) -> Document:
        return self._document

    @property
    def intake(self) -> ImageIntake:
        return self._intake

    def move_to(self, line: int, column: int) -> None:
        """Place the cursor, clamping both coordinates into the document."""
        count = self._document.element_count()
        self.line = max(0, min(line, count - 1)) if count else 0
        self.column = max(0, min(column, self._line_length(self.line)))

    # -- selection -------------------------------------------------------

    def start_selection(self) -> None:
        """Anchor a selection at the cursor."""
        self.selection_start = (self.line, self.column)
        self.selection_end = (self.line, self.column)

    def update_selection(self) -> None:
        if self.selection_start is not None:
            self.selection_end = (self.line, self.column)

    def clear_selection(self) -> None:
        self.selection_start = None
        self.selection_end = None

    def has_selection(self) -> bool:
        return (
            self.selection_start is not None
            and self.selection_end is not None
            and self.selection_start != self.selection_end
        )

    def select_all(self) -> None:
        """Select from the start of the document to the end of its last line."""
        count = self._document.element_count()
        if not count:
            self.clear_selection()
            return
        self.selection_start = (0, 0)
        self.move_to(count - 1, self._line_length(count - 1))
        self.selection_end = (self.line, self.column)

    def delete_selection(self) -> bool:
        """Remove the selected range and leave the cursor at its start.

        Text outside the range on the first and last lines is joined into
        one line. Every image slot the range touches is removed whole.
        """
        anchor, cursor = self.selection_start, self.selection_end
        if anchor is None or cursor is None or anchor == cursor:
            self.clear_selection()
            return False
        if not self._document.element_count():
            self.clear_selection()
            return False

        (start_line, start_column), (end_line, end_column) = self._ordered(anchor, cursor)
        head = self._text_before(start_line, start_column)
        tail = self._text_after(end_line, end_column)

        for index in range(end_line, start_line - 1, -1):
            element = self._document.element_at(index)
            if isinstance(element, ImageElement):
                self._remove_image(index)
            else:
                self._document.delete_element(index)
        if head is not None or tail is not None:
            self._document.insert_line(start_line, (head or "") + (tail or ""))

        self.clear_selection()
        self.move_to(start_line, len(head or ""))
        self._logger.debug(
            "selection_deleted",
            start_line=start_line,
            end_line=end_line,
        )
        return True

    # -- typing ----------------------------------------------------------

    def insert_char(self, char: str) -> bool:
        if len(char) != 1:
            raise ValueError("insert_char expects a single character")
        if char == "\n":
            return self.split_line()
        if unicodedata.category(char) == "Cc":
            return False

        self.delete_selection()
        self._ensure_line()
        element = self._document.element_at(self.line)
        match element:
            case TextElement(line=text):
                column = min(self.column, len(text))
                self._document.edit_text(self.line, text[:column] + char + text[column:])
                self.column = column + 1
            case ImageElement():
                self.line = self._document.insert_line(self.line + 1, char)
                self.column = 1
            case _:
                assert_never(element)
        return True

    def insert_text(self, text: str) -> bool:
        modified = False
        for char in text.replace("\r\n", "\n"):
            modified = self.insert_char(char) or modified
        return modified

    def split_line(self) -> bool:
        """Handle Enter: split the text line at the cursor."""
        self.delete_selection()
        self._ensure_line()
        element = self._document.element_at(self.line)
        match element:
            case TextElement(line=text):
                column = min(self.column, len(text))
                self._document.edit_text(self.line, text[:column])
                self.line = self._document.insert_line(self.line + 1, text[column:])
            case ImageElement():
                self.line = self._document.insert_line(self.line + 1, "")
            case _:
                assert_never(element)
        self.column = 0
        return True

    # -- deleting --------------------------------------------------------

    def backspace(self) -> bool:
        """Delete the character before the cursor, or merge with the line above."""
        if self.delete_selection():
            return True
        if not self._document.element_count():
            return False

        element = self._document.element_at(self.line)
        match element:
            case ImageElement():
                self._remove_image(self.line)
                if self.line > 0:
                    self.move_to(self.line - 1, self._line_length(self.line - 1))
                else:
                    self.move_to(0, 0)
                return True
            case TextElement(line=text):
                if self.column > 0:
                    column = min(self.column, len(text))
                    self._document.edit_text(self.line, text[: column - 1] + text[column:])
                    self.column = column - 1
                    return True
                if self.line == 0:
                    return False
                return self._join_with_previous(text)
            case _:
                assert_never(element)

    def delete_forward(self) -> bool:
        """Delete the character under the cursor, or merge the line below."""
        if self.delete_selection():
            return True
        if not self._document.element_count():
            return False

        element = self._document.element_at(self.line)
        match element:
            case ImageElement():
                self._remove_image(self.line)
                self.move_to(self.line, 0)
                return True
            case TextElement(line=text):
                if self.column < len(text):
                    self._document.edit_text(self.line, text[: self.column] + text[self.column + 1 :])
                    return True
                if self.line >= self._document.element_count() - 1:
                    return False
                return self._join_next(text)
            case _:
                assert_never(element)

    def delete_line(self) -> bool:
        """Remove the slot under the cursor; neighbours are left untouched."""
        self.clear_selection()
        removed = self._document.delete_element(self.line)
        if removed is None:
            return False
        self.move_to(self.line, 0)
        return True

    # -- images ----------------------------------------------------------

    def insert_image(self, data: bytes, width: int | None = None, height: int | None = None) -> str:
        """Insert an image below the cursor line, followed by an empty line.

        The cursor moves to the empty line so typing can continue.

        Returns:
            The id minted for the image.
        """
        record = self._intake.from_bytes(data, width=width, height=height)
        self.delete_selection()
        self._document.register_image(record)

        at = self.line + 1 if self._document.element_count() else 0
        at = self._document.insert_image(at, record.id, record.width, record.height)
        self.line = self._document.insert_line(at + 1, "")
        self.column = 0

        self._logger.debug("image_inserted", image_id=record.id, index=at)
        return record.id

    # -- movement --------------------------------------------------------

    def move_left(self, extend: bool = False) -> None:
        self._begin_move(extend)
        if self.column > 0:
            self.column -= 1
        elif self.line > 0:
            self.line -= 1
            self.column = self._line_length(self.line)
        self._end_move(extend)

    def move_right(self, extend: bool = False) -> None:
        self._begin_move(extend)
        if self.column < self._line_length(self.line):
            self.column += 1
        elif self.line < self._document.element_count() - 1:
            self.line += 1
            self.column = 0
        self._end_move(extend)

    def move_up(self, extend: bool = False) -> None:
        self._begin_move(extend)
        if self.line > 0:
            self.line -= 1
            self.column = min(self.column, self._line_length(self.line))
        self._end_move(extend)

    def move_down(self, extend: bool = False) -> None:
        self._begin_move(extend)
        if self.line < self._document.element_count() - 1:
            self.line += 1
            self.column = min(self.column, self._line_length(self.line))
        self._end_move(extend)

    def stats(self) -> DocumentStats:
        return DocumentStats(
            line_count=self._document.element_count(),
            char_count=self._document.char_count(),
        )

    # -- helpers ---------------------------------------------------------

    def _begin_move(self, extend: bool) -> None:
        if not extend:
            self.clear_selection()
        elif self.selection_start is None:
            self.start_selection()

    def _end_move(self, extend: bool) -> None:
        if extend:
            self.update_selection()

    def _ordered(self, anchor: Position, cursor: Position) -> tuple[Position, Position]:
        start = self._clamp_position(anchor)
        end = self._clamp_position(cursor)
        return (start, end) if start <= end else (end, start)

    def _clamp_position(self, position: Position) -> Position:
        line = max(0, min(position[0], self._document.element_count() - 1))
        return line, max(0, min(position[1], self._line_length(line)))

    def _text_before(self, index: int, column: int) -> str | None:
        element = self._document.element_at(index)
        return element.line[:column] if isinstance(element, TextElement) else None

    def _text_after(self, index: int, column: int) -> str | None:
        element = self._document.element_at(index)
        return element.line[column:] if isinstance(element, TextElement) else None

    def _ensure_line(self) -> None:
        if self.line >= self._document.element_count():
            self.line = self._document.insert_line(self._document.element_count(), "")
            self.column = 0

    def _line_length(self, index: int) -> int:
        if not 0 <= index < self._document.element_count():
            return 0
        element = self._document.element_at(index)
        match element:
            case TextElement(line=text):
                return len(text)
            case ImageElement():
                return 0
            case _:
                assert_never(element)

    def _join_with_previous(self, text: str) -> bool:
        previous = self._document.element_at(self.line - 1)
        match previous:
            case TextElement(line=previous_text):
                self._document.edit_text(self.line - 1, previous_text + text)
                self._document.delete_element(self.line)
                self.line -= 1
                self.column = len(previous_text)
            case ImageElement():
                self._remove_image(self.line - 1)
                self.line -= 1
                self.column = 0
            case _:
                assert_never(previous)
        return True

    def _join_next(self, text: str) -> bool:
        following = self._document.element_at(self.line + 1)
        match following:
            case TextElement(line=following_text):
                self._document.edit_text(self.line, text + following_text)
                self._document.delete_element(self.line + 1)
            case ImageElement():
                self._remove_image(self.line + 1)
            case _:
                assert_never(following)
        return True

    def _remove_image(self, index: int) -> None:
        removed = self._document.delete_element(index)
        self._logger.debug("image_removed", index=index, image_id=getattr(removed, "id", None))


__all__ = ["DocumentStats", "LineEditor"]
