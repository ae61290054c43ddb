"""Unit tests for the LineEditor service."""

import pytest

from imgdoc.models.document import Document
from imgdoc.models.elements import ImageElement, TextElement
from imgdoc.services.editor import DocumentStats, LineEditor


def _texts(*lines: str) -> Document:
    document = Document()
    for index, line in enumerate(lines):
        document.insert_line(index, line)
    return document


def _with_image(before: str = "above", after: str = "below") -> Document:
    document = _texts(before, after)
    document.insert_image(1, "img", 8, 6, data=b"\x89PNG")
    return document


def _lines(document: Document) -> list[str | None]:
    return [e.line if isinstance(e, TextElement) else None for e in document]


class TestTyping:
    """Tests for inserting characters and splitting lines."""

    def test_typing_into_empty_document_creates_a_line(self) -> None:
        editor = LineEditor(Document())

        assert editor.insert_text("hi") is True

        assert _lines(editor.document) == ["hi"]
        assert (editor.line, editor.column) == (0, 2)

    def test_insert_at_cursor(self) -> None:
        editor = LineEditor(_texts("held"))
        editor.move_to(0, 3)

        editor.insert_char("l")

        assert _lines(editor.document) == ["helld"]
        assert editor.column == 4

    def test_control_characters_are_ignored(self) -> None:
        editor = LineEditor(_texts("abc"))

        assert editor.insert_char("\x07") is False
        assert _lines(editor.document) == ["abc"]

    def test_insert_char_requires_single_character(self) -> None:
        with pytest.raises(ValueError):
            LineEditor(_texts("")).insert_char("ab")

    def test_typing_on_image_starts_a_new_line_below(self) -> None:
        editor = LineEditor(_with_image())
        editor.move_to(1, 0)

        editor.insert_char("x")

        assert _lines(editor.document) == ["above", None, "x", "below"]
        assert (editor.line, editor.column) == (2, 1)

    def test_split_line(self) -> None:
        editor = LineEditor(_texts("headtail"))
        editor.move_to(0, 4)

        editor.split_line()

        assert _lines(editor.document) == ["head", "tail"]
        assert (editor.line, editor.column) == (1, 0)

    def test_newline_in_text_splits(self) -> None:
        editor = LineEditor(Document())

        editor.insert_text("one\ntwo")

        assert _lines(editor.document) == ["one", "two"]

    def test_split_on_image_adds_empty_line_below(self) -> None:
        editor = LineEditor(_with_image())
        editor.move_to(1, 0)

        editor.split_line()

        assert _lines(editor.document) == ["above", None, "", "below"]
        assert editor.line == 2


class TestBackspace:
    """Tests for deleting backwards."""

    def test_deletes_previous_character(self) -> None:
        editor = LineEditor(_texts("abc"))
        editor.move_to(0, 2)

        assert editor.backspace() is True

        assert _lines(editor.document) == ["ac"]
        assert editor.column == 1

    def test_merges_with_previous_line(self) -> None:
        editor = LineEditor(_texts("foo", "bar"))
        editor.move_to(1, 0)

        editor.backspace()

        assert _lines(editor.document) == ["foobar"]
        assert (editor.line, editor.column) == (0, 3)

    def test_start_of_document_is_a_no_op(self) -> None:
        editor = LineEditor(_texts("abc"))

        assert editor.backspace() is False
        assert _lines(editor.document) == ["abc"]

    def test_on_image_removes_whole_slot(self) -> None:
        editor = LineEditor(_with_image())
        editor.move_to(1, 0)

        editor.backspace()

        assert _lines(editor.document) == ["above", "below"]
        assert (editor.line, editor.column) == (0, 5)

    def test_after_image_removes_image_not_text(self) -> None:
        editor = LineEditor(_with_image())
        editor.move_to(2, 0)

        editor.backspace()

        assert _lines(editor.document) == ["above", "below"]
        assert (editor.line, editor.column) == (1, 0)

    def test_empty_document(self) -> None:
        assert LineEditor(Document()).backspace() is False


class TestDeleteForward:
    """Tests for deleting forwards."""

    def test_deletes_character_under_cursor(self) -> None:
        editor = LineEditor(_texts("abc"))
        editor.move_to(0, 1)

        editor.delete_forward()

        assert _lines(editor.document) == ["ac"]

    def test_merges_next_line_at_end(self) -> None:
        editor = LineEditor(_texts("foo", "bar"))
        editor.move_to(0, 3)

        editor.delete_forward()

        assert _lines(editor.document) == ["foobar"]

    def test_end_of_document_is_a_no_op(self) -> None:
        editor = LineEditor(_texts("foo"))
        editor.move_to(0, 3)

        assert editor.delete_forward() is False

    def test_before_image_removes_image_only(self) -> None:
        editor = LineEditor(_with_image())
        editor.move_to(0, 5)

        editor.delete_forward()

        assert _lines(editor.document) == ["above", "below"]

    def test_on_image_removes_whole_slot(self) -> None:
        editor = LineEditor(_with_image())
        editor.move_to(1, 0)

        editor.delete_forward()

        assert _lines(editor.document) == ["above", "below"]
        assert editor.line == 1


class TestDeleteLine:
    """Tests for removing a whole slot."""

    def test_image_line_removes_one_element(self) -> None:
        document = _with_image()
        editor = LineEditor(document)
        editor.move_to(1, 0)

        assert editor.delete_line() is True

        assert document.element_count() == 2
        assert document.image_ids() == []

    def test_last_line_clamps_cursor(self) -> None:
        editor = LineEditor(_texts("a", "b"))
        editor.move_to(1, 1)

        editor.delete_line()

        assert (editor.line, editor.column) == (0, 0)

    def test_empty_document(self) -> None:
        assert LineEditor(Document()).delete_line() is False


class TestInsertImage:
    """Tests for inserting images at the cursor."""

    def test_inserts_image_and_trailing_line(self) -> None:
        document = _texts("first", "last")
        editor = LineEditor(document)

        image_id = editor.insert_image(b"clipboard", width=320, height=200)

        assert _lines(document) == ["first", None, "", "last"]
        assert document.element_at(1) == ImageElement(id=image_id, width=320, height=200)
        assert document.image_record(image_id).data == b"clipboard"
        assert (editor.line, editor.column) == (2, 0)

    def test_into_empty_document(self) -> None:
        document = Document()
        editor = LineEditor(document)

        editor.insert_image(b"bytes", width=1, height=1)

        assert _lines(document) == [None, ""]

    def test_ids_are_not_reused(self) -> None:
        editor = LineEditor(Document())

        first = editor.insert_image(b"a", width=1, height=1)
        editor.move_to(0, 0)
        editor.delete_line()
        second = editor.insert_image(b"a", width=1, height=1)

        assert first != second


class TestMovementAndStats:
    """Tests for cursor movement and counters."""

    def test_left_wraps_to_previous_line_end(self) -> None:
        editor = LineEditor(_texts("abc", "de"))
        editor.move_to(1, 0)

        editor.move_left()

        assert (editor.line, editor.column) == (0, 3)

    def test_right_wraps_to_next_line_start(self) -> None:
        editor = LineEditor(_texts("abc", "de"))
        editor.move_to(0, 3)

        editor.move_right()

        assert (editor.line, editor.column) == (1, 0)

    def test_vertical_movement_clamps_column(self) -> None:
        editor = LineEditor(_with_image("long line", "xy"))
        editor.move_to(0, 7)

        editor.move_down()
        assert (editor.line, editor.column) == (1, 0)

        editor.move_down()
        assert (editor.line, editor.column) == (2, 0)

        editor.move_up()
        editor.move_up()
        assert (editor.line, editor.column) == (0, 0)

    def test_move_to_clamps(self) -> None:
        editor = LineEditor(_texts("abc"))

        editor.move_to(9, 9)

        assert (editor.line, editor.column) == (0, 3)

    def test_stats(self) -> None:
        editor = LineEditor(_with_image("abc", "de"))

        assert editor.stats() == DocumentStats(line_count=3, char_count=5)


class TestSelection:
    """Tests for selecting and replacing ranges."""

    def test_shift_movement_extends_selection(self) -> None:
        editor = LineEditor(_texts("hello world"))

        for _ in range(5):
            editor.move_right(extend=True)

        assert editor.selection_start == (0, 0)
        assert editor.selection_end == (0, 5)
        assert editor.has_selection() is True

    def test_plain_movement_clears_selection(self) -> None:
        editor = LineEditor(_texts("hello"))
        editor.move_right(extend=True)

        editor.move_right()

        assert editor.has_selection() is False
        assert editor.selection_start is None

    def test_delete_single_line_range(self) -> None:
        editor = LineEditor(_texts("hello world"))
        for _ in range(5):
            editor.move_right(extend=True)

        assert editor.delete_selection() is True

        assert _lines(editor.document) == [" world"]
        assert (editor.line, editor.column) == (0, 0)
        assert editor.has_selection() is False

    def test_delete_multi_line_range_joins_ends(self) -> None:
        editor = LineEditor(_texts("abc", "def", "ghi"))
        editor.move_to(0, 1)
        editor.start_selection()
        editor.move_to(2, 2)
        editor.update_selection()

        editor.delete_selection()

        assert _lines(editor.document) == ["ai"]
        assert (editor.line, editor.column) == (0, 1)

    def test_backwards_selection_is_ordered(self) -> None:
        editor = LineEditor(_texts("abc", "def"))
        editor.move_to(1, 2)
        editor.start_selection()
        editor.move_to(0, 1)
        editor.update_selection()

        editor.delete_selection()

        assert _lines(editor.document) == ["af"]

    def test_range_across_image_removes_whole_slot(self) -> None:
        document = _with_image()
        editor = LineEditor(document)
        editor.move_to(0, 2)
        editor.start_selection()
        editor.move_to(2, 3)
        editor.update_selection()

        editor.delete_selection()

        assert _lines(document) == ["abow"]
        assert document.image_ids() == []

    def test_range_ending_on_image_removes_it(self) -> None:
        document = _with_image()
        editor = LineEditor(document)
        editor.move_to(0, 5)
        editor.move_down(extend=True)

        editor.delete_selection()

        assert _lines(document) == ["above", "below"]
        assert document.image_ids() == []

    def test_select_all(self) -> None:
        editor = LineEditor(_texts("abc", "de"))

        editor.select_all()

        assert editor.selection_start == (0, 0)
        assert editor.selection_end == (1, 2)
        assert (editor.line, editor.column) == (1, 2)

    def test_select_all_on_empty_document(self) -> None:
        editor = LineEditor(Document())

        editor.select_all()

        assert editor.has_selection() is False
        assert editor.delete_selection() is False

    def test_select_all_then_delete_clears_images(self) -> None:
        document = _with_image()
        editor = LineEditor(document)
        editor.select_all()

        assert editor.delete_forward() is True

        assert _lines(document) == [""]
        assert document.image_ids() == []

    def test_clear_selection(self) -> None:
        editor = LineEditor(_texts("abc"))
        editor.select_all()

        editor.clear_selection()

        assert editor.delete_selection() is False
        assert _lines(editor.document) == ["abc"]

    def test_typing_replaces_selection(self) -> None:
        editor = LineEditor(_texts("hello", "world"))
        editor.select_all()

        editor.insert_text("bye")

        assert _lines(editor.document) == ["bye"]
        assert (editor.line, editor.column) == (0, 3)

    def test_enter_replaces_selection(self) -> None:
        editor = LineEditor(_texts("abcd"))
        editor.move_to(0, 1)
        editor.move_right(extend=True)
        editor.move_right(extend=True)

        editor.split_line()

        assert _lines(editor.document) == ["a", "d"]
        assert (editor.line, editor.column) == (1, 0)

    def test_backspace_removes_selection_only(self) -> None:
        editor = LineEditor(_texts("abc"))
        editor.move_to(0, 3)
        editor.move_left(extend=True)

        assert editor.backspace() is True

        assert _lines(editor.document) == ["ab"]
        assert editor.column == 2

    def test_delete_forward_removes_selection_only(self) -> None:
        editor = LineEditor(_texts("foo", "bar"))
        editor.move_to(0, 2)
        editor.move_down(extend=True)

        editor.delete_forward()

        assert _lines(editor.document) == ["for"]

    def test_insert_image_replaces_selection(self) -> None:
        editor = LineEditor(_texts("abc"))
        editor.select_all()

        editor.insert_image(b"bytes", width=1, height=1)

        assert _lines(editor.document) == ["", None, ""]

    def test_delete_line_drops_selection(self) -> None:
        editor = LineEditor(_texts("abc", "def"))
        editor.select_all()

        editor.delete_line()

        assert editor.has_selection() is False
        assert _lines(editor.document) == ["abc"]
