"""Tests for line classification — page breaks, headers, tables, task items, images."""

from __future__ import annotations

import pytest

from slidesplit.line_classifier import (
    PAGE_BREAK_MARKER,
    ClassifiedLine,
    LineKind,
    classify_line,
    is_table_row,
)


# ── Structural Markers ────────────────────────────────────────────


class TestStructuralMarkers:
    """Page breaks and header levels."""

    def test_page_break(self):
        assert classify_line(PAGE_BREAK_MARKER).kind is LineKind.PAGE_BREAK

    def test_page_break_with_surrounding_whitespace(self):
        assert classify_line("  ===  ").kind is LineKind.PAGE_BREAK

    def test_four_equals_is_not_page_break(self):
        assert classify_line("====").kind is LineKind.CONTENT

    def test_title(self):
        item = classify_line("# Quarterly Review")
        assert item.kind is LineKind.TITLE
        assert item.payload == "Quarterly Review"

    def test_title_is_trimmed(self):
        item = classify_line("   # Spaced  ")
        assert item.kind is LineKind.TITLE
        assert item.payload == "Spaced"

    def test_heading(self):
        item = classify_line("## Agenda")
        assert item.kind is LineKind.HEADING
        assert item.payload == "Agenda"

    def test_hash_without_blank_is_content(self):
        assert classify_line("#hashtag").kind is LineKind.CONTENT

    def test_third_level_header_is_content(self):
        assert classify_line("### Detail").kind is LineKind.CONTENT


# ── Tables ────────────────────────────────────────────────────────


class TestTableRows:
    """Pipe rows and separator lines."""

    @pytest.mark.parametrize("line", ["| a | b |", "|---|---|", "|:--|--:|", "---", "-|-"])
    def test_table_rows(self, line):
        assert is_table_row(line)
        assert classify_line(line).kind is LineKind.TABLE_ROW

    def test_bullet_is_not_table_row(self):
        assert not is_table_row("- item")

    def test_table_row_payload_is_trimmed_line(self):
        item = classify_line("  | a | b |  ")
        assert item.payload == "| a | b |"


# ── Task Items ────────────────────────────────────────────────────


class TestTaskItems:
    """Checkbox list items."""

    def test_checked_lowercase(self):
        item = classify_line("- [x] Ship it")
        assert item.kind is LineKind.TASK_ITEM
        assert item.checked is True
        assert item.payload == "Ship it"

    def test_checked_uppercase(self):
        assert classify_line("- [X] Ship it").checked is True

    def test_unchecked(self):
        item = classify_line("- [ ] Later")
        assert item.kind is LineKind.TASK_ITEM
        assert item.checked is False

    def test_star_bullet(self):
        assert classify_line("* [ ] Star").kind is LineKind.TASK_ITEM

    def test_other_checkbox_state_falls_through_to_content(self):
        assert classify_line("- [y] Maybe").kind is LineKind.CONTENT

    def test_plain_bullet_is_content(self):
        assert classify_line("- just a bullet").kind is LineKind.CONTENT

    def test_bullet_without_space_is_content(self):
        assert classify_line("-[x] a").kind is LineKind.CONTENT

    def test_bullet_with_extra_spaces_is_content(self):
        assert classify_line("-   [x] a").kind is LineKind.CONTENT


# ── Images, Blanks and Content ────────────────────────────────────


class TestImagesAndContent:
    """Image references, blank lines, plain text."""

    def test_image_target_is_payload(self):
        item = classify_line("![Chart](charts/q1.png)")
        assert item.kind is LineKind.IMAGE
        assert item.payload == "charts/q1.png"
        assert item.label == "Chart"

    def test_image_inside_text(self):
        item = classify_line("See ![diagram](d.svg) below")
        assert item.kind is LineKind.IMAGE
        assert item.payload == "d.svg"

    def test_image_target_with_parentheses(self):
        item = classify_line("![wiki](https://en.wikipedia.org/wiki/Foo_(bar))")
        assert item.kind is LineKind.IMAGE
        assert item.payload == "https://en.wikipedia.org/wiki/Foo_(bar)"
        assert item.label == "wiki"

    def test_blank(self):
        assert classify_line("").kind is LineKind.BLANK

    def test_whitespace_only_is_blank(self):
        assert classify_line("   \t ").kind is LineKind.BLANK

    def test_plain_content(self):
        item = classify_line("Just some words")
        assert item.kind is LineKind.CONTENT
        assert item.payload == "Just some words"

    def test_classification_is_deterministic(self):
        line = "- [x] repeat"
        assert classify_line(line) == classify_line(line)

    def test_result_is_frozen(self):
        item = classify_line("text")
        assert isinstance(item, ClassifiedLine)
        with pytest.raises(AttributeError):
            item.kind = LineKind.TITLE
