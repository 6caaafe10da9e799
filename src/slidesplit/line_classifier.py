"""Line classification — tags one trimmed markdown line with its structural role."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

PAGE_BREAK_MARKER = "==="
TITLE_PREFIX = "# "
HEADING_PREFIX = "## "

_TABLE_SEPARATOR_RE = re.compile(r"^\s*[-|]+\s*$")
_TASK_ITEM_RE = re.compile(r"^[-*] \[([ xX])\]\s*(.*)$")
_IMAGE_RE = re.compile(r"!\[(.*)\]\((.*)\)")


class LineKind(str, Enum):
    """Structural role of a single input line."""
    PAGE_BREAK = "page_break"
    TITLE = "title"
    HEADING = "heading"
    TABLE_ROW = "table_row"
    TASK_ITEM = "task_item"
    IMAGE = "image"
    BLANK = "blank"
    CONTENT = "content"


@dataclass(frozen=True)
class ClassifiedLine:
    """A classified line and the payload extracted from it.

    ``payload`` is the header text for titles and headings, the item text
    for task items, the target for images, and the line itself otherwise.
    """
    kind: LineKind
    line: str
    payload: str = ""
    checked: bool = False
    label: str = ""


def is_table_row(line: str) -> bool:
    """True for a pipe-delimited row or a dash/pipe separator line."""
    return line.startswith("|") or bool(_TABLE_SEPARATOR_RE.match(line))


def classify_line(raw_line: str) -> ClassifiedLine:
    """Classify one input line.

    The line is trimmed first. Classification is pure: whether a table row
    opens or continues a table is decided by the caller's table buffer.
    """
    line = raw_line.strip()

    if line == PAGE_BREAK_MARKER:
        return ClassifiedLine(LineKind.PAGE_BREAK, line)

    if line.startswith(TITLE_PREFIX):
        return ClassifiedLine(LineKind.TITLE, line, payload=line[len(TITLE_PREFIX):])

    if line.startswith(HEADING_PREFIX):
        return ClassifiedLine(LineKind.HEADING, line, payload=line[len(HEADING_PREFIX):])

    if is_table_row(line):
        return ClassifiedLine(LineKind.TABLE_ROW, line, payload=line)

    image_match = _IMAGE_RE.search(line)
    if image_match:
        return ClassifiedLine(
            LineKind.IMAGE,
            line,
            payload=image_match.group(2),
            label=image_match.group(1),
        )

    if not line:
        return ClassifiedLine(LineKind.BLANK, line)

    task_match = _TASK_ITEM_RE.match(line)
    if task_match:
        return ClassifiedLine(
            LineKind.TASK_ITEM,
            line,
            payload=task_match.group(2),
            checked=task_match.group(1).lower() == "x",
        )

    return ClassifiedLine(LineKind.CONTENT, line, payload=line)
