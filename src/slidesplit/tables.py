"""Table accumulation and chunking — keeps oversized pipe tables within slide budgets."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from .config import SlideOptions
from .renderer import MarkdownRenderer

logger = logging.getLogger(__name__)

# Lines taken by the header row and the separator row of every chunk.
HEADER_LINES = 2


@dataclass
class TableChunk:
    """One slide's worth of a table: the shared header plus a run of rows."""
    headers: list[str]
    separator: str
    rows: list[str] = field(default_factory=list)

    def to_markdown(self) -> str:
        header_line = f"|{'|'.join(self.headers)}|"
        return "\n".join([header_line, self.separator, *self.rows])


class TableBuffer:
    """Raw table lines collected between the first row and the end of the table."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    def append(self, line: str) -> None:
        self._lines.append(line)

    def drain(self) -> list[str]:
        """Return the buffered lines and empty the buffer."""
        lines = self._lines
        self._lines = []
        return lines


def parse_header_cells(header_line: str) -> list[str]:
    """Split a header row on pipes, trim cells, drop empty edge cells."""
    cells = [cell.strip() for cell in header_line.split("|")]
    while cells and not cells[0]:
        cells.pop(0)
    while cells and not cells[-1]:
        cells.pop()
    return cells


def estimate_rows_per_slide(
    rows: list[str], max_lines: int, table_char_budget: int
) -> int:
    """Estimate how many content rows fit on one slide.

    The line budget minus the header and separator, capped by
    ``table_char_budget / average_row_length``. Never less than one.
    """
    line_capacity = max(1, max_lines - HEADER_LINES)
    if not rows:
        return line_capacity

    avg_chars = sum(len(row) for row in rows) / len(rows)
    if avg_chars < 1:
        return line_capacity

    char_capacity = max(1, math.floor(table_char_budget / avg_chars))
    return min(line_capacity, char_capacity)


def split_table_into_chunks(
    headers: list[str],
    separator: str,
    rows: list[str],
    max_lines: int,
    table_char_budget: int,
) -> list[TableChunk]:
    """Split content rows into consecutive chunks that each carry the header."""
    per_slide = estimate_rows_per_slide(rows, max_lines, table_char_budget)
    if not rows:
        return [TableChunk(headers=headers, separator=separator)]

    return [
        TableChunk(headers=headers, separator=separator, rows=rows[i:i + per_slide])
        for i in range(0, len(rows), per_slide)
    ]


def resolve_table(
    lines: list[str], options: SlideOptions, renderer: MarkdownRenderer
) -> list[str]:
    """Turn buffered table lines into one or more rendered table fragments.

    Returns an empty list for a malformed table (fewer than two non-blank
    lines). A table within the line budget renders whole; a longer one is
    split with its header and separator repeated on every chunk.
    """
    cleaned = [line for line in lines if line.strip()]
    if len(cleaned) < 2:
        logger.debug("Dropping malformed table (%d usable lines)", len(cleaned))
        return []

    if len(cleaned) <= options.max_lines_per_slide:
        return [renderer.render_table("\n".join(lines))]

    headers = parse_header_cells(cleaned[0])
    separator = cleaned[1]
    content_rows = cleaned[2:]

    chunks = split_table_into_chunks(
        headers,
        separator,
        content_rows,
        options.max_lines_per_slide,
        options.table_char_budget,
    )
    logger.debug(
        "Split table of %d rows into %d chunks", len(content_rows), len(chunks)
    )
    return [renderer.render_table(chunk.to_markdown()) for chunk in chunks]
