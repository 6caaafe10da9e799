"""Slide segmentation engine — packs classified lines into sections under capacity budgets."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator

from .config import SlideOptions, ensure_valid
from .line_classifier import ClassifiedLine, LineKind, classify_line
from .renderer import MarkdownRenderer, get_default_renderer
from .tables import TableBuffer, resolve_table

logger = logging.getLogger(__name__)


class FragmentKind(str, Enum):
    TITLE = "title"
    HEADING = "heading"
    CONTENT = "content"
    IMAGE = "image"
    TABLE = "table"


@dataclass
class Fragment:
    """A sized unit of slide content.

    ``text`` is what the capacity budgets count: the source text for
    titles, headings, content and task lists, the target for images, and
    the rendered HTML for tables. ``markup`` is the rendered form (inline
    HTML for titles and headings).
    """
    kind: FragmentKind
    text: str
    markup: str = ""


@dataclass
class Section:
    """An ordered run of fragments that renders as one slide."""
    fragments: list[Fragment] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.fragments)

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self.fragments)

    def __getitem__(self, idx: int) -> Fragment:
        return self.fragments[idx]

    @property
    def kinds(self) -> list[FragmentKind]:
        return [f.kind for f in self.fragments]


# ── Section Packer ────────────────────────────────────────────────


def count_words(text: str) -> int:
    """Count whitespace-delimited words, ignoring empty tokens."""
    return len(text.split())


def section_totals(fragments: list[Fragment]) -> tuple[int, int, int]:
    """Return (chars, words, fragment_count) over a run of fragments."""
    chars = sum(len(f.text) for f in fragments)
    words = sum(count_words(f.text) for f in fragments)
    return chars, words, len(fragments)


def should_create_new_section(
    candidate: str, current: list[Fragment], options: SlideOptions
) -> bool:
    """Decide whether ``candidate`` would push the current section over budget.

    Totals include the candidate. The line budget is compared against the
    fragment count plus one, not against rendered lines.
    """
    chars, words, count = section_totals(current)
    total_chars = chars + len(candidate)
    total_words = words + count_words(candidate)
    total_lines = count + 1

    return (
        total_chars > options.max_chars_per_slide
        or total_words > options.max_words_per_slide
        or total_lines > options.max_lines_per_slide
    )


# ── Section Sequence Builder ──────────────────────────────────────


class BuilderState(str, Enum):
    IDLE = "idle"
    BUFFERING_TABLE = "buffering_table"


class SectionBuilder:
    """Single-pass state machine that turns markdown lines into sections.

    Owns the accumulating section, the table buffer and the open task
    list for one conversion. Feed lines in order with ``feed`` and call
    ``finish`` once at the end.
    """

    def __init__(
        self,
        options: SlideOptions | None = None,
        renderer: MarkdownRenderer | None = None,
    ) -> None:
        self.options = options if options is not None else SlideOptions()
        ensure_valid(self.options)
        self.renderer = renderer if renderer is not None else get_default_renderer()
        self.sections: list[Section] = []
        self._current: list[Fragment] = []
        self._table = TableBuffer()
        self._open_list: Fragment | None = None

    @property
    def state(self) -> BuilderState:
        return BuilderState.BUFFERING_TABLE if self._table else BuilderState.IDLE

    @property
    def list_open(self) -> bool:
        return self._open_list is not None

    @property
    def current(self) -> list[Fragment]:
        return list(self._current)

    def feed(self, raw_line: str) -> None:
        """Process one input line."""
        item = classify_line(raw_line)
        kind = item.kind

        if kind is LineKind.PAGE_BREAK:
            self._flush_table()
            self._close_section()
            return

        if kind is LineKind.TITLE:
            self._flush_table()
            self._close_section()
            title = Fragment(
                FragmentKind.TITLE, item.payload, self.renderer.render_inline(item.payload)
            )
            self.sections.append(Section([title]))
            return

        if kind is LineKind.HEADING:
            self._flush_table()
            self._close_section()
            self._current = [
                Fragment(
                    FragmentKind.HEADING,
                    item.payload,
                    self.renderer.render_inline(item.payload),
                )
            ]
            return

        if kind is LineKind.TABLE_ROW:
            self._table.append(item.line)
            return

        if self._table:
            self._flush_table()

        if kind is LineKind.IMAGE:
            self._add_image(item)
            return

        if kind is LineKind.BLANK:
            return

        if self._over_budget(item.line):
            self._close_section()

        if kind is LineKind.TASK_ITEM:
            self._add_task_item(item)
        else:
            self._add_content(item)

    def finish(self) -> list[Section]:
        """Flush pending table and section state and return every section."""
        self._flush_table()
        self._close_section()
        return self.sections

    # ── internals ──

    def _over_budget(self, candidate: str) -> bool:
        return should_create_new_section(candidate, self._current, self.options)

    def _close_list(self) -> None:
        if self._open_list is not None:
            self._open_list.markup += self.renderer.list_close()
            self._open_list = None

    def _close_section(self) -> None:
        self._close_list()
        if self._current:
            self.sections.append(Section(self._current))
            logger.debug(
                "Closed section %d with %d fragments",
                len(self.sections), len(self._current),
            )
            self._current = []

    def _append(self, fragment: Fragment) -> None:
        self._close_list()
        self._current.append(fragment)

    def _flush_table(self) -> None:
        if not self._table:
            return
        chunks = resolve_table(self._table.drain(), self.options, self.renderer)
        for idx, html in enumerate(chunks):
            # chunks after the first always start a new slide
            if idx > 0 or self._over_budget(html):
                self._close_section()
            self._append(Fragment(FragmentKind.TABLE, html, html))

    def _add_image(self, item: ClassifiedLine) -> None:
        image = Fragment(FragmentKind.IMAGE, item.payload)
        if f"![{item.label}]({item.payload})" != item.line:
            logger.debug("Dropping text around image reference: %r", item.line)

        if not self._current:
            self.sections.append(Section([image]))
        else:
            if self._over_budget(item.line):
                self._close_section()
            self._append(image)
        # every image ends its slide
        self._close_section()

    def _add_task_item(self, item: ClassifiedLine) -> None:
        if self._open_list is None:
            fragment = Fragment(FragmentKind.CONTENT, item.line, self.renderer.list_open())
            self._append(fragment)
            self._open_list = fragment
        else:
            self._open_list.text += "\n" + item.line
        self._open_list.markup += self.renderer.render_task_item(item.checked, item.payload)

    def _add_content(self, item: ClassifiedLine) -> None:
        self._append(
            Fragment(FragmentKind.CONTENT, item.line, self.renderer.render_block(item.line))
        )


def build_sections(
    markdown: str,
    options: SlideOptions | None = None,
    renderer: MarkdownRenderer | None = None,
) -> list[Section]:
    """Segment a markdown document into slide sections.

    Raises:
        ValueError: If the options fail validation.
    """
    builder = SectionBuilder(options, renderer)
    lines = markdown.split("\n")
    for line in lines:
        builder.feed(line)
    sections = builder.finish()
    logger.debug("Built %d sections from %d lines", len(sections), len(lines))
    return sections


# ── Persistence ───────────────────────────────────────────────────


def save_sections(sections: list[Section], output_path: Path) -> None:
    """Write sections to a JSONL file (one JSON object per section).

    Each line contains: index, fragments (kind, text, markup).
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        for idx, section in enumerate(sections):
            record = {
                "index": idx,
                "fragments": [
                    {"kind": frag.kind.value, "text": frag.text, "markup": frag.markup}
                    for frag in section
                ],
            }
            f.write(json.dumps(record, ensure_ascii=False) + "\n")


def load_sections(input_path: Path) -> list[Section]:
    """Read sections from a JSONL file written by save_sections."""
    sections: list[Section] = []
    with open(input_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            sections.append(
                Section(
                    [
                        Fragment(
                            kind=FragmentKind(frag["kind"]),
                            text=frag["text"],
                            markup=frag.get("markup", ""),
                        )
                        for frag in record["fragments"]
                    ]
                )
            )
    return sections
