"""Final assembly — renders sections to HTML and joins them into one slide deck."""

from __future__ import annotations

import logging
import re

from .config import SlideOptions, ensure_valid
from .renderer import MarkdownRenderer, get_default_renderer
from .segmentation import Fragment, FragmentKind, Section, build_sections

logger = logging.getLogger(__name__)

PAGE_BREAK_HTML = '\n<div data-type="page-break" data-page-break="true"></div>\n'

_NEWLINE_RUN_RE = re.compile(r"\n+")
_NEWLINES_BETWEEN_TAGS_RE = re.compile(r">\n+<")


def render_fragment(fragment: Fragment, renderer: MarkdownRenderer) -> str:
    """Render one fragment to its final HTML."""
    if fragment.kind is FragmentKind.TITLE:
        return f"<h1>{fragment.markup}</h1>"
    if fragment.kind is FragmentKind.HEADING:
        return f"<h2>{fragment.markup}</h2>"
    if fragment.kind is FragmentKind.IMAGE:
        return renderer.render_image(fragment.text)
    # tables and content are rendered when they are built
    return fragment.markup


def render_section(section: Section, renderer: MarkdownRenderer) -> str:
    parts = [render_fragment(f, renderer) for f in section]
    return "\n".join(p for p in parts if p)


def join_sections(rendered: list[str], preserve_newlines: bool = True) -> str:
    """Join rendered sections with page-break markers."""
    html = PAGE_BREAK_HTML.join(r for r in rendered if r)
    if preserve_newlines:
        html = _NEWLINE_RUN_RE.sub("\n", html)
        html = _NEWLINES_BETWEEN_TAGS_RE.sub(">\n<", html)
    return html


def assemble_html(
    sections: list[Section],
    options: SlideOptions,
    renderer: MarkdownRenderer,
) -> str:
    """Render built sections into the final deck HTML."""
    rendered = [render_section(s, renderer) for s in sections]
    html = join_sections(rendered, options.preserve_newlines)
    if options.sanitize:
        html = renderer.sanitize(html)
    return html


def convert_markdown_to_html(
    markdown: str,
    options: SlideOptions | None = None,
    renderer: MarkdownRenderer | None = None,
) -> str:
    """Convert a markdown document into slide HTML separated by page breaks.

    Args:
        markdown: The source document.
        options: Budgets and output switches; defaults when omitted.
        renderer: Markdown renderer; the shared default when omitted.

    Returns:
        One HTML string, slides joined by page-break markers.

    Raises:
        ValueError: If the options fail validation.
    """
    options = options if options is not None else SlideOptions()
    ensure_valid(options)
    renderer = renderer if renderer is not None else get_default_renderer()

    sections = build_sections(markdown, options, renderer)
    html = assemble_html(sections, options, renderer)
    logger.debug("Assembled %d slides (%d chars)", len(sections), len(html))
    return html
