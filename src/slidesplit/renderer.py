"""Markdown renderer and HTML sanitizer used by the segmentation engine.

The engine only decides where slides break. Turning a fragment of markdown
into HTML, and cleaning the assembled deck, is delegated to the renderer
defined here.
"""

from __future__ import annotations

import logging

import nh3
from bs4 import BeautifulSoup
from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

logger = logging.getLogger(__name__)

TASK_LIST_OPEN = '<ul class="task-list">\n'
TASK_LIST_CLOSE = "</ul>"


def _build_markdown_parser() -> MarkdownIt:
    md = MarkdownIt(
        "commonmark",
        {"html": True, "linkify": True, "typographer": True},
    )
    md.enable(["table", "strikethrough", "linkify", "replacements", "smartquotes"])
    md.use(footnote_plugin)
    md.use(tasklists_plugin)
    return md


class MarkdownRenderer:
    """Renders markdown fragments to HTML.

    The underlying parser is configured once and never mutated afterwards,
    so a single instance can be shared between conversions.
    """

    def __init__(self, md: MarkdownIt | None = None) -> None:
        self._md = md if md is not None else _build_markdown_parser()

    def render_block(self, text: str) -> str:
        """Full block render, paragraphs and all."""
        return self._md.render(text)

    def render_inline(self, text: str) -> str:
        """Inline-only render with no wrapping block element."""
        return self._md.renderInline(text)

    def render_task_item(self, checked: bool, text: str) -> str:
        state = "checked disabled" if checked else "disabled"
        return (
            f'<li class="task-list-item"><input type="checkbox" {state}>'
            f"{self.render_inline(text)}</li>\n"
        )

    def list_open(self) -> str:
        return TASK_LIST_OPEN

    def list_close(self) -> str:
        return TASK_LIST_CLOSE

    def render_table(self, markdown: str) -> str:
        """Render a pipe table and wrap it for slide layout."""
        return f'<div class="table-wrapper">{self._md.render(markdown)}</div>'

    def render_image(self, target: str) -> str:
        return f'<img src="{escapeHtml(target)}" class="slide-image"/>'

    def sanitize(self, html: str) -> str:
        return sanitize_html(html)


_DEFAULT_RENDERER: MarkdownRenderer | None = None


def get_default_renderer() -> MarkdownRenderer:
    global _DEFAULT_RENDERER
    if _DEFAULT_RENDERER is None:
        _DEFAULT_RENDERER = MarkdownRenderer()
    return _DEFAULT_RENDERER


# ── Sanitizer ─────────────────────────────────────────────────────

# Removed together with everything inside them.
_DROP_WITH_CONTENT = {
    "script", "style", "iframe", "frame", "frameset", "object", "embed",
    "applet", "noscript", "template", "math", "svg", "title",
    "textarea", "select", "button",
}

_ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "code", "dd", "del", "div", "dl",
    "dt", "em", "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6",
    "hr", "i", "img", "input", "ins", "kbd", "li", "mark", "ol", "p", "pre",
    "s", "section", "small", "span", "strong", "sub", "sup", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "u", "ul",
}

_ALLOWED_ATTRS = {
    "*": {
        "align", "alt", "checked", "class", "colspan", "disabled", "height",
        "href", "id", "rowspan", "src", "start", "title", "width",
    },
}

# ``type`` is only kept on inputs, and only as a checkbox.
_ALLOWED_ATTR_VALUES = {"input": {"type": {"checkbox"}}}

_URL_SCHEMES = {"http", "https", "mailto", "tel", "data"}
_URL_ATTRS = frozenset({"href", "src"})


def _is_safe_url(value: str) -> bool:
    compact = "".join(ch for ch in value if ch > " ").lower()
    return not compact.startswith("data:") or compact.startswith("data:image/")


def _filter_attribute(tag: str, attr: str, value: str) -> str | None:
    if attr in _URL_ATTRS and not _is_safe_url(value):
        logger.debug("Dropping unsafe %s on <%s>", attr, tag)
        return None
    return value


def sanitize_html(html: str) -> str:
    """Strip unsafe markup from assembled slide HTML.

    Cleaning is done by nh3, which parses with the HTML5 rules a browser
    uses. Script-like elements are removed with their content, unknown tags
    are unwrapped, event handlers and unknown attributes are dropped, and
    only http(s), mailto, tel and image data URLs survive. Inputs that are
    not checkboxes are removed afterwards. Images, tables, task list
    checkboxes and page-break markers pass through.
    """
    cleaned = nh3.clean(
        html,
        tags=_ALLOWED_TAGS,
        clean_content_tags=_DROP_WITH_CONTENT,
        attributes=_ALLOWED_ATTRS,
        attribute_filter=_filter_attribute,
        strip_comments=True,
        link_rel=None,
        generic_attribute_prefixes={"data-", "aria-"},
        tag_attribute_values=_ALLOWED_ATTR_VALUES,
        url_schemes=_URL_SCHEMES,
    )

    if "<input" not in cleaned:
        return cleaned

    soup = BeautifulSoup(cleaned, "html.parser")
    for tag in soup.find_all("input"):
        if str(tag.get("type", "")).lower() != "checkbox":
            tag.decompose()
    return str(soup)
