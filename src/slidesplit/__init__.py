"""Markdown-to-slides segmentation engine."""

from __future__ import annotations

from pathlib import Path


def read_document(path: str | Path) -> str:
    """Read a markdown document from disk.

    Args:
        path: Path to the markdown file.

    Returns:
        The document text with line endings normalised to ``\\n``.

    Raises:
        FileNotFoundError: If the markdown file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Markdown file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return text.replace("\r\n", "\n").replace("\r", "\n")
