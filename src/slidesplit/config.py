"""Slide options — defaults, YAML deck profiles, and budget validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Numerator of the rows-per-slide estimate used when splitting tables:
# rows = table_char_budget / average_row_length.
DEFAULT_TABLE_CHAR_BUDGET: int = 1000


@dataclass(frozen=True)
class SlideOptions:
    """Conversion options for one markdown-to-slides call.

    ``max_lines_per_slide`` counts fragments, not rendered lines: one
    fragment occupies one line slot regardless of how it renders. It is
    also the line budget for table chunking.
    """
    preserve_newlines: bool = True
    sanitize: bool = True
    max_chars_per_slide: int = 1000
    max_words_per_slide: int = 250
    max_lines_per_slide: int = 7
    table_char_budget: int = DEFAULT_TABLE_CHAR_BUDGET


_BUDGET_FIELDS = (
    "max_chars_per_slide",
    "max_words_per_slide",
    "max_lines_per_slide",
    "table_char_budget",
)


def options_from_mapping(data: dict[str, Any]) -> SlideOptions:
    """Build SlideOptions from a mapping, ignoring unknown keys with a warning."""
    known = {f.name for f in fields(SlideOptions)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown slide option: %s", key)
            continue
        kwargs[key] = value
    return SlideOptions(**kwargs)


def load_options(path: str | Path) -> SlideOptions:
    """Load slide options from a YAML deck profile.

    Args:
        path: Path to the YAML file.

    Returns:
        A SlideOptions instance; keys absent from the file keep their defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the YAML document is not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Options file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return SlideOptions()
    if not isinstance(data, dict):
        raise ValueError("Options YAML must be a mapping at the top level.")

    return options_from_mapping(data)


def validate_options(options: SlideOptions) -> list[str]:
    """Validate slide options.

    Returns a list of validation error messages. Empty list means valid.
    """
    errors: list[str] = []

    for name in _BUDGET_FIELDS:
        value = getattr(options, name)
        # bool is an int subclass; True is not a budget
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{name} must be an integer, got {value!r}.")
        elif value <= 0:
            errors.append(f"{name} must be positive, got {value}.")

    for name in ("preserve_newlines", "sanitize"):
        value = getattr(options, name)
        if not isinstance(value, bool):
            errors.append(f"{name} must be a boolean, got {value!r}.")

    return errors


def ensure_valid(options: SlideOptions) -> None:
    """Raise ValueError listing every problem if the options are invalid."""
    errors = validate_options(options)
    if errors:
        raise ValueError("Invalid slide options: " + " ".join(errors))
