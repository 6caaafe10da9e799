"""Slidesplit CLI — command-line interface for the markdown-to-slides converter."""

from __future__ import annotations

import argparse
import logging
import statistics
import sys
from dataclasses import replace
from pathlib import Path

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="slidesplit",
        description="Split a markdown document into HTML presentation slides",
    )

    # Global logging verbosity flags
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging output",
    )
    verbosity.add_argument(
        "--quiet", "-q", action="store_true",
        help="Suppress all output except warnings and errors",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    # convert subcommand
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a markdown document to slide HTML",
    )
    convert_parser.add_argument(
        "--input", required=True, help="Path to the markdown document"
    )
    convert_parser.add_argument(
        "--output", default=None,
        help="Write HTML here instead of standard output",
    )
    convert_parser.add_argument(
        "--config", default=None, help="Path to a YAML options file"
    )
    convert_parser.add_argument(
        "--no-sanitize", action="store_true", default=False,
        help="Skip the HTML sanitizer pass",
    )

    # split subcommand
    split_parser = subparsers.add_parser(
        "split",
        help="Segment a markdown document and save its sections as JSONL",
    )
    split_parser.add_argument(
        "--input", required=True, help="Path to the markdown document"
    )
    split_parser.add_argument(
        "--output", required=True, help="Path of the sections JSONL file to write"
    )
    split_parser.add_argument(
        "--config", default=None, help="Path to a YAML options file"
    )

    # validate subcommand
    validate_parser = subparsers.add_parser(
        "validate",
        help="Segment a markdown document and run QA checks on the slides",
    )
    validate_parser.add_argument(
        "--input", required=True, help="Path to the markdown document"
    )
    validate_parser.add_argument(
        "--config", default=None, help="Path to a YAML options file"
    )
    validate_parser.add_argument(
        "--diagnostics", action="store_true", default=False,
        help="Show slide size diagnostics (count, fragments, chars, words, kinds)",
    )
    validate_parser.add_argument(
        "--summary-only", action="store_true", default=False,
        help="Only show the grouped summary, not each issue",
    )

    # validate-sections subcommand
    validate_sections_parser = subparsers.add_parser(
        "validate-sections",
        help="Run QA checks on a saved sections JSONL file",
    )
    validate_sections_parser.add_argument(
        "--sections", required=True,
        help="Path to a sections JSONL file (produced by split)",
    )
    validate_sections_parser.add_argument(
        "--config", default=None, help="Path to a YAML options file"
    )
    validate_sections_parser.add_argument(
        "--summary-only", action="store_true", default=False,
        help="Only show the grouped summary, not each issue",
    )

    return parser


def _load_options(config: str | None):
    """Load and validate options; returns None after logging errors."""
    from .config import SlideOptions, load_options, validate_options

    options = load_options(config) if config is not None else SlideOptions()
    errors = validate_options(options)
    if errors:
        for err in errors:
            logger.error("Options error: %s", err)
        return None
    return options


def _missing(path: Path, what: str) -> bool:
    if not path.exists():
        logger.error("%s not found: %s", what, path)
        return True
    return False


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert a markdown document to slide HTML.

    Returns exit code (0 = success).
    """
    input_path = Path(args.input)
    if _missing(input_path, "Markdown file"):
        return 1
    if args.config is not None and _missing(Path(args.config), "Options file"):
        return 1

    from . import read_document
    from .assembly import convert_markdown_to_html

    options = _load_options(args.config)
    if options is None:
        return 1
    if args.no_sanitize:
        options = replace(options, sanitize=False)

    markdown = read_document(input_path)
    html = convert_markdown_to_html(markdown, options)

    if args.output is None:
        sys.stdout.write(html + "\n")
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        logger.info("Wrote %d characters of HTML to %s", len(html), output_path)

    return 0


def cmd_split(args: argparse.Namespace) -> int:
    """Segment a document and write its sections as JSONL.

    Returns exit code (0 = success).
    """
    input_path = Path(args.input)
    if _missing(input_path, "Markdown file"):
        return 1
    if args.config is not None and _missing(Path(args.config), "Options file"):
        return 1

    from . import read_document
    from .segmentation import build_sections, save_sections

    options = _load_options(args.config)
    if options is None:
        return 1

    sections = build_sections(read_document(input_path), options)
    output_path = Path(args.output)
    save_sections(sections, output_path)
    logger.info("Wrote %d sections to %s", len(sections), output_path)
    return 0


def _print_section_diagnostics(sections: list) -> list[tuple[int, int, int, int]]:
    """Compute and log slide size diagnostics.

    Reports the slide count, the distribution of fragments, characters and
    words per slide, and the fragment kind distribution.

    Args:
        sections: Ordered list of Section instances.

    Returns:
        List of (section_index, chars, words, fragments) tuples, one per slide.
    """
    from .segmentation import section_totals

    logger.info("Slide diagnostics:")
    logger.info("  Total slides: %d", len(sections))

    stats: list[tuple[int, int, int, int]] = []
    for idx, section in enumerate(sections):
        chars, words, count = section_totals(section.fragments)
        stats.append((idx, chars, words, count))

    if stats:
        for label, column in (("Fragments", 3), ("Characters", 1), ("Words", 2)):
            values = [row[column] for row in stats]
            logger.info(
                "  %s per slide: min=%d, median=%d, avg=%d, max=%d",
                label, min(values), int(statistics.median(values)),
                int(sum(values) / len(values)), max(values),
            )
    else:
        logger.info("  Slides: (no slides produced)")

    kind_counts: dict[str, int] = {}
    for section in sections:
        for fragment in section:
            kind_counts[fragment.kind.value] = kind_counts.get(fragment.kind.value, 0) + 1

    kind_parts = ", ".join(f"{k}={v}" for k, v in sorted(kind_counts.items()))
    logger.info("  Fragment kinds: %s", kind_parts if kind_parts else "(none)")

    return stats


def format_validation_summary(report) -> str:
    """Group a validation report into per-check error/warning counts."""
    per_check: dict[str, list[int]] = {name: [0, 0] for name in report.checks_run}
    for issue in report.issues:
        counts = per_check.setdefault(issue.check, [0, 0])
        if issue.severity == "error":
            counts[0] += 1
        else:
            counts[1] += 1

    lines = ["=== Validation Summary ==="]
    for name in sorted(per_check):
        errors, warnings = per_check[name]
        lines.append(f"{name}: {errors} errors, {warnings} warnings")
    lines.append(f"Total: {report.error_count} errors, {report.warning_count} warnings")
    lines.append(f"Result: {'PASSED' if report.passed else 'FAILED'}")
    return "\n".join(lines)


def _log_validation_report(report, summary_only: bool = False) -> None:
    logger.info(
        "Validation: %d checks run on %d slides",
        len(report.checks_run), report.total_sections,
    )
    if report.issues and not summary_only:
        logger.info("Issues:")
        for issue in report.issues:
            logger.info(
                "  [%s] %s: %s (slide: %d)",
                issue.severity, issue.check, issue.message, issue.section_index,
            )
    for line in format_validation_summary(report).split("\n"):
        logger.info("%s", line)


def cmd_validate(args: argparse.Namespace) -> int:
    """Segment a document and run the QA suite over its slides.

    Returns exit code (0 = checks passed).
    """
    input_path = Path(args.input)
    if _missing(input_path, "Markdown file"):
        return 1
    if args.config is not None and _missing(Path(args.config), "Options file"):
        return 1

    from . import read_document
    from .qa import run_validation_suite
    from .segmentation import build_sections

    options = _load_options(args.config)
    if options is None:
        return 1

    sections = build_sections(read_document(input_path), options)
    logger.info("Built %d slides from %s", len(sections), input_path)

    if getattr(args, "diagnostics", False):
        _print_section_diagnostics(sections)

    report = run_validation_suite(sections, options)
    _log_validation_report(report, summary_only=getattr(args, "summary_only", False))
    return 0 if report.passed else 1


def cmd_validate_sections(args: argparse.Namespace) -> int:
    """Run QA checks on a saved sections JSONL file.

    Returns exit code (0 = checks passed, 1 = errors found or input error).
    """
    sections_path = Path(args.sections)
    if _missing(sections_path, "Sections file"):
        return 1
    if args.config is not None and _missing(Path(args.config), "Options file"):
        return 1

    from .qa import run_validation_suite
    from .segmentation import load_sections

    options = _load_options(args.config)
    if options is None:
        return 1

    sections = load_sections(sections_path)
    logger.info("Loaded %d sections from %s", len(sections), sections_path)

    report = run_validation_suite(sections, options)
    _log_validation_report(report, summary_only=getattr(args, "summary_only", False))
    return 0 if report.passed else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # Return the exit code from argparse (0 for --help, 2 for errors)
        return e.code if isinstance(e.code, int) else 1

    if getattr(args, "verbose", False):
        log_level = logging.DEBUG
    elif getattr(args, "quiet", False):
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    command_handlers = {
        "convert": cmd_convert,
        "split": cmd_split,
        "validate": cmd_validate,
        "validate-sections": cmd_validate_sections,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except Exception as e:
        logger.error("%s", e)
        return 1
