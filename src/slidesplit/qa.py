"""Slide deck validation and QA suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .config import SlideOptions
from .segmentation import FragmentKind, Section, section_totals


@dataclass
class ValidationIssue:
    """A single validation issue found during QA."""
    check: str
    severity: str  # "error" | "warning"
    section_index: int
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationReport:
    """Complete validation report for a built deck."""
    total_sections: int
    issues: list[ValidationIssue]
    checks_run: list[str]
    passed: bool

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == "warning")


def check_title_solitude(sections: list[Section]) -> list[ValidationIssue]:
    """A section holding a title must hold nothing else."""
    issues: list[ValidationIssue] = []
    for idx, section in enumerate(sections):
        if FragmentKind.TITLE in section.kinds and len(section) != 1:
            issues.append(
                ValidationIssue(
                    check="title_solitude",
                    severity="error",
                    section_index=idx,
                    message=f"Title shares its slide with {len(section) - 1} other fragments",
                )
            )
    return issues


def check_empty_sections(sections: list[Section]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for idx, section in enumerate(sections):
        if len(section) == 0:
            issues.append(
                ValidationIssue(
                    check="empty_sections",
                    severity="error",
                    section_index=idx,
                    message="Section has no fragments",
                )
            )
    return issues


def check_image_terminates_section(sections: list[Section]) -> list[ValidationIssue]:
    """Every image must be the last fragment on its slide."""
    issues: list[ValidationIssue] = []
    for idx, section in enumerate(sections):
        kinds = section.kinds
        for pos, kind in enumerate(kinds[:-1]):
            if kind is FragmentKind.IMAGE:
                issues.append(
                    ValidationIssue(
                        check="image_terminates_section",
                        severity="error",
                        section_index=idx,
                        message=f"Image at position {pos} is followed by more content",
                    )
                )
    return issues


def check_budget_overflow(
    sections: list[Section], options: SlideOptions
) -> list[ValidationIssue]:
    """Flag sections over a soft budget.

    Hard boundaries and single oversized fragments legitimately overflow,
    so these are warnings.
    """
    issues: list[ValidationIssue] = []
    for idx, section in enumerate(sections):
        chars, words, count = section_totals(section.fragments)
        over: dict[str, tuple[int, int]] = {}
        if chars > options.max_chars_per_slide:
            over["chars"] = (chars, options.max_chars_per_slide)
        if words > options.max_words_per_slide:
            over["words"] = (words, options.max_words_per_slide)
        if count > options.max_lines_per_slide:
            over["fragments"] = (count, options.max_lines_per_slide)
        if over:
            summary = ", ".join(f"{k} {v[0]}>{v[1]}" for k, v in over.items())
            issues.append(
                ValidationIssue(
                    check="budget_overflow",
                    severity="warning",
                    section_index=idx,
                    message=f"Section exceeds budget: {summary}",
                    details={k: {"actual": v[0], "limit": v[1]} for k, v in over.items()},
                )
            )
    return issues


def check_empty_fragments(sections: list[Section]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for idx, section in enumerate(sections):
        for pos, fragment in enumerate(section):
            if not fragment.text.strip():
                issues.append(
                    ValidationIssue(
                        check="empty_fragments",
                        severity="warning",
                        section_index=idx,
                        message=f"{fragment.kind.value} fragment at position {pos} has no text",
                    )
                )
    return issues


def run_validation_suite(
    sections: list[Section], options: SlideOptions
) -> ValidationReport:
    """Run all validation checks and produce a report."""
    all_issues: list[ValidationIssue] = []
    checks_run: list[str] = []

    checks_run.append("title_solitude")
    all_issues.extend(check_title_solitude(sections))

    checks_run.append("empty_sections")
    all_issues.extend(check_empty_sections(sections))

    checks_run.append("image_terminates_section")
    all_issues.extend(check_image_terminates_section(sections))

    checks_run.append("budget_overflow")
    all_issues.extend(check_budget_overflow(sections, options))

    checks_run.append("empty_fragments")
    all_issues.extend(check_empty_fragments(sections))

    error_count = sum(1 for i in all_issues if i.severity == "error")

    return ValidationReport(
        total_sections=len(sections),
        issues=all_issues,
        checks_run=checks_run,
        passed=error_count == 0,
    )
