"""Tests for the slide deck QA suite."""

from __future__ import annotations

from slidesplit.config import SlideOptions
from slidesplit.qa import (
    ValidationIssue,
    ValidationReport,
    check_budget_overflow,
    check_empty_fragments,
    check_empty_sections,
    check_image_terminates_section,
    check_title_solitude,
    run_validation_suite,
)
from slidesplit.segmentation import Fragment, FragmentKind, Section, build_sections


def _content(text: str = "words") -> Fragment:
    return Fragment(FragmentKind.CONTENT, text, f"<p>{text}</p>\n")


# ── Individual Checks ─────────────────────────────────────────────


class TestTitleSolitude:
    """Title slides hold only the title."""

    def test_solo_title_passes(self):
        sections = [Section([Fragment(FragmentKind.TITLE, "T", "T")])]
        assert check_title_solitude(sections) == []

    def test_shared_title_fails(self):
        sections = [Section([Fragment(FragmentKind.TITLE, "T", "T"), _content()])]
        issues = check_title_solitude(sections)
        assert len(issues) == 1
        assert issues[0].severity == "error"
        assert issues[0].section_index == 0


class TestEmptySections:
    def test_flags_empty_section(self):
        issues = check_empty_sections([Section([_content()]), Section([])])
        assert [i.section_index for i in issues] == [1]


class TestImageTerminatesSection:
    """Images must end their slide."""

    def test_trailing_image_passes(self):
        sections = [Section([_content(), Fragment(FragmentKind.IMAGE, "a.png")])]
        assert check_image_terminates_section(sections) == []

    def test_image_followed_by_content_fails(self):
        sections = [Section([Fragment(FragmentKind.IMAGE, "a.png"), _content()])]
        issues = check_image_terminates_section(sections)
        assert len(issues) == 1
        assert issues[0].check == "image_terminates_section"


class TestBudgetOverflow:
    """Soft budget overflow warnings."""

    def test_within_budget(self):
        assert check_budget_overflow([Section([_content()])], SlideOptions()) == []

    def test_fragment_overflow(self):
        opts = SlideOptions(max_lines_per_slide=2)
        sections = [Section([_content(), _content(), _content()])]
        issues = check_budget_overflow(sections, opts)
        assert len(issues) == 1
        assert issues[0].severity == "warning"
        assert issues[0].details["fragments"] == {"actual": 3, "limit": 2}

    def test_oversized_single_fragment(self):
        opts = SlideOptions(max_chars_per_slide=10, max_words_per_slide=1)
        issues = check_budget_overflow([Section([_content("far too many words here")])], opts)
        assert set(issues[0].details) == {"chars", "words"}


class TestEmptyFragments:
    def test_flags_blank_text(self):
        issues = check_empty_fragments([Section([_content("  ")])])
        assert len(issues) == 1
        assert issues[0].severity == "warning"


# ── Suite ─────────────────────────────────────────────────────────


class TestRunValidationSuite:
    """Full suite over built decks."""

    def test_built_deck_passes(self, sample_deck_text, options):
        sections = build_sections(sample_deck_text, options)
        report = run_validation_suite(sections, options)
        assert isinstance(report, ValidationReport)
        assert report.passed is True
        assert report.error_count == 0
        assert report.total_sections == len(sections)

    def test_all_checks_run(self, options):
        report = run_validation_suite([], options)
        assert report.checks_run == [
            "title_solitude",
            "empty_sections",
            "image_terminates_section",
            "budget_overflow",
            "empty_fragments",
        ]

    def test_errors_fail_report(self, options):
        sections = [Section([Fragment(FragmentKind.TITLE, "T", "T"), _content()])]
        report = run_validation_suite(sections, options)
        assert report.passed is False
        assert report.error_count == 1

    def test_warnings_do_not_fail_report(self):
        opts = SlideOptions(max_lines_per_slide=1)
        report = run_validation_suite([Section([_content(), _content()])], opts)
        assert report.passed is True
        assert report.warning_count == 1

    def test_issue_defaults(self):
        issue = ValidationIssue(check="c", severity="warning", section_index=0, message="m")
        assert issue.details == {}
