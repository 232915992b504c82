"""Tests for the validation engine."""

import pytest

from deckcheck import check_deck
from deckcheck.errors import EmptyRuleSetError, PackageError
from deckcheck.qa.validator import (
    RuleValidator,
    ValidationReport,
    _format_pt,
    _matches_any,
    validate,
    validate_presentation,
)
from deckcheck.rules import compile_rules
from deckcheck.schema.models import (
    DesignRule,
    ImageRef,
    ParsedPresentation,
    RuleParameters,
    RuleType,
    SlideContent,
    TextRun,
)

from ooxml_builders import deck, paragraph, picture, run, slide, text_shape


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _rule(rule_type, description="rule", rule_id="rule-1", **params):
    return DesignRule(id=rule_id, description=description, type=rule_type,
                      parameters=RuleParameters(**params))


def _deck(*slides):
    return ParsedPresentation(slides=list(slides))


@pytest.fixture
def styled_slide():
    """One slide with a mix of formatted and unformatted runs."""
    return SlideContent(slide_number=1, texts=[
        TextRun("Black heading", font_size=40, font_family="Arial", color="Black"),
        TextRun("Red body text", font_size=24, font_family="Comic Sans MS", color="FF0000"),
        TextRun("Unstyled"),
    ])


@pytest.fixture
def image_deck():
    return _deck(
        SlideContent(slide_number=1, images=[ImageRef("Logo"), ImageRef("Photo")]),
        SlideContent(slide_number=2),
        SlideContent(slide_number=3, images=[ImageRef("Chart")]),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestHelpers:
    def test_format_pt(self):
        assert _format_pt(24.0) == "24"
        assert _format_pt(10.5) == "10.5"
        assert _format_pt(36) == "36"

    def test_matches_any_is_case_insensitive_substring(self):
        assert _matches_any("Black", ("black",))
        assert _matches_any("BLACK-ish", ("black",))
        assert not _matches_any("FF0000", ("black", "red"))


# ---------------------------------------------------------------------------
# Color
# ---------------------------------------------------------------------------

class TestColorRule:
    def test_non_matching_run_flagged(self, styled_slide):
        rule = _rule(RuleType.COLOR, allowed_values=("black", "red"))
        (v,) = validate(_deck(styled_slide), [rule])
        assert v.slide == 1
        assert v.severity == "error"
        assert v.rule is rule
        assert "found FF0000" in v.description
        assert "only black, red are allowed" in v.description
        assert v.elements == ['Text "Red body text..." with color FF0000']

    def test_runs_without_color_ignored(self):
        slide = SlideContent(slide_number=1, texts=[TextRun("plain")])
        assert validate(_deck(slide), [_rule(RuleType.COLOR, allowed_values=("black",))]) == []

    def test_empty_allow_list_is_noop(self, styled_slide):
        assert validate(_deck(styled_slide), [_rule(RuleType.COLOR)]) == []

    def test_preview_truncated_to_fifty_chars(self):
        slide = SlideContent(slide_number=1, texts=[TextRun("x" * 80, color="00FF00")])
        (v,) = validate(_deck(slide), [_rule(RuleType.COLOR, allowed_values=("black",))])
        assert v.elements == [f'Text "{"x" * 50}..." with color 00FF00']


# ---------------------------------------------------------------------------
# Font size
# ---------------------------------------------------------------------------

class TestFontSizeRule:
    def test_minimum_from_compiled_rule(self):
        rules = compile_rules("Font size minimum is 36")
        slide = SlideContent(slide_number=1, texts=[TextRun("Body", font_size=24)])
        (v,) = validate(_deck(slide), rules)
        assert v.severity == "error"
        assert "24pt" in v.description
        assert "36pt" in v.description
        assert v.elements == ['Text "Body...": 24pt']

    def test_maximum(self, styled_slide):
        (v,) = validate(_deck(styled_slide), [_rule(RuleType.FONT_SIZE, max_value=30)])
        assert v.description == (
            "Font size exceeds maximum requirement (found 40pt, maximum is 30pt)"
        )

    def test_one_violation_per_violated_bound(self):
        slide = SlideContent(slide_number=1, texts=[TextRun("odd", font_size=24)])
        rule = _rule(RuleType.FONT_SIZE, min_value=36, max_value=20)
        violations = validate(_deck(slide), [rule])
        assert len(violations) == 2
        assert "below minimum" in violations[0].description
        assert "exceeds maximum" in violations[1].description

    def test_within_bounds(self, styled_slide):
        rule = _rule(RuleType.FONT_SIZE, min_value=20, max_value=40)
        assert validate(_deck(styled_slide), [rule]) == []

    def test_undefined_bounds_never_fire(self, styled_slide):
        assert validate(_deck(styled_slide), [_rule(RuleType.FONT_SIZE)]) == []

    def test_zero_minimum_is_a_bound(self):
        slide = SlideContent(slide_number=1, texts=[TextRun("tiny", font_size=0.5)])
        assert validate(_deck(slide), [_rule(RuleType.FONT_SIZE, min_value=0)]) == []
        assert len(validate(_deck(slide), [_rule(RuleType.FONT_SIZE, min_value=1)])) == 1

    def test_fractional_size_reported(self):
        slide = SlideContent(slide_number=1, texts=[TextRun("fine print", font_size=10.5)])
        (v,) = validate(_deck(slide), [_rule(RuleType.FONT_SIZE, min_value=12)])
        assert "found 10.5pt" in v.description


# ---------------------------------------------------------------------------
# Font family
# ---------------------------------------------------------------------------

class TestFontFamilyRule:
    def test_non_matching_family(self, styled_slide):
        rule = _rule(RuleType.FONT_FAMILY, allowed_values=("arial",))
        (v,) = validate(_deck(styled_slide), [rule])
        assert "found Comic Sans MS" in v.description
        assert v.elements == ["Text with font Comic Sans MS"]

    def test_empty_allow_list_is_noop(self, styled_slide):
        assert validate(_deck(styled_slide), [_rule(RuleType.FONT_FAMILY)]) == []


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

class TestImageRule:
    def test_title_scope_from_compiled_rule(self):
        rules = compile_rules("No images allowed on title slides")
        presentation = _deck(
            SlideContent(slide_number=1, images=[ImageRef("Logo"), ImageRef("Photo")]),
            SlideContent(slide_number=2),
        )
        (v,) = validate(presentation, rules)
        assert v.slide == 1
        assert v.elements == ["Image: Logo", "Image: Photo"]
        assert "no images allowed on title slides" in v.description

    def test_unscoped_applies_everywhere(self, image_deck):
        rule = _rule(RuleType.IMAGE, forbidden=("all",))
        violations = validate(image_deck, [rule])
        assert [v.slide for v in violations] == [1, 3]

    def test_all_scope(self, image_deck):
        rule = _rule(RuleType.IMAGE, forbidden=("images",), slide_types=("all",))
        assert [v.slide for v in validate(image_deck, [rule])] == [1, 3]

    def test_content_scope_alone_does_not_apply(self, image_deck):
        rule = _rule(RuleType.IMAGE, forbidden=("all",), slide_types=("content",))
        assert validate(image_deck, [rule]) == []

    def test_nothing_forbidden(self, image_deck):
        assert validate(image_deck, [_rule(RuleType.IMAGE, slide_types=("all",))]) == []


# ---------------------------------------------------------------------------
# Text and custom
# ---------------------------------------------------------------------------

class TestTextRule:
    def test_required_text_missing(self):
        rule = _rule(RuleType.TEXT, description="text is required on every slide")
        (v,) = validate(_deck(SlideContent(slide_number=1)), [rule])
        assert v.severity == "warning"
        assert v.elements == ["No text found on slide"]

    def test_not_required(self):
        rule = _rule(RuleType.TEXT, description="text should be concise")
        assert validate(_deck(SlideContent(slide_number=1)), [rule]) == []

    def test_slide_with_text_passes(self, styled_slide):
        rule = _rule(RuleType.TEXT, description="text is required")
        assert validate(_deck(styled_slide), [rule]) == []


class TestCustomRule:
    @pytest.mark.parametrize("rule_type", [RuleType.CUSTOM, RuleType.SLIDE_TYPE])
    def test_never_fires(self, rule_type, styled_slide, image_deck):
        rule = _rule(rule_type, description="text is required, no images",
                     allowed_values=("nothing",), min_value=1000,
                     forbidden=("all",))
        slides = image_deck.slides + [styled_slide, SlideContent(slide_number=9)]
        assert validate(_deck(*slides), [rule]) == []


# ---------------------------------------------------------------------------
# Ordering and reporting
# ---------------------------------------------------------------------------

class TestOrdering:
    def test_rule_major_slide_minor(self):
        presentation = _deck(
            SlideContent(slide_number=2, texts=[TextRun("b", font_size=8, color="00FF00")]),
            SlideContent(slide_number=1, texts=[TextRun("a", font_size=8, color="00FF00")]),
        )
        rules = [
            _rule(RuleType.FONT_SIZE, rule_id="rule-1", min_value=12),
            _rule(RuleType.COLOR, rule_id="rule-2", allowed_values=("black",)),
        ]
        order = [(v.rule.id, v.slide) for v in validate(presentation, rules)]
        assert order == [("rule-1", 1), ("rule-1", 2), ("rule-2", 1), ("rule-2", 2)]

    def test_no_rules_no_violations(self, styled_slide):
        assert RuleValidator().validate(_deck(styled_slide), []) == []


class TestValidationReport:
    def test_counts_and_status(self, styled_slide):
        rules = [
            _rule(RuleType.COLOR, rule_id="rule-1", allowed_values=("black",)),
            _rule(RuleType.TEXT, rule_id="rule-2", description="text is required"),
        ]
        empty = SlideContent(slide_number=2)
        report = validate_presentation(_deck(styled_slide, empty), rules)
        assert report.error_count == 1
        assert report.warning_count == 1
        assert not report.passed
        assert report.summary() == "Design check FAIL: 1 error(s), 1 warning(s)"

    def test_empty_report_passes(self):
        report = ValidationReport()
        assert report.passed
        assert report.report() == "Design check PASS: 0 error(s), 0 warning(s)"

    def test_report_lists_elements(self, styled_slide):
        rule = _rule(RuleType.COLOR, allowed_values=("black",))
        text = validate_presentation(_deck(styled_slide), [rule]).report()
        assert "[ERROR] slide 1 (rule-1)" in text
        assert 'with color FF0000' in text

    def test_to_dict(self, styled_slide):
        rule = _rule(RuleType.COLOR, allowed_values=("black",))
        data = validate_presentation(_deck(styled_slide), [rule]).to_dict()
        assert data["passed"] is False
        assert data["violations"][0]["rule"]["type"] == "color"
        assert data["violations"][0]["rule"]["parameters"] == {"allowedValues": ["black"]}


# ---------------------------------------------------------------------------
# One-call pipeline
# ---------------------------------------------------------------------------

class TestCheckDeck:
    def test_extract_compile_validate(self):
        data = deck(slide(text_shape(paragraph(run("Body", size=2400)))),
                    slide(picture("Logo")))
        report = check_deck(data, "- Font size minimum is 36\n- No images on all slides")
        assert [(v.rule.id, v.slide) for v in report.violations] == [
            ("rule-1", 1), ("rule-2", 2),
        ]
        assert not report.passed

    def test_heading_only_rules_rejected(self):
        with pytest.raises(EmptyRuleSetError):
            check_deck(deck(slide()), "# Rules\n")

    def test_unreadable_package(self):
        with pytest.raises(PackageError):
            check_deck(b"nope", "keep it simple")
