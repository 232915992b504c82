"""Validation engine — checks an extracted deck against compiled design rules.

Every rule is evaluated against every slide, rule-major and slide-minor,
through a per-type checker.  Checkers are pure: they read the slide and the
rule and return violations, sharing no state between invocations.  The
engine never raises for malformed parameters; a rule it cannot apply
contributes no violations.

Usage::

    from deckcheck.qa.validator import validate_presentation

    report = validate_presentation(presentation, rules)
    assert report.passed, report.report()
"""

from dataclasses import dataclass, field

from deckcheck.schema.models import (
    DesignRule,
    ParsedPresentation,
    RuleType,
    SlideContent,
    Violation,
)

# Content preview lengths used in violation elements
COLOR_PREVIEW_CHARS = 50
SIZE_PREVIEW_CHARS = 30

# Forbidden subjects that make an image rule active
_IMAGE_SUBJECTS = ("all", "images")


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class ValidationReport:
    """Aggregated result of validating a deck against a rule set."""
    violations: list[Violation] = field(default_factory=list)

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == "warning"]

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def summary(self) -> str:
        """One-line summary string."""
        status = "PASS" if self.passed else "FAIL"
        return (
            f"Design check {status}: {self.error_count} error(s), "
            f"{self.warning_count} warning(s)"
        )

    def report(self) -> str:
        """Multi-line report of all violations and their elements."""
        lines = [self.summary()]
        for violation in self.violations:
            lines.append(f"  {violation}")
            for element in violation.elements:
                lines.append(f"      - {element}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "violations": [v.to_dict() for v in self.violations],
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _format_pt(value: float) -> str:
    """Render a point size without a trailing ".0" (24.0 -> "24")."""
    return f"{value:g}"


def _matches_any(observed: str, allowed: tuple[str, ...]) -> bool:
    """Case-insensitive substring match against an allow-list."""
    observed = observed.lower()
    return any(a.lower() in observed for a in allowed)


def _is_title_slide(slide: SlideContent, slide_types: tuple[str, ...]) -> bool:
    return slide.slide_number == 1 or "title" in slide_types


# ---------------------------------------------------------------------------
# RuleValidator
# ---------------------------------------------------------------------------

class RuleValidator:
    """Evaluates DesignRules against a ParsedPresentation."""

    def __init__(self) -> None:
        self._checkers = {
            RuleType.COLOR: self._check_color,
            RuleType.FONT_SIZE: self._check_font_size,
            RuleType.FONT_FAMILY: self._check_font_family,
            RuleType.IMAGE: self._check_image,
            RuleType.TEXT: self._check_text,
            RuleType.CUSTOM: self._check_custom,
            RuleType.SLIDE_TYPE: self._check_custom,
        }

    def validate(self, presentation: ParsedPresentation,
                 rules: list[DesignRule]) -> list[Violation]:
        """Run every rule against every slide, in rule-major order."""
        slides = sorted(presentation.slides, key=lambda s: s.slide_number)
        violations: list[Violation] = []
        for rule in rules:
            checker = self._checkers.get(rule.type, self._check_custom)
            for slide in slides:
                violations.extend(checker(slide, rule))
        return violations

    # ------------------------------------------------------------------
    # Allow-list checks
    # ------------------------------------------------------------------

    def _check_color(self, slide: SlideContent,
                     rule: DesignRule) -> list[Violation]:
        allowed = rule.parameters.allowed_values
        if not allowed:
            return []

        violations = []
        for run in slide.texts:
            if not run.color or _matches_any(run.color, allowed):
                continue
            violations.append(Violation(
                slide=slide.slide_number,
                rule=rule,
                description=(
                    f"Text color not in allowed list (found {run.color}, "
                    f"only {', '.join(allowed)} are allowed)"
                ),
                elements=[
                    f'Text "{run.content[:COLOR_PREVIEW_CHARS]}..." '
                    f"with color {run.color}"
                ],
                severity="error",
            ))
        return violations

    def _check_font_family(self, slide: SlideContent,
                           rule: DesignRule) -> list[Violation]:
        allowed = rule.parameters.allowed_values
        if not allowed:
            return []

        violations = []
        for run in slide.texts:
            if not run.font_family or _matches_any(run.font_family, allowed):
                continue
            violations.append(Violation(
                slide=slide.slide_number,
                rule=rule,
                description=(
                    f"Font family not in allowed list (found {run.font_family}, "
                    f"only {', '.join(allowed)} are allowed)"
                ),
                elements=[f"Text with font {run.font_family}"],
                severity="error",
            ))
        return violations

    # ------------------------------------------------------------------
    # Numeric checks
    # ------------------------------------------------------------------

    def _check_font_size(self, slide: SlideContent,
                         rule: DesignRule) -> list[Violation]:
        """One violation per violated bound; minimum is checked first."""
        min_size = rule.parameters.min_value
        max_size = rule.parameters.max_value
        if min_size is None and max_size is None:
            return []

        violations = []
        for run in slide.texts:
            if run.font_size is None:
                continue
            size = _format_pt(run.font_size)
            messages = []
            if min_size is not None and run.font_size < min_size:
                messages.append(
                    f"Font size is below minimum requirement "
                    f"(found {size}pt, minimum is {_format_pt(min_size)}pt)"
                )
            if max_size is not None and run.font_size > max_size:
                messages.append(
                    f"Font size exceeds maximum requirement "
                    f"(found {size}pt, maximum is {_format_pt(max_size)}pt)"
                )
            for message in messages:
                violations.append(Violation(
                    slide=slide.slide_number,
                    rule=rule,
                    description=message,
                    elements=[
                        f'Text "{run.content[:SIZE_PREVIEW_CHARS]}...": {size}pt'
                    ],
                    severity="error",
                ))
        return violations

    # ------------------------------------------------------------------
    # Slide-level checks
    # ------------------------------------------------------------------

    def _check_image(self, slide: SlideContent,
                     rule: DesignRule) -> list[Violation]:
        forbidden = rule.parameters.forbidden
        if not any(subject in forbidden for subject in _IMAGE_SUBJECTS):
            return []

        slide_types = rule.parameters.slide_types
        applies = (
            not slide_types
            or "all" in slide_types
            or (_is_title_slide(slide, slide_types) and "title" in slide_types)
        )
        if not applies or not slide.images:
            return []

        return [Violation(
            slide=slide.slide_number,
            rule=rule,
            description=(
                f"Slide contains images, which violates the "
                f"'{rule.description}' rule"
            ),
            elements=[f"Image: {image.name}" for image in slide.images],
            severity="error",
        )]

    def _check_text(self, slide: SlideContent,
                    rule: DesignRule) -> list[Violation]:
        if slide.texts or "required" not in rule.description:
            return []
        return [Violation(
            slide=slide.slide_number,
            rule=rule,
            description="Slide has no text content but text is required",
            elements=["No text found on slide"],
            severity="warning",
        )]

    def _check_custom(self, slide: SlideContent,
                      rule: DesignRule) -> list[Violation]:
        # Free-form rules carry no checkable parameters
        return []


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------

def validate(presentation: ParsedPresentation,
             rules: list[DesignRule]) -> list[Violation]:
    """Validate a presentation and return its violations in order."""
    return RuleValidator().validate(presentation, rules)


def validate_presentation(presentation: ParsedPresentation,
                          rules: list[DesignRule]) -> ValidationReport:
    """One-shot convenience: validate and wrap the result in a report."""
    return ValidationReport(violations=validate(presentation, rules))
