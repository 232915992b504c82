"""QA validation package for Deck Checker.

Validates an extracted deck against compiled design rules — text colors,
font sizes, font families, forbidden images and required text.
"""

from .validator import (
    RuleValidator,
    ValidationReport,
    validate,
    validate_presentation,
)

__all__ = [
    "RuleValidator",
    "ValidationReport",
    "validate",
    "validate_presentation",
]
