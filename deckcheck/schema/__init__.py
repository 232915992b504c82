"""Schema package — typed models shared by extractor, compiler and validator.

- models.py: Core dataclasses (SlideContent, TextRun, DesignRule, Violation, etc.)
- loader.py: YAML serialization/deserialization
"""

from .loader import load_presentation, load_rules, save_presentation, save_rules
from .models import (
    Background,
    DesignRule,
    ImageRef,
    ParsedPresentation,
    RuleParameters,
    RuleType,
    ShapeRef,
    SlideContent,
    TextRun,
    Theme,
    Violation,
)

__all__ = [
    # Models
    "Background",
    "DesignRule",
    "ImageRef",
    "ParsedPresentation",
    "RuleParameters",
    "RuleType",
    "ShapeRef",
    "SlideContent",
    "TextRun",
    "Theme",
    "Violation",
    # Loader
    "load_presentation",
    "load_rules",
    "save_presentation",
    "save_rules",
]
