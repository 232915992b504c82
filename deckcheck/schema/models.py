"""Deck Checker models - the contract between extractor, compiler, and validator.

Defines the normalized slide model produced from a .pptx package, the
compiled design rules produced from free-text rule descriptions, and the
violation records the validator emits.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class RuleType(Enum):
    """Which checker a design rule is evaluated by."""
    COLOR = "color"                # Allow-list of text colors
    FONT_SIZE = "font-size"        # Min/max run size in points
    FONT_FAMILY = "font-family"    # Allow-list of typefaces
    IMAGE = "image"                # Forbidden images, optionally slide-scoped
    TEXT = "text"                  # Text presence
    SLIDE_TYPE = "slide-type"      # Reserved, never produced by the compiler
    CUSTOM = "custom"              # Unrecognized statement, never fails


# ---------------------------------------------------------------------------
# Slide content
# ---------------------------------------------------------------------------

@dataclass
class TextRun:
    """A single formatted run of text.

    Formatting fields are ``None`` when the run does not specify them;
    nothing is inherited from placeholders, layouts or masters.
    """
    content: str
    font_size: float | None = None       # Points (source hundredths / 100)
    font_family: str | None = None
    color: str | None = None             # Source token, e.g. "FF0000", "accent1"
    is_bold: bool = False
    is_italic: bool = False

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"content": self.content}
        if self.font_size is not None:
            d["font_size"] = self.font_size
        if self.font_family is not None:
            d["font_family"] = self.font_family
        if self.color is not None:
            d["color"] = self.color
        if self.is_bold:
            d["bold"] = True
        if self.is_italic:
            d["italic"] = True
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "TextRun":
        return cls(
            content=d["content"],
            font_size=d.get("font_size"),
            font_family=d.get("font_family"),
            color=d.get("color"),
            is_bold=d.get("bold", False),
            is_italic=d.get("italic", False),
        )


@dataclass
class ImageRef:
    """A picture placed on a slide."""
    name: str
    type: str = "image"                  # Media extension when resolvable
    target: str | None = None            # Media part, e.g. "ppt/media/image1.png"

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.target:
            d["target"] = self.target
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ImageRef":
        return cls(name=d["name"], type=d.get("type", "image"),
                   target=d.get("target"))


@dataclass
class ShapeRef:
    """Coarse shape-level view: geometry/placeholder type plus joined text."""
    type: str
    text: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.type}
        if self.text:
            d["text"] = self.text
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ShapeRef":
        return cls(type=d["type"], text=d.get("text"))


@dataclass
class Background:
    """Slide background fill."""
    type: str                            # "solid", "image", "gradient" or "ref"
    color: str | None = None
    image: str | None = None             # Relationship id of the blip

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.type}
        if self.color:
            d["color"] = self.color
        if self.image:
            d["image"] = self.image
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Background":
        return cls(type=d["type"], color=d.get("color"), image=d.get("image"))


@dataclass
class SlideContent:
    """Normalized content of one slide, numbered by package order."""
    slide_number: int                    # 1-based, dense
    texts: list[TextRun] = field(default_factory=list)
    images: list[ImageRef] = field(default_factory=list)
    shapes: list[ShapeRef] = field(default_factory=list)
    background: Background | None = None
    part_name: str = ""

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"slide_number": self.slide_number}
        if self.part_name:
            d["part_name"] = self.part_name
        d["texts"] = [t.to_dict() for t in self.texts]
        d["images"] = [i.to_dict() for i in self.images]
        d["shapes"] = [s.to_dict() for s in self.shapes]
        if self.background:
            d["background"] = self.background.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "SlideContent":
        return cls(
            slide_number=d["slide_number"],
            texts=[TextRun.from_dict(t) for t in d.get("texts", [])],
            images=[ImageRef.from_dict(i) for i in d.get("images", [])],
            shapes=[ShapeRef.from_dict(s) for s in d.get("shapes", [])],
            background=Background.from_dict(d["background"]) if d.get("background") else None,
            part_name=d.get("part_name", ""),
        )


@dataclass
class Theme:
    """Scheme colors (in scheme order) and major/minor typefaces."""
    colors: list[str] = field(default_factory=list)
    fonts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"colors": list(self.colors), "fonts": list(self.fonts)}

    @classmethod
    def from_dict(cls, d: dict) -> "Theme":
        return cls(colors=list(d.get("colors", [])), fonts=list(d.get("fonts", [])))


@dataclass
class ParsedPresentation:
    """Top-level extraction result.

    ``warnings`` records recovered problems (skipped slide parts, an
    unreadable theme) so callers can surface them without failing.
    """
    slides: list[SlideContent]
    theme: Theme | None = None
    warnings: list[str] = field(default_factory=list)

    def get_slide(self, number: int) -> SlideContent | None:
        """Look up a slide by its 1-based number."""
        for s in self.slides:
            if s.slide_number == number:
                return s
        return None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"slides": [s.to_dict() for s in self.slides]}
        if self.theme:
            d["theme"] = self.theme.to_dict()
        if self.warnings:
            d["warnings"] = list(self.warnings)
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ParsedPresentation":
        return cls(
            slides=[SlideContent.from_dict(s) for s in d.get("slides", [])],
            theme=Theme.from_dict(d["theme"]) if d.get("theme") else None,
            warnings=list(d.get("warnings", [])),
        )


# ---------------------------------------------------------------------------
# Design rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RuleParameters:
    """Kind-dependent rule parameters.

    Only the fields meaningful for the rule's type are read; the rest are
    ignored rather than validated absent.
    """
    allowed_values: tuple[str, ...] = ()
    min_value: int | None = None         # Points
    max_value: int | None = None         # Points
    forbidden: tuple[str, ...] = ()      # e.g. ("all",)
    slide_types: tuple[str, ...] = ()    # "title", "content", "all"

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        if self.allowed_values:
            d["allowedValues"] = list(self.allowed_values)
        if self.min_value is not None:
            d["minValue"] = self.min_value
        if self.max_value is not None:
            d["maxValue"] = self.max_value
        if self.forbidden:
            d["forbidden"] = list(self.forbidden)
        if self.slide_types:
            d["slideTypes"] = list(self.slide_types)
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "RuleParameters":
        return cls(
            allowed_values=tuple(d.get("allowedValues", ())),
            min_value=d.get("minValue"),
            max_value=d.get("maxValue"),
            forbidden=tuple(d.get("forbidden", ())),
            slide_types=tuple(d.get("slideTypes", ())),
        )


@dataclass(frozen=True)
class DesignRule:
    """A compiled design rule. Immutable once produced."""
    id: str                              # "rule-<n>", order of appearance
    description: str                     # Lower-cased, trimmed statement
    type: RuleType
    parameters: RuleParameters = field(default_factory=RuleParameters)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "type": self.type.value,
            "parameters": self.parameters.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DesignRule":
        return cls(
            id=d["id"],
            description=d["description"],
            type=RuleType(d["type"]),
            parameters=RuleParameters.from_dict(d.get("parameters") or {}),
        )


# ---------------------------------------------------------------------------
# Violations
# ---------------------------------------------------------------------------

@dataclass
class Violation:
    """A single rule violation found on a slide."""
    slide: int
    rule: DesignRule
    description: str
    elements: list[str] = field(default_factory=list)
    severity: str = "error"              # "error" or "warning"

    def __str__(self) -> str:
        return (f"[{self.severity.upper()}] slide {self.slide} "
                f"({self.rule.id}): {self.description}")

    def to_dict(self) -> dict:
        return {
            "slide": self.slide,
            "rule": self.rule.to_dict(),
            "description": self.description,
            "elements": list(self.elements),
            "severity": self.severity,
        }
