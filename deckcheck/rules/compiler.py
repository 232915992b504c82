"""Rule Compiler — turns free-text design rules into typed DesignRules.

Each statement is lower-cased, trimmed and stripped of a leading bullet,
then classified by an ordered table of ``(predicate, builder)`` pairs.
The first matching predicate wins, so precedence is explicit:

    1. "text color" + "allowed"                    -> color
    2. "font size", or "title" + "size"            -> font-size
    3. "image"/"picture" + negation cue            -> image
    4. "font" + ("family" or "type")               -> font-family
    5. "text" without "color" or "size"            -> text
    6. anything else non-empty                     -> custom

Unrecognized statements never raise; they become ``custom`` rules.
"""

import re
from typing import Callable

from deckcheck.errors import EmptyRuleSetError
from deckcheck.rules.markdown import split_statements
from deckcheck.schema.models import DesignRule, RuleParameters, RuleType

_BULLET_RE = re.compile(r"^[-*]\s*")

# Allow-list phrasing: "allowed: a, b" or "only a and b are allowed"
_ALLOWED_COLON_RE = re.compile(r"allowed?:\s*([^.]+)")
_ALLOWED_ONLY_RE = re.compile(r"only\s+([^.]+?)(?:\s+are?\s+allowed|$)")
_LIST_SPLIT_RE = re.compile(r"[,&]|\s+and\s+")

_MIN_PATTERNS = (
    re.compile(r"min(?:imum)?\s*(?:is\s*|:\s*)?(\d+)"),
    re.compile(r"at\s+least\s+(\d+)"),
    re.compile(r"(\d+)\s*(?:pt|px|points?)\s*or\s*higher"),
)
_MAX_PATTERNS = (
    re.compile(r"max(?:imum)?\s*(?:is\s*|:\s*)?(\d+)"),
    re.compile(r"no\s+more\s+than\s+(\d+)"),
)

_NEGATION_CUES = ("no ", "not allowed", "forbidden")

# Substring -> slide scope tag, in output order
_SLIDE_SCOPES = (
    ("title slide", "title"),
    ("content slide", "content"),
    ("all slide", "all"),
)


# ---------------------------------------------------------------------------
# Parameter extraction
# ---------------------------------------------------------------------------

def clean_statement(text: str) -> str:
    """Lower-case, trim and strip a leading bullet marker."""
    return _BULLET_RE.sub("", text.lower().strip()).strip()


def extract_allowed_values(text: str) -> tuple[str, ...]:
    """Extract an allow-list from "allowed: ..." or "only ... are allowed"."""
    m = _ALLOWED_COLON_RE.search(text) or _ALLOWED_ONLY_RE.search(text)
    if not m:
        return ()
    return tuple(v.strip() for v in _LIST_SPLIT_RE.split(m.group(1)) if v.strip())


def _first_int(text: str, patterns: tuple[re.Pattern, ...]) -> int | None:
    for pattern in patterns:
        m = pattern.search(text)
        if m:
            return int(m.group(1))
    return None


def extract_min_value(text: str) -> int | None:
    return _first_int(text, _MIN_PATTERNS)


def extract_max_value(text: str) -> int | None:
    return _first_int(text, _MAX_PATTERNS)


def extract_slide_types(text: str) -> tuple[str, ...]:
    """Slide scope tags mentioned in the text; empty means every slide."""
    return tuple(tag for phrase, tag in _SLIDE_SCOPES if phrase in text)


# ---------------------------------------------------------------------------
# Classification table
# ---------------------------------------------------------------------------

def _is_color(text: str) -> bool:
    return "text color" in text and "allowed" in text


def _is_font_size(text: str) -> bool:
    return "font size" in text or ("title" in text and "size" in text)


def _is_image(text: str) -> bool:
    mentions_image = "image" in text or "picture" in text
    return mentions_image and any(cue in text for cue in _NEGATION_CUES)


def _is_font_family(text: str) -> bool:
    return "font" in text and ("family" in text or "type" in text)


def _is_text(text: str) -> bool:
    return "text" in text and "color" not in text and "size" not in text


def _allow_list(rule_type: RuleType) -> Callable[[str], tuple[RuleType, RuleParameters]]:
    def build(text: str) -> tuple[RuleType, RuleParameters]:
        return rule_type, RuleParameters(allowed_values=extract_allowed_values(text))
    return build


def _font_size(text: str) -> tuple[RuleType, RuleParameters]:
    return RuleType.FONT_SIZE, RuleParameters(
        min_value=extract_min_value(text),
        max_value=extract_max_value(text),
    )


def _image(text: str) -> tuple[RuleType, RuleParameters]:
    return RuleType.IMAGE, RuleParameters(
        forbidden=("all",),
        slide_types=extract_slide_types(text),
    )


def _bare(rule_type: RuleType) -> Callable[[str], tuple[RuleType, RuleParameters]]:
    def build(text: str) -> tuple[RuleType, RuleParameters]:
        return rule_type, RuleParameters()
    return build


CLASSIFIERS: tuple[tuple[Callable[[str], bool],
                         Callable[[str], tuple[RuleType, RuleParameters]]], ...] = (
    (_is_color, _allow_list(RuleType.COLOR)),
    (_is_font_size, _font_size),
    (_is_image, _image),
    (_is_font_family, _allow_list(RuleType.FONT_FAMILY)),
    (_is_text, _bare(RuleType.TEXT)),
)


def classify(text: str) -> tuple[RuleType, RuleParameters]:
    """Classify a cleaned statement; falls through to ``custom``."""
    for predicate, build in CLASSIFIERS:
        if predicate(text):
            return build(text)
    return RuleType.CUSTOM, RuleParameters()


# ---------------------------------------------------------------------------
# RuleCompiler
# ---------------------------------------------------------------------------

class RuleCompiler:
    """Compiles markdown-flavored rule text into an ordered DesignRule list.

    Ids are ``rule-<n>`` with ``n`` the 1-based position of the rule in
    this compilation; nothing carries over between calls.
    """

    def compile(self, text: str) -> list[DesignRule]:
        rules: list[DesignRule] = []
        for statement in split_statements(text or ""):
            rule = self.compile_statement(statement, len(rules) + 1)
            if rule is not None:
                rules.append(rule)
        return rules

    @staticmethod
    def compile_statement(statement: str, sequence: int) -> DesignRule | None:
        """Compile one statement, or None if it is empty once cleaned."""
        text = clean_statement(statement)
        if not text:
            return None
        rule_type, parameters = classify(text)
        return DesignRule(
            id=f"rule-{sequence}",
            description=text,
            type=rule_type,
            parameters=parameters,
        )


def compile_rules(text: str) -> list[DesignRule]:
    """Convenience function: compile rule text into DesignRules."""
    return RuleCompiler().compile(text)


def require_rules(text: str, rules: list[DesignRule]) -> list[DesignRule]:
    """Reject a compilation that produced nothing from non-empty text."""
    if text and text.strip() and not rules:
        raise EmptyRuleSetError(
            "no rules found in rule text",
            context={"expected": "bullet list items or paragraph lines"},
        )
    return rules
