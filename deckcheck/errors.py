"""Exception hierarchy for Deck Checker.

Fatal errors (``PackageError``, ``EmptyRuleSetError``) stop a pipeline
stage.  ``SlidePartError`` and ``ThemeParseError`` are raised inside the
extractor and recovered there as warnings on the parsed presentation.
"""

from typing import Any


class DeckCheckError(Exception):
    """Base exception for all Deck Checker errors."""

    def __init__(self, message: str, cause: Exception | None = None,
                 context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {self.cause})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === Package extraction ===

class PackageError(DeckCheckError):
    """The container cannot be unpacked or holds no slide parts."""


class SlidePartError(DeckCheckError):
    """A single slide part is not well-formed XML."""


class ThemeParseError(DeckCheckError):
    """The theme part is not well-formed XML."""


# === Rule compilation ===

class RuleError(DeckCheckError):
    """Base exception for rule compilation problems."""


class EmptyRuleSetError(RuleError):
    """Non-empty rule text produced no rules."""
