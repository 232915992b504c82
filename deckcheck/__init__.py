"""Deck Checker — validates .pptx decks against natural-language design rules.

Pipeline::

    .pptx bytes ──> extractor ──┐
                                ├──> qa (validation) ──> violations
    rule text ───> rules ───────┘
"""

from deckcheck.extractor import extract_presentation
from deckcheck.qa import ValidationReport, validate_presentation
from deckcheck.rules import compile_rules, require_rules

__version__ = "0.1.0"


def check_deck(data: bytes, rules_text: str) -> ValidationReport:
    """Extract a deck, compile its rules and validate in one call.

    Raises ``PackageError`` for an unreadable package and
    ``EmptyRuleSetError`` when non-empty rule text yields no rules.
    """
    presentation = extract_presentation(data)
    rules = require_rules(rules_text, compile_rules(rules_text))
    return validate_presentation(presentation, rules)


__all__ = ["check_deck", "__version__"]
