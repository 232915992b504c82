"""Rule compilation package — free-text design rules to typed DesignRules.

- markdown.py: block lexing into list items and paragraph lines
- compiler.py: ordered heuristic classification and parameter extraction
"""

from .compiler import (
    RuleCompiler,
    classify,
    compile_rules,
    require_rules,
)
from .markdown import lex_blocks, split_statements

__all__ = [
    "RuleCompiler",
    "classify",
    "compile_rules",
    "lex_blocks",
    "require_rules",
    "split_statements",
]
