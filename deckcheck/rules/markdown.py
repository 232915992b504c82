"""Block-level lexing of markdown-flavored rule text.

Rule text is parsed with mistune into a block token tree.  Only the two
block kinds that carry rule statements are kept:

- ``list``: one statement per item (nested items flattened in order,
  lazy continuation lines joined to their item with a space)
- ``paragraph``: one statement per line

Headings, fenced and indented code, HTML blocks (comments included),
thematic breaks, block quotes and tables produce no statements.
"""

from dataclasses import dataclass, field

import mistune

# AST renderer; the table plugin keeps pipe tables out of paragraphs
_parse = mistune.create_markdown(renderer=None, plugins=["table"])

# Inline tokens whose raw source is part of the statement text
_RAW_INLINE = ("text", "codespan")
_BREAK_INLINE = ("softbreak", "linebreak")

# Block tokens that hold an item's own text inside a list item
_ITEM_TEXT = ("block_text", "paragraph")


@dataclass
class Block:
    """A block-level unit: ``kind`` is "list" or "paragraph"."""
    kind: str
    items: list[str] = field(default_factory=list)


def _inline_text(tokens: list[dict]) -> str:
    """Flatten inline tokens to plain text, soft breaks as newlines."""
    parts = []
    for token in tokens:
        kind = token["type"]
        if kind in _RAW_INLINE:
            parts.append(token.get("raw", ""))
        elif kind in _BREAK_INLINE:
            parts.append("\n")
        elif kind == "inline_html":
            continue
        elif token.get("children"):
            parts.append(_inline_text(token["children"]))
    return "".join(parts)


def _list_items(list_token: dict) -> list[str]:
    """Item texts of a list token, nested lists flattened after their parent."""
    items = []
    for item in list_token.get("children", []):
        own, nested = [], []
        for child in item.get("children", []):
            if child["type"] in _ITEM_TEXT:
                own.append(_inline_text(child.get("children", [])))
            elif child["type"] == "list":
                nested.extend(_list_items(child))
        items.append(" ".join(" ".join(own).split()))
        items.extend(nested)
    return items


def lex_blocks(text: str) -> list[Block]:
    """Split markdown text into list and paragraph blocks."""
    blocks: list[Block] = []
    for token in _parse(text):
        if token["type"] == "list":
            blocks.append(Block(kind="list", items=_list_items(token)))
        elif token["type"] == "paragraph":
            lines = _inline_text(token.get("children", [])).splitlines()
            blocks.append(Block(kind="paragraph",
                                items=[line.strip() for line in lines if line.strip()]))
    return blocks


def split_statements(text: str) -> list[str]:
    """Flatten list items and paragraph lines into candidate statements."""
    statements = []
    for block in lex_blocks(text):
        for item in block.items:
            if item.strip():
                statements.append(item)
    return statements
