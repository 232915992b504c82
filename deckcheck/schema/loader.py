"""Schema loader — YAML serialization for compiled rule sets and parsed decks.

Compiled rules can be saved once, reviewed and version-controlled as
human-readable YAML, then reused by ``deckcheck check --rule-set``.
"""

from pathlib import Path

import yaml

from deckcheck.errors import RuleError

from .models import DesignRule, ParsedPresentation


def _dump(data: dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def save_rules(rules: list[DesignRule], path: str | Path) -> None:
    """Serialize a compiled rule list to a YAML file."""
    _dump({"rules": [r.to_dict() for r in rules]}, Path(path))


def load_rules(path: str | Path) -> list[DesignRule]:
    """Deserialize a compiled rule list from a YAML file.

    Raises ``RuleError`` when the file is not valid YAML or an entry is
    not a well-formed rule (missing key, unknown type).
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise RuleError("invalid rule set YAML", cause=e,
                        context={"path": str(path)}) from e
    entries = (data.get("rules") or []) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise RuleError("invalid rule set",
                        context={"path": str(path), "expected": "rules: [...]"})

    rules = []
    for index, entry in enumerate(entries, start=1):
        try:
            rules.append(DesignRule.from_dict(entry))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise RuleError("invalid rule", cause=e,
                            context={"path": str(path), "rule": index}) from e
    return rules


def save_presentation(presentation: ParsedPresentation, path: str | Path) -> None:
    """Serialize an extracted presentation model to a YAML file."""
    _dump(presentation.to_dict(), Path(path))


def load_presentation(path: str | Path) -> ParsedPresentation:
    """Deserialize an extracted presentation model from a YAML file."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return ParsedPresentation.from_dict(data)
