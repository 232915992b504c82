"""Tests for YAML save/load of rule sets and extracted presentations."""

import pytest
import yaml

from deckcheck.errors import RuleError
from deckcheck.rules import compile_rules
from deckcheck.schema import (
    ImageRef,
    ParsedPresentation,
    SlideContent,
    TextRun,
    Theme,
    load_presentation,
    load_rules,
    save_presentation,
    save_rules,
)
from deckcheck.schema.models import Background, RuleType


class TestRuleSetYaml:
    def test_round_trip(self, tmp_path):
        rules = compile_rules(
            "- Text colors allowed: black, red\n"
            "- Font size at least 18 and no more than 40\n"
            "- No images on title slides\n"
            "- Keep it simple\n"
        )
        path = tmp_path / "nested" / "rules.yaml"
        save_rules(rules, path)
        assert load_rules(path) == rules

    def test_file_is_reviewable_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        save_rules(compile_rules("Font size minimum is 36"), path)
        data = yaml.safe_load(path.read_text())
        assert data == {"rules": [{
            "id": "rule-1",
            "description": "font size minimum is 36",
            "type": "font-size",
            "parameters": {"minValue": 36},
        }]}

    def test_hand_written_rule_without_parameters(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  - id: r1\n    description: text is required\n    type: text\n")
        (rule,) = load_rules(path)
        assert rule.type == RuleType.TEXT
        assert rule.parameters.to_dict() == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("")
        assert load_rules(path) == []

    def test_unknown_type_names_rule_index(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "rules:\n"
            "  - id: r1\n    description: text is required\n    type: text\n"
            "  - id: r2\n    description: colors\n    type: colour\n"
        )
        with pytest.raises(RuleError, match="invalid rule") as exc:
            load_rules(path)
        assert exc.value.context == {"path": str(path), "rule": 2}
        assert isinstance(exc.value.cause, ValueError)

    def test_missing_id(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  - description: colors\n    type: color\n")
        with pytest.raises(RuleError) as exc:
            load_rules(path)
        assert isinstance(exc.value.cause, KeyError)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: [unclosed\n")
        with pytest.raises(RuleError, match="invalid rule set YAML"):
            load_rules(path)

    def test_rules_not_a_list(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: text is required\n")
        with pytest.raises(RuleError, match="invalid rule set"):
            load_rules(path)


class TestPresentationYaml:
    def test_round_trip(self, tmp_path):
        presentation = ParsedPresentation(
            slides=[
                SlideContent(
                    slide_number=1,
                    part_name="ppt/slides/slide1.xml",
                    texts=[TextRun("Title", font_size=40.0, font_family="Arial",
                                   color="000000", is_bold=True)],
                    images=[ImageRef("Logo", "png", "ppt/media/image1.png")],
                    background=Background(type="solid", color="FFFFFF"),
                ),
                SlideContent(slide_number=2, texts=[TextRun("Body")]),
            ],
            theme=Theme(colors=["000000", "FFFFFF"], fonts=["Calibri Light", "Calibri"]),
            warnings=["Skipped ppt/slides/slide3.xml: malformed XML"],
        )
        path = tmp_path / "deck.yaml"
        save_presentation(presentation, path)
        assert load_presentation(path) == presentation
