"""CLI entry point for Deck Checker.

Orchestrates the pipeline: package extraction, rule compilation and
validation.

Usage::

    # Check a deck against markdown design rules
    python -m deckcheck.cli check \\
        --pptx decks/q1_review.pptx \\
        --rules rules/brand.md

    # Same, JSON output for another tool to consume
    python -m deckcheck.cli check \\
        --pptx decks/q1_review.pptx \\
        --rules rules/brand.md --format json

    # Compile rules once and keep them as reviewed YAML
    python -m deckcheck.cli compile \\
        --rules rules/brand.md -o rules/brand.yaml
    python -m deckcheck.cli check \\
        --pptx decks/q1_review.pptx --rule-set rules/brand.yaml

    # Inspect what the extractor sees in a deck
    python -m deckcheck.cli inspect --pptx decks/q1_review.pptx -v
    python -m deckcheck.cli inspect --pptx decks/q1_review.pptx --slide 3
"""

import argparse
import json
import sys
from pathlib import Path

from deckcheck.errors import DeckCheckError, EmptyRuleSetError, PackageError, RuleError
from deckcheck.extractor import extract_presentation
from deckcheck.qa import validate_presentation
from deckcheck.rules import compile_rules, require_rules
from deckcheck.schema import load_rules, save_presentation, save_rules


# ---------------------------------------------------------------------------
# Input loading
# ---------------------------------------------------------------------------

def _read_file(path_str, what):
    path = Path(path_str)
    if not path.exists():
        _error(f"{what} not found: {path}")
    return path


def _load_presentation(args):
    """Extract the deck named by --pptx, reporting recovered warnings."""
    path = _read_file(args.pptx, "PPTX file")
    try:
        presentation = extract_presentation(path.read_bytes())
    except PackageError as e:
        _error(f"Cannot read {path}: {e}")

    for w in presentation.warnings:
        _warn(w)
    return presentation


def _load_rules(args):
    """Load rules from --rule-set YAML or compile them from --rules text."""
    if getattr(args, "rule_set", None):
        path = _read_file(args.rule_set, "Rule set")
        try:
            rules = load_rules(path)
        except RuleError as e:
            _error(f"Cannot load {path}: {e}")
        if not rules:
            _error(f"Rule set {path} contains no rules")
        return rules

    path = _read_file(args.rules, "Rules file")
    text = path.read_text(encoding="utf-8")
    try:
        return require_rules(text, compile_rules(text))
    except EmptyRuleSetError as e:
        _error(f"{path}: {e}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_check(args):
    """Validate a deck against design rules."""
    presentation = _load_presentation(args)
    rules = _load_rules(args)
    _info(f"Checking {len(presentation.slides)} slide(s) "
          f"against {len(rules)} rule(s)")

    report = validate_presentation(presentation, rules)

    if args.format == "json":
        data = report.to_dict()
        data["extraction_warnings"] = list(presentation.warnings)
        print(json.dumps(data, indent=2))
    else:
        print(report.report())
        if args.verbose:
            for rule in rules:
                print(f"  {rule.id:8s} {rule.type.value:12s} {rule.description}")

    sys.exit(0 if report.passed else 1)


def cmd_compile(args):
    """Compile markdown rules and print or save them."""
    rules = _load_rules(args)

    if args.output:
        save_rules(rules, args.output)
        _info(f"Written: {args.output} ({len(rules)} rule(s))")
        return

    for rule in rules:
        params = rule.parameters.to_dict()
        suffix = f"  {json.dumps(params)}" if params else ""
        print(f"{rule.id:8s} {rule.type.value:12s} {rule.description}{suffix}")


def cmd_inspect(args):
    """Show what the extractor sees in a deck."""
    presentation = _load_presentation(args)

    print(f"Slides:      {len(presentation.slides)}")
    if presentation.theme:
        print(f"Theme:       {len(presentation.theme.colors)} color(s), "
              f"fonts: {', '.join(presentation.theme.fonts) or '-'}")
    else:
        print("Theme:       (none)")
    print()

    slides = presentation.slides
    if args.slide is not None:
        slide = presentation.get_slide(args.slide)
        if slide is None:
            _error(f"No slide {args.slide} (deck has {len(slides)} slide(s))")
        slides = [slide]

    for slide in slides:
        print(f"  [{slide.slide_number:2d}] {slide.part_name}"
              f" — {len(slide.texts)} run(s), {len(slide.images)} image(s),"
              f" {len(slide.shapes)} shape(s)")
        if args.verbose:
            for run in slide.texts:
                size = f"{run.font_size:g}pt" if run.font_size is not None else "-"
                print(f"       {run.content[:40]!r} size={size}"
                      f" font={run.font_family or '-'} color={run.color or '-'}")
            for image in slide.images:
                print(f"       image {image.name} ({image.type})")

    if args.output:
        save_presentation(presentation, args.output)
        _info(f"Written: {args.output}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="deckcheck",
        description="Check slide decks against natural-language design rules.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- check ----
    chk = subparsers.add_parser(
        "check",
        help="Validate a PPTX against design rules.",
    )
    _add_pptx_arg(chk)
    _add_rules_args(chk, allow_rule_set=True)
    chk.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format (default: text).",
    )
    chk.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Also list the rules that were applied.",
    )
    chk.set_defaults(func=cmd_check)

    # ---- compile ----
    comp = subparsers.add_parser(
        "compile",
        help="Compile markdown rules into typed rules.",
    )
    _add_rules_args(comp, allow_rule_set=False)
    comp.add_argument(
        "-o", "--output",
        help="Write the compiled rules to this YAML file.",
    )
    comp.set_defaults(func=cmd_compile)

    # ---- inspect ----
    insp = subparsers.add_parser(
        "inspect",
        help="Show the extracted slide model of a PPTX.",
    )
    _add_pptx_arg(insp)
    insp.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show per-run and per-image detail.",
    )
    insp.add_argument(
        "--slide",
        type=int,
        default=None,
        help="Only show this slide (1-based).",
    )
    insp.add_argument(
        "-o", "--output",
        help="Write the extracted model to this YAML file.",
    )
    insp.set_defaults(func=cmd_inspect)

    return parser


def _add_pptx_arg(parser):
    parser.add_argument(
        "--pptx",
        required=True,
        help="Path to the PPTX file.",
    )


def _add_rules_args(parser, allow_rule_set):
    """Add --rules (and optionally --rule-set) args to a subparser."""
    if not allow_rule_set:
        parser.add_argument(
            "--rules",
            required=True,
            help="Markdown file with one design rule per line.",
        )
        return
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--rules",
        help="Markdown file with one design rule per line.",
    )
    group.add_argument(
        "--rule-set",
        dest="rule_set",
        help="YAML rule set written by 'deckcheck compile'.",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except DeckCheckError as e:
        _error(str(e))


if __name__ == "__main__":
    main()
