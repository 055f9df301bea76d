"""
Command-line front end for the compound feasibility engine.

Examples:
    compound-feasibility H O
    compound-feasibility Na Cl --json
    compound-feasibility --formula CH4
    compound-feasibility C H --count C=1 --count H=4
    compound-feasibility --search chlor
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from typing import Dict, List, Optional, Sequence

from feasibility import CompoundAnalysis, analyze
from compounds.chem_data import Element
from compounds.config_loader import PeriodicTable, load_periodic_table, load_settings_from_yaml
from compounds.known_compounds import parse_formula


PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
DEFAULT_CONFIG = PROJECT_ROOT / "config" / "analyzer.yaml"
DISPLAYED_FORMULAS = 5


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assess whether a set of elements can form a stable compound.")
    parser.add_argument(
        "elements",
        nargs="*",
        help="Element symbols, names or atomic numbers (at least two).",
    )
    parser.add_argument(
        "--count",
        action="append",
        default=[],
        metavar="SYMBOL=N",
        help="Explicit atom count for an element; validates that formula instead of searching.",
    )
    parser.add_argument(
        "--formula",
        type=str,
        default=None,
        help="Validate a formula such as CH4 or H2SO4 (implies explicit counts).",
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="List elements whose name, symbol or atomic number matches the query and exit.",
    )
    parser.add_argument(
        "--config",
        type=pathlib.Path,
        default=DEFAULT_CONFIG,
        help="Analyzer settings YAML.",
    )
    parser.add_argument(
        "--dataset",
        type=pathlib.Path,
        default=None,
        help="Periodic table JSON; overrides the dataset named in the config.",
    )
    parser.add_argument("--json", action="store_true", help="Emit the analysis as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    args.parser = parser
    return args


def _parse_count(parser: argparse.ArgumentParser, text: str) -> tuple:
    token, sep, value = text.partition("=")
    if not sep or not token.strip():
        parser.error(f"--count expects SYMBOL=N, got '{text}'")
    try:
        count = int(value)
    except ValueError:
        parser.error(f"--count value must be an integer, got '{value}'")
    if count <= 0:
        parser.error(f"--count value must be positive, got {count}")
    return token.strip(), count


def resolve_inputs(args: argparse.Namespace, table: PeriodicTable) -> tuple:
    """Return (elements, explicit_counts) from the positional tokens, --count and --formula."""
    parser = args.parser
    elements: List[Element] = []
    counts: Dict[Element, int] = {}

    def add(element: Element) -> None:
        if element not in elements:
            elements.append(element)

    try:
        for token in args.elements:
            add(table.get(token))
        for text in args.count:
            token, count = _parse_count(parser, text)
            element = table.get(token)
            add(element)
            counts[element] = count
        if args.formula:
            composition = parse_formula(args.formula)
            if not composition:
                parser.error(f"Could not parse formula '{args.formula}'")
            for symbol, count in composition.items():
                element = table.get(symbol)
                add(element)
                counts[element] = count
    except KeyError as exc:
        parser.error(str(exc.args[0]))

    if len(elements) < 2:
        parser.error("Select at least 2 elements to build a compound.")
    return elements, counts or None


def format_report(analysis: CompoundAnalysis) -> str:
    lines = [analysis.likelihood.value.upper(), ""]
    lines.append("Selected elements: " + ", ".join(f"{el.display_name} ({el.symbol})" for el in analysis.elements))
    if analysis.candidates:
        lines.append("Possible formulas:")
        for candidate in analysis.candidates[:DISPLAYED_FORMULAS]:
            annotation = candidate.describe_oxidation_states()
            if not annotation and analysis.user_specified:
                annotation = "User-specified formula"
            lines.append(f"  {candidate.formula}" + (f"  [{annotation}]" if annotation else ""))
        hidden = len(analysis.candidates) - DISPLAYED_FORMULAS
        if hidden > 0:
            lines.append(f"  ...and {hidden} more possibilities")
    lines.append(f"Bond type: {analysis.bond_type.value}")
    if analysis.electronegativity_difference is not None:
        lines.append(f"Electronegativity difference: {analysis.electronegativity_difference:.2f}")
    lines.append(f"Analysis: {analysis.rationale}")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        bundle = load_settings_from_yaml(args.config)
        dataset_path = args.dataset or bundle.dataset_path
        if dataset_path is None:
            args.parser.error("No dataset given; pass --dataset or set dataset.path in the config.")
        table = load_periodic_table(dataset_path)
    except (OSError, ValueError) as exc:
        args.parser.error(str(exc))

    if args.search is not None:
        for element in table.search(args.search):
            print(f"{element.atomic_number:>3} {element.symbol:<3} {element.name} ({element.category.value})")
        return 0

    elements, counts = resolve_inputs(args, table)
    analysis = analyze(elements, counts, settings=bundle.settings)
    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_report(analysis))
    return 0


if __name__ == "__main__":
    sys.exit(main())
