"""
Normalize raw element rows into the periodic-table JSON read by the analyzer.

Rows come from a CSV file (one element per line) or a JSON list. Only the
fields the loader consumes are kept:

    symbol, atomic_number, name, category, oxidation_states, electronegativity_pauling

Oxidation states are semicolon separated and may carry a sign ("+2;-1;0").
Rows are merged over an existing dataset keyed by symbol, so a raw file
only needs the columns it changes.
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import pathlib
from typing import Any, Dict, Iterable, List, Optional

from compounds.chem_data import ElementCategory


logger = logging.getLogger("ingest_atomic_data")

EMPTY_DATASET: Dict[str, Any] = {"version": "0.0.0", "source": "", "elements": []}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Merge raw element rows into the analyzer dataset.")
    parser.add_argument("--source", type=pathlib.Path, required=True, help="Raw element rows (CSV or JSON list).")
    parser.add_argument(
        "--out",
        type=pathlib.Path,
        default=pathlib.Path("data/periodic_table.json"),
        help="Dataset to update; rows are merged over it when it exists.",
    )
    parser.add_argument("--version", type=str, default=None, help="Version label for the written dataset.")
    parser.add_argument("--dry-run", action="store_true", help="Print the merged dataset instead of writing it.")
    return parser.parse_args(argv)


def parse_oxidation_states(value: Any) -> List[int]:
    if not value:
        return []
    items = value if isinstance(value, (list, tuple)) else str(value).split(";")
    states = []
    for item in items:
        text = str(item).strip()
        if not text:
            continue
        try:
            states.append(int(text))
        except ValueError as exc:
            raise ValueError(f"Could not parse oxidation state from '{text}'") from exc
    return states


def read_rows(path: pathlib.Path) -> List[Dict[str, Any]]:
    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as handle:
        if suffix == ".csv":
            return list(csv.DictReader(handle))
        if suffix == ".json":
            data = json.load(handle)
            if isinstance(data, dict):
                data = data.get("elements")
            if not isinstance(data, list):
                raise ValueError(f"{path} must hold a list of element rows.")
            return data
    raise ValueError(f"Unsupported file extension: {path.suffix}")


def merge_row(row: Dict[str, Any], existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Apply the non-blank cells of ``row`` over ``existing`` (not mutated)."""
    symbol = str(row.get("symbol") or "").strip()
    if not symbol:
        raise ValueError("Raw row missing required 'symbol' column.")
    entry = dict(existing or {"symbol": symbol, "name": "", "category": ElementCategory.UNKNOWN.value})

    atomic_number = row.get("atomic_number")
    if atomic_number not in (None, ""):
        entry["atomic_number"] = int(atomic_number)
    elif entry.get("atomic_number") is None:
        raise ValueError(f"Atomic number required for symbol '{symbol}'.")

    if row.get("name"):
        entry["name"] = str(row["name"]).strip()
    if row.get("category"):
        entry["category"] = ElementCategory.parse(row["category"]).value

    states = parse_oxidation_states(row.get("oxidation_states"))
    if states:
        entry["oxidation_states"] = states
    entry.setdefault("oxidation_states", [])

    electronegativity = row.get("electronegativity_pauling")
    if electronegativity not in (None, ""):
        entry["electronegativity_pauling"] = float(electronegativity)
    entry.setdefault("electronegativity_pauling", None)
    return entry


def merge_rows(
    rows: Iterable[Dict[str, Any]],
    dataset: Optional[Dict[str, Any]] = None,
    version: Optional[str] = None,
) -> Dict[str, Any]:
    merged = dict(dataset or EMPTY_DATASET)
    by_symbol = {entry["symbol"]: entry for entry in merged.get("elements", [])}
    for row in rows:
        if not row.get("symbol"):
            logger.warning("Skipping row without symbol: %s", row)
            continue
        symbol = str(row["symbol"]).strip()
        by_symbol[symbol] = merge_row(row, by_symbol.get(symbol))
    merged["elements"] = sorted(by_symbol.values(), key=lambda entry: entry["atomic_number"])
    if version:
        merged["version"] = version
    return merged


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    dataset = None
    if args.out.exists():
        dataset = json.loads(args.out.read_text(encoding="utf-8"))
    merged = merge_rows(read_rows(args.source), dataset, version=args.version)

    if args.dry_run:
        print(json.dumps(merged, indent=2))
        return

    args.out.parent.mkdir(parents=True, exist_ok=True)
    args.out.write_text(json.dumps(merged, indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote %d elements to %s", len(merged["elements"]), args.out)


if __name__ == "__main__":
    main()
