"""
Registry of well-established compounds.

Two read-only tables back the lookups: one keyed by an unordered pair of
element symbols, one keyed by formula. Formula lookups compare compositions
rather than text, so the atomic-number ordering used for rendered formulas
("H4C") still finds the conventional spelling ("CH4").
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

_SUBSCRIPT_MAP = str.maketrans("₀₁₂₃₄₅₆₇₈₉", "0123456789")
_ELEMENT_PATTERN = re.compile(r"([A-Z][a-z]?)(\d*)")

KNOWN_PAIRS: Mapping[FrozenSet[str], str] = MappingProxyType(
    {
        frozenset({"H", "O"}): "Water (H₂O) is one of the most stable compounds.",
        frozenset({"H", "Cl"}): "Hydrochloric acid (HCl) is a very stable compound.",
        frozenset({"Na", "Cl"}): "Table salt (NaCl) is extremely stable.",
        frozenset({"C", "O"}): "Carbon dioxide (CO₂) and carbon monoxide (CO) are stable.",
        frozenset({"N", "H"}): "Ammonia (NH₃) is a stable compound.",
        frozenset({"Ca", "O"}): "Calcium oxide (CaO) is a common stable compound.",
        frozenset({"Mg", "O"}): "Magnesium oxide (MgO) is highly stable.",
        frozenset({"Fe", "O"}): "Iron oxides (FeO, Fe₂O₃) are common and stable.",
        frozenset({"Al", "O"}): "Aluminum oxide (Al₂O₃) is extremely stable.",
        frozenset({"Si", "O"}): "Silicon dioxide (SiO₂) is very stable - quartz.",
        frozenset({"H", "S"}): "Hydrogen sulfide (H₂S) is a known compound.",
        frozenset({"K", "Cl"}): "Potassium chloride (KCl) is stable.",
        frozenset({"Ca", "Cl"}): "Calcium chloride (CaCl₂) is stable.",
    }
)

KNOWN_FORMULAS: Mapping[str, str] = MappingProxyType(
    {
        "H2O": "Water is one of the most stable and abundant compounds.",
        "H2O2": "Hydrogen peroxide is a well-known oxidizer.",
        "NaCl": "Table salt is extremely stable.",
        "CO2": "Carbon dioxide is a stable and common gas.",
        "CO": "Carbon monoxide is stable though toxic.",
        "NH3": "Ammonia is a stable and important compound.",
        "CH4": "Methane is a stable hydrocarbon.",
        "C2H6": "Ethane is a stable hydrocarbon.",
        "C3H8": "Propane is a stable fuel.",
        "C6H12O6": "Glucose is a fundamental biological molecule.",
        "H2SO4": "Sulfuric acid is a very stable strong acid.",
        "HCl": "Hydrochloric acid is highly stable.",
        "HNO3": "Nitric acid is a stable strong acid.",
        "CaCO3": "Calcium carbonate (limestone) is very stable.",
        "NaOH": "Sodium hydroxide is a stable strong base.",
        "KOH": "Potassium hydroxide is a stable strong base.",
        "CaO": "Calcium oxide (quicklime) is stable.",
        "MgO": "Magnesium oxide is highly stable.",
        "Al2O3": "Aluminum oxide (corundum) is extremely stable.",
        "SiO2": "Silicon dioxide (quartz) is very stable.",
        "Fe2O3": "Iron(III) oxide (rust) is stable.",
        "FeO": "Iron(II) oxide is a known compound.",
        "CaCl2": "Calcium chloride is stable.",
        "Na2SO4": "Sodium sulfate is stable.",
        "K2CO3": "Potassium carbonate is stable.",
        "C8H10N4O2": "Caffeine - a stable alkaloid compound!",
    }
)


def parse_formula(formula: str) -> Dict[str, int]:
    """
    Parse a formula into element counts.

    Example:
        >>> parse_formula("C6H12O6")
        {'C': 6, 'H': 12, 'O': 6}
        >>> parse_formula("H₂O")
        {'H': 2, 'O': 1}

    Repeated symbols accumulate ("CH3CH3" -> {'C': 2, 'H': 6}).
    """
    counts: Dict[str, int] = {}
    if not formula:
        return counts
    for symbol, digits in _ELEMENT_PATTERN.findall(formula.translate(_SUBSCRIPT_MAP)):
        counts[symbol] = counts.get(symbol, 0) + (int(digits) if digits else 1)
    return counts


def _composition_key(counts: Mapping[str, int]) -> FrozenSet[Tuple[str, int]]:
    return frozenset((symbol, count) for symbol, count in counts.items() if count > 0)


_FORMULAS_BY_COMPOSITION: Mapping[FrozenSet[Tuple[str, int]], str] = MappingProxyType(
    {_composition_key(parse_formula(formula)): formula for formula in KNOWN_FORMULAS}
)


def describe_pair(symbol_a: str, symbol_b: str) -> Optional[str]:
    """Return the registry sentence for an unordered element pair, if any."""

    return KNOWN_PAIRS.get(frozenset({symbol_a, symbol_b}))


def match_formula(formula: str) -> Optional[str]:
    """Return the conventional registry spelling matching ``formula``'s composition."""

    return _FORMULAS_BY_COMPOSITION.get(_composition_key(parse_formula(formula)))


def describe_formula(formula: str) -> Optional[str]:
    """Return the registry sentence for a formula, independent of element order."""

    known = match_formula(formula)
    return KNOWN_FORMULAS[known] if known else None
