"""
Compound feasibility engine.

Given two or more element records, and optionally user-chosen atom counts,
decide whether the elements could plausibly form a stable compound: propose
charge-balanced formulas, classify the dominant bond character and return a
qualitative verdict with a readable rationale.

Conventions:
    - Elements are processed in ascending atomic-number order, so formula
      text and tie-breaks never depend on input order.
    - Rendered formulas elide a subscript of 1 ("NaCl", "H2O").
    - Electronegativity uses the Pauling scale (see compounds.chem_data).

This is a heuristic decision procedure over oxidation-state and
electronegativity tables, not a thermodynamic model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import combinations
import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from compounds.chem_data import Element
from compounds.known_compounds import describe_formula, describe_pair


logger = logging.getLogger(__name__)

IONIC_THRESHOLD = 1.7
POLAR_THRESHOLD = 0.4
STRONG_IONIC_THRESHOLD = 2.0
MIXED_CHARACTER_THRESHOLD = 1.5
CROWDED_SEARCH_THRESHOLD = 20

MAX_ATOMS = 12
MAX_FORMULAS = 50
MAX_SURFACED_CANDIDATES = 20
FALLBACK_LIMIT = 10

ExplicitCounts = Union[Mapping[Element, int], Iterable[Tuple[Element, int]]]


class Likelihood(Enum):
    LIKELY = "likely"
    POSSIBLE_BUT_UNSTABLE = "possible but unstable"
    UNLIKELY = "unlikely"

    @property
    def rank(self) -> int:
        return _LIKELIHOOD_RANK[self]


_LIKELIHOOD_RANK = {
    Likelihood.UNLIKELY: 0,
    Likelihood.POSSIBLE_BUT_UNSTABLE: 1,
    Likelihood.LIKELY: 2,
}


class BondType(Enum):
    IONIC = "ionic"
    POLAR_COVALENT = "polar covalent"
    NONPOLAR_COVALENT = "nonpolar covalent"
    NONE = "none"
    UNKNOWN = "unknown"
    MIXED = "mixed"


@dataclass(frozen=True)
class AnalyzerSettings:
    """Search bounds. Bond thresholds are fixed and deliberately absent here."""

    max_atoms: int = MAX_ATOMS
    max_formulas: int = MAX_FORMULAS
    max_surfaced_candidates: int = MAX_SURFACED_CANDIDATES
    fallback_limit: int = FALLBACK_LIMIT


DEFAULT_SETTINGS = AnalyzerSettings()


@dataclass(frozen=True)
class OxidationTerm:
    symbol: str
    oxidation_state: int
    count: int = 1

    @property
    def charge(self) -> int:
        return self.oxidation_state * self.count

    def describe(self) -> str:
        text = f"{self.symbol}: {self.oxidation_state:+d}"
        return f"{text} (×{self.count})" if self.count > 1 else text


@dataclass(frozen=True)
class CompoundCandidate:
    formula: str
    oxidation_assignment: Tuple[OxidationTerm, ...] = ()

    @property
    def net_charge(self) -> int:
        return sum(term.charge for term in self.oxidation_assignment)

    def describe_oxidation_states(self) -> str:
        return ", ".join(term.describe() for term in self.oxidation_assignment)


@dataclass(frozen=True)
class BondAssessment:
    bond_type: BondType
    max_difference: Optional[float]
    missing: Tuple[Element, ...] = ()


@dataclass(frozen=True)
class SearchResult:
    candidates: Tuple[CompoundCandidate, ...]
    used_fallback: bool = False


@dataclass(frozen=True)
class CompoundAnalysis:
    likelihood: Likelihood
    bond_type: BondType
    candidates: Tuple[CompoundCandidate, ...]
    electronegativity_difference: Optional[float]
    rationale: str
    elements: Tuple[Element, ...]
    user_specified: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation with enum members flattened to strings."""
        return {
            "likelihood": self.likelihood.value,
            "bond_type": self.bond_type.value,
            "candidates": [
                {
                    "formula": candidate.formula,
                    "oxidation_states": [
                        {
                            "symbol": term.symbol,
                            "oxidation_state": term.oxidation_state,
                            "count": term.count,
                        }
                        for term in candidate.oxidation_assignment
                    ],
                    "annotation": candidate.describe_oxidation_states(),
                }
                for candidate in self.candidates
            ],
            "electronegativity_difference": self.electronegativity_difference,
            "rationale": self.rationale,
            "elements": [
                {"atomic_number": el.atomic_number, "symbol": el.symbol, "name": el.name}
                for el in self.elements
            ],
            "user_specified": self.user_specified,
        }


def render_formula(counts: Iterable[Tuple[Element, int]]) -> str:
    """Canonical formula text: ascending atomic number, zero counts dropped, 1 elided."""
    parts = []
    for element, count in sorted(counts, key=lambda item: item[0].atomic_number):
        if count <= 0:
            continue
        parts.append(element.symbol + (str(count) if count > 1 else ""))
    return "".join(parts)


def noble_gas_rationale(noble_gases: Sequence[Element]) -> str:
    names = ", ".join(el.display_name for el in noble_gases)
    if len(noble_gases) > 1:
        subject = f"{names} are noble gases"
    else:
        subject = f"{names} is a noble gas"
    return f"{subject} with a complete valence shell and will not readily form compounds."


def classify_difference(difference: float) -> BondType:
    if difference > IONIC_THRESHOLD:
        return BondType.IONIC
    if difference > POLAR_THRESHOLD:
        return BondType.POLAR_COVALENT
    return BondType.NONPOLAR_COVALENT


def classify_bond(elements: Sequence[Element]) -> BondAssessment:
    """
    Classify bond character from the largest pairwise electronegativity gap.

    Elements without a tabulated electronegativity make the result
    ``BondType.UNKNOWN``; no exception is raised.
    """
    missing = tuple(el for el in elements if el.electronegativity is None)
    if missing:
        return BondAssessment(BondType.UNKNOWN, None, missing)
    values = [el.electronegativity for el in elements]
    difference = max((abs(a - b) for a, b in combinations(values, 2)), default=0.0)
    return BondAssessment(classify_difference(difference), difference)


def _opposite_signs(state_a: int, state_b: int) -> bool:
    return (state_a > 0 and state_b < 0) or (state_a < 0 and state_b > 0)


def _pair_candidate(first: Element, state_a: int, second: Element, state_b: int) -> CompoundCandidate:
    divisor = math.gcd(abs(state_a), abs(state_b))
    count_a = abs(state_b) // divisor
    count_b = abs(state_a) // divisor
    return CompoundCandidate(
        formula=render_formula(((first, count_a), (second, count_b))),
        oxidation_assignment=(
            OxidationTerm(first.symbol, state_a, count_a),
            OxidationTerm(second.symbol, state_b, count_b),
        ),
    )


def solve_binary(first: Element, second: Element) -> List[CompoundCandidate]:
    """Closed-form charge balancing for every opposite-sign oxidation-state pair."""
    candidates: List[CompoundCandidate] = []
    for state_a in first.nonzero_oxidation_states:
        for state_b in second.nonzero_oxidation_states:
            if _opposite_signs(state_a, state_b):
                candidates.append(_pair_candidate(first, state_a, second, state_b))
    return candidates


def preferred_oxidation_state(element: Element) -> int:
    """Smallest magnitude nonzero state; positive wins a tie."""
    return min(element.nonzero_oxidation_states, key=lambda state: (abs(state), -state))


def _search_counts(preferred: Sequence[int], max_atoms: int, limit: int) -> List[Tuple[int, ...]]:
    found: List[Tuple[int, ...]] = []
    last = len(preferred) - 1
    # largest |state| among the elements still to be assigned after index i
    tail_max = [max((abs(state) for state in preferred[i + 1 :]), default=0) for i in range(len(preferred))]

    def descend(index: int, counts: List[int], charge: int) -> None:
        for count in range(max_atoms + 1):
            if len(found) >= limit:
                return
            new_charge = charge + preferred[index] * count
            if index == last:
                if new_charge == 0:
                    assignment = tuple(counts + [count])
                    if sum(1 for value in assignment if value > 0) >= 2:
                        found.append(assignment)
                continue
            correction = (last - index) * max_atoms * tail_max[index]
            if abs(new_charge) <= correction:
                descend(index + 1, counts + [count], new_charge)

    descend(0, [], 0)
    return found


def _pairwise_fallback(elements: Sequence[Element], limit: int) -> List[CompoundCandidate]:
    candidates: List[CompoundCandidate] = []
    for first, second in combinations(elements, 2):
        for state_a in first.nonzero_oxidation_states:
            for state_b in second.nonzero_oxidation_states:
                if not _opposite_signs(state_a, state_b):
                    continue
                candidates.append(_pair_candidate(first, state_a, second, state_b))
                if len(candidates) >= limit:
                    return candidates
    return candidates


def search_formulas(elements: Sequence[Element], settings: AnalyzerSettings = DEFAULT_SETTINGS) -> SearchResult:
    """
    Bounded search for charge-balanced atom counts across all elements.

    Each element is pinned to its preferred oxidation state and counts
    0..max_atoms are explored depth first, pruning partial assignments whose
    charge the remaining elements can no longer cancel. When nothing
    balances, every element pair is tried with the binary GCD method instead
    (the other elements get a count of zero).

    Every element must carry at least one nonzero oxidation state.
    """
    ordered = sorted(elements, key=lambda el: el.atomic_number)
    preferred = [preferred_oxidation_state(el) for el in ordered]
    assignments = _search_counts(preferred, settings.max_atoms, settings.max_formulas)
    candidates = []
    for assignment in assignments:
        terms = tuple(
            OxidationTerm(el.symbol, state, count)
            for el, state, count in zip(ordered, preferred, assignment)
            if count > 0
        )
        candidates.append(CompoundCandidate(render_formula(zip(ordered, assignment)), terms))
    logger.debug(
        "Preferred-state search over %s found %d formulas",
        "".join(el.symbol for el in ordered),
        len(candidates),
    )
    if candidates:
        return SearchResult(tuple(candidates))
    fallback = _pairwise_fallback(ordered, settings.fallback_limit)
    logger.debug("Pairwise fallback produced %d formulas", len(fallback))
    return SearchResult(tuple(fallback), used_fallback=True)


def find_charge_balance(counts: Sequence[Tuple[Element, int]]) -> Optional[Tuple[OxidationTerm, ...]]:
    """
    Return the first oxidation-state assignment that sums to zero, or None.

    States are tried in each element's listed order, depth first, across the
    full cross product of nonzero states.
    """
    options = [element.nonzero_oxidation_states for element, _ in counts]
    if any(not states for states in options):
        return None

    def descend(index: int, charge: int, chosen: Tuple[OxidationTerm, ...]) -> Optional[Tuple[OxidationTerm, ...]]:
        if index == len(counts):
            return chosen if charge == 0 else None
        element, count = counts[index]
        for state in options[index]:
            result = descend(index + 1, charge + state * count, chosen + (OxidationTerm(element.symbol, state, count),))
            if result is not None:
                return result
        return None

    return descend(0, 0, ())


def _upgrade(current: Likelihood, proposed: Likelihood) -> Likelihood:
    return proposed if proposed.rank > current.rank else current


def _apply_known_compound(likelihood: Likelihood, rationale: str, sentence: Optional[str]) -> Tuple[Likelihood, str]:
    if not sentence:
        return likelihood, rationale
    return _upgrade(likelihood, Likelihood.LIKELY), f"{sentence} {rationale}"


def _known_pair_among(candidates: Sequence[CompoundCandidate]) -> Optional[str]:
    for candidate in candidates:
        terms = candidate.oxidation_assignment
        if len(terms) == 2:
            sentence = describe_pair(terms[0].symbol, terms[1].symbol)
            if sentence:
                return sentence
    return None


def _assess_binary(first: Element, second: Element, bond: BondAssessment) -> Tuple[Likelihood, List[CompoundCandidate], str]:
    candidates = solve_binary(first, second)
    difference = bond.max_difference or 0.0
    if not candidates:
        return Likelihood.UNLIKELY, candidates, "Unable to balance charges with available oxidation states."
    if bond.bond_type is BondType.IONIC and difference > STRONG_IONIC_THRESHOLD:
        rationale = (
            f"Strong ionic bonding expected with electronegativity difference of {difference:.2f}. "
            "Charges balance well."
        )
    elif bond.bond_type is BondType.IONIC:
        rationale = (
            f"Ionic bonding expected with electronegativity difference of {difference:.2f}. "
            "Stable compound likely."
        )
    elif bond.bond_type is BondType.POLAR_COVALENT:
        rationale = (
            f"Polar covalent bonding with electronegativity difference of {difference:.2f}. "
            "Stable molecular compound."
        )
    else:
        rationale = (
            f"Covalent bonding with electronegativity difference of {difference:.2f}. "
            "Stable compound expected."
        )
    return Likelihood.LIKELY, candidates, rationale


def _assess_multi(
    elements: Sequence[Element], bond: BondAssessment, settings: AnalyzerSettings
) -> Tuple[Likelihood, SearchResult, str]:
    difference = bond.max_difference or 0.0
    result = search_formulas(elements, settings)
    found = len(result.candidates)
    plural = "s" if found > 1 else ""
    if found == 0:
        return (
            Likelihood.UNLIKELY,
            result,
            f"Unable to find charge-balanced combinations with available oxidation states for {len(elements)} elements.",
        )
    if found > CROWDED_SEARCH_THRESHOLD:
        rationale = (
            f"Found {found} possible charge-balanced formulas with max electronegativity difference of "
            f"{difference:.2f}. Multi-element compounds are often complex and may require specific "
            "conditions for stability."
        )
    elif difference > MIXED_CHARACTER_THRESHOLD:
        rationale = (
            f"Found {found} possible formula{plural} with mixed ionic/covalent character "
            f"(ΔEN = {difference:.2f}). Complex multi-element compounds may form under specific conditions."
        )
    else:
        rationale = (
            f"Found {found} charge-balanced formula{plural} with primarily covalent character "
            f"(ΔEN = {difference:.2f}). Multi-element organic/molecular compounds may be stable but "
            "require specific structural knowledge."
        )
    return Likelihood.POSSIBLE_BUT_UNSTABLE, result, rationale


def _missing_oxidation_rationale(missing: Sequence[Element]) -> str:
    names = ", ".join(el.display_name for el in missing)
    verb = "lacks" if len(missing) == 1 else "lack"
    return f"{names} {verb} non-zero oxidation states needed for compound formation."


def _analyze_user_formula(elements: Tuple[Element, ...], counts: List[Tuple[Element, int]]) -> CompoundAnalysis:
    counts = sorted(counts, key=lambda item: item[0].atomic_number)
    counted = [element for element, _ in counts]
    formula = render_formula(counts)

    noble_gases = [el for el in elements if el.is_noble_gas]
    if noble_gases:
        return CompoundAnalysis(
            likelihood=Likelihood.UNLIKELY,
            bond_type=BondType.NONE,
            candidates=(CompoundCandidate(formula),),
            electronegativity_difference=None,
            rationale=noble_gas_rationale(noble_gases),
            elements=elements,
            user_specified=True,
        )

    bond = classify_bond(counted)
    if bond.missing:
        return CompoundAnalysis(
            likelihood=Likelihood.POSSIBLE_BUT_UNSTABLE,
            bond_type=BondType.UNKNOWN,
            candidates=(CompoundCandidate(formula),),
            electronegativity_difference=None,
            rationale=f"Insufficient electronegativity data available for complete analysis of your formula {formula}.",
            elements=elements,
            user_specified=True,
        )

    difference = bond.max_difference or 0.0
    balance = find_charge_balance(counts)
    if balance is None:
        if any(not el.nonzero_oxidation_states for el in counted):
            reason = "Some elements lack defined oxidation states."
        else:
            reason = "Could not find oxidation states that balance the total charge to zero."
        likelihood = Likelihood.POSSIBLE_BUT_UNSTABLE
        rationale = (
            f"Your formula {formula} does not achieve perfect charge balance with common oxidation states. "
            f"{reason} The compound may still exist but could be unstable or require unusual bonding."
        )
        candidate = CompoundCandidate(formula)
    else:
        known = describe_formula(formula)
        if known:
            likelihood = Likelihood.LIKELY
            rationale = f"Your formula {formula} is charge-balanced and matches known stable compound patterns. {known}"
        elif bond.bond_type is BondType.IONIC and difference > IONIC_THRESHOLD:
            likelihood = Likelihood.LIKELY
            rationale = (
                f"Your formula {formula} is charge-balanced with strong ionic character "
                f"(ΔEN = {difference:.2f}). This suggests a stable ionic compound."
            )
        elif difference > POLAR_THRESHOLD:
            likelihood = Likelihood.LIKELY
            rationale = (
                f"Your formula {formula} is charge-balanced with {bond.bond_type.value} bonding "
                f"(ΔEN = {difference:.2f}). This could form a stable compound."
            )
        else:
            likelihood = Likelihood.POSSIBLE_BUT_UNSTABLE
            rationale = (
                f"Your formula {formula} is charge-balanced but has weak electronegativity differences "
                f"(ΔEN = {difference:.2f}). May require specific molecular structure."
            )
        candidate = CompoundCandidate(formula, balance)

    return CompoundAnalysis(
        likelihood=likelihood,
        bond_type=bond.bond_type,
        candidates=(candidate,),
        electronegativity_difference=bond.max_difference,
        rationale=rationale,
        elements=elements,
        user_specified=True,
    )


def _normalize_counts(explicit_counts: Optional[ExplicitCounts]) -> List[Tuple[Element, int]]:
    if explicit_counts is None:
        return []
    items = explicit_counts.items() if isinstance(explicit_counts, Mapping) else explicit_counts
    return [(element, int(count)) for element, count in items if int(count) > 0]


def analyze(
    elements: Iterable[Element],
    explicit_counts: Optional[ExplicitCounts] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> CompoundAnalysis:
    """
    Assess whether ``elements`` could form a stable compound.

    ``explicit_counts`` (pairs or a mapping of element to atom count) switches
    to validating that single user formula instead of searching. Callers
    supply at least two distinct elements. Every input degrades to a verdict;
    nothing here raises for chemically implausible input.
    """
    settings = settings or DEFAULT_SETTINGS
    ordered = tuple(sorted(elements, key=lambda el: el.atomic_number))
    symbols = "".join(el.symbol for el in ordered)

    counts = _normalize_counts(explicit_counts)
    if counts:
        logger.debug("Validating user formula over %s", symbols)
        return _analyze_user_formula(ordered, counts)

    noble_gases = [el for el in ordered if el.is_noble_gas]
    if noble_gases:
        return CompoundAnalysis(
            likelihood=Likelihood.UNLIKELY,
            bond_type=BondType.NONE,
            candidates=(),
            electronegativity_difference=None,
            rationale=noble_gas_rationale(noble_gases),
            elements=ordered,
        )

    bond = classify_bond(ordered)
    if bond.missing:
        logger.debug("No electronegativity for %s", ", ".join(el.symbol for el in bond.missing))
        return CompoundAnalysis(
            likelihood=Likelihood.POSSIBLE_BUT_UNSTABLE,
            bond_type=BondType.UNKNOWN,
            candidates=(CompoundCandidate(symbols),),
            electronegativity_difference=None,
            rationale="Insufficient electronegativity data available for complete analysis.",
            elements=ordered,
        )

    lacking = [el for el in ordered if not el.nonzero_oxidation_states]
    if lacking:
        if len(ordered) == 2:
            rationale = "One or both elements lack non-zero oxidation states needed for compound formation."
        else:
            rationale = _missing_oxidation_rationale(lacking)
        return CompoundAnalysis(
            likelihood=Likelihood.UNLIKELY,
            bond_type=bond.bond_type,
            candidates=(),
            electronegativity_difference=bond.max_difference,
            rationale=rationale,
            elements=ordered,
        )

    if len(ordered) == 2:
        logger.debug("Binary analysis of %s (%s)", symbols, bond.bond_type.value)
        first, second = ordered
        likelihood, found, rationale = _assess_binary(first, second, bond)
        candidates = tuple(found)
        known = describe_pair(first.symbol, second.symbol)
    else:
        logger.debug("Multi-element analysis of %s (%s)", symbols, bond.bond_type.value)
        likelihood, result, rationale = _assess_multi(ordered, bond, settings)
        candidates = result.candidates[: settings.max_surfaced_candidates]
        known = next(
            (sentence for sentence in (describe_formula(c.formula) for c in candidates) if sentence),
            None,
        ) or _known_pair_among(candidates)

    likelihood, rationale = _apply_known_compound(likelihood, rationale, known)
    return CompoundAnalysis(
        likelihood=likelihood,
        bond_type=bond.bond_type,
        candidates=candidates[: settings.max_surfaced_candidates],
        electronegativity_difference=bond.max_difference,
        rationale=rationale,
        elements=ordered,
    )
