"""Tests for the bounded multi-element formula search."""

from __future__ import annotations

from compounds.chem_data import Element
from feasibility import (
    AnalyzerSettings,
    BondType,
    Likelihood,
    OxidationTerm,
    analyze,
    preferred_oxidation_state,
    search_formulas,
)


def test_preferred_state_prefers_small_magnitude_then_positive(pick) -> None:
    hydrogen, oxygen, fluorine, calcium = pick("H", "O", "F", "Ca")
    assert preferred_oxidation_state(hydrogen) == 1
    assert preferred_oxidation_state(oxygen) == 1
    assert preferred_oxidation_state(fluorine) == -1
    assert preferred_oxidation_state(calcium) == 2


def test_primary_search_order(pick) -> None:
    result = search_formulas(pick("Ca", "Li", "F"))
    assert not result.used_fallback
    assert len(result.candidates) == 48
    first = result.candidates[0]
    assert first.formula == "F2Ca"
    assert first.oxidation_assignment == (OxidationTerm("F", -1, 2), OxidationTerm("Ca", 2, 1))
    assert result.candidates[6].formula == "LiF"
    assert all(candidate.net_charge == 0 for candidate in result.candidates)


def test_small_atom_bound_enumerates_exhaustively(pick) -> None:
    result = search_formulas(pick("Li", "F", "Ca"), AnalyzerSettings(max_atoms=2))
    assert [c.formula for c in result.candidates] == ["F2Ca", "LiF", "Li2F2"]


def test_pairwise_fallback_when_preferred_states_share_sign(pick) -> None:
    result = search_formulas(pick("O", "C", "H"))
    assert result.used_fallback
    formulas = [c.formula for c in result.candidates]
    assert formulas[:4] == ["HC", "H2C", "H3C", "H4C"]
    assert formulas[-2:] == ["HO", "H2O"]
    assert len(formulas) == 10
    assert all(candidate.net_charge == 0 for candidate in result.candidates)


def test_crowded_search_is_possible_but_unstable(pick) -> None:
    analysis = analyze(pick("Li", "F", "Ca"))
    assert analysis.likelihood is Likelihood.POSSIBLE_BUT_UNSTABLE
    assert analysis.bond_type is BondType.IONIC
    assert len(analysis.candidates) == 20
    assert analysis.rationale.startswith("Found 48 possible charge-balanced formulas")


def test_mixed_character_rationale(pick) -> None:
    analysis = analyze(pick("Li", "F", "Ca"), settings=AnalyzerSettings(max_formulas=5))
    assert analysis.likelihood is Likelihood.POSSIBLE_BUT_UNSTABLE
    assert len(analysis.candidates) == 5
    assert analysis.rationale.startswith("Found 5 possible formulas with mixed ionic/covalent character")


def test_known_formula_among_candidates_raises_to_likely(pick) -> None:
    analysis = analyze(pick("H", "C", "O"))
    assert analysis.likelihood is Likelihood.LIKELY
    assert analysis.rationale.startswith("Methane is a stable hydrocarbon.")
    assert "primarily covalent character" in analysis.rationale


def test_missing_oxidation_states_names_element(pick) -> None:
    hydrogen, oxygen = pick("H", "O")
    inert_nitrogen = Element(atomic_number=7, symbol="N", name="Nitrogen", oxidation_states=(0,))
    analysis = analyze([hydrogen, inert_nitrogen, oxygen])
    assert analysis.likelihood is Likelihood.UNLIKELY
    assert analysis.candidates == ()
    assert analysis.rationale == "Nitrogen lacks non-zero oxidation states needed for compound formation."


def test_no_balanced_combination_is_unlikely() -> None:
    elements = [
        Element(atomic_number=3, symbol="Li", name="Lithium", oxidation_states=(1,)),
        Element(atomic_number=11, symbol="Na", name="Sodium", oxidation_states=(1,)),
        Element(atomic_number=19, symbol="K", name="Potassium", oxidation_states=(1,)),
    ]
    analysis = analyze(elements)
    assert analysis.likelihood is Likelihood.UNLIKELY
    assert analysis.candidates == ()
    assert "for 3 elements" in analysis.rationale


def test_elements_without_electronegativity(pick) -> None:
    analysis = analyze(pick("Eu", "Pm", "Sm"))
    assert analysis.likelihood is Likelihood.POSSIBLE_BUT_UNSTABLE
    assert analysis.bond_type is BondType.UNKNOWN
    assert [c.formula for c in analysis.candidates] == ["PmSmEu"]
    assert analysis.electronegativity_difference is None


def test_default_formula_cap_is_reached(pick) -> None:
    result = search_formulas(pick("Na", "F", "Li"))
    assert not result.used_fallback
    assert len(result.candidates) == 50
    assert result.candidates[0].formula == "FNa"
    assert result.candidates[12].formula == "LiF"
    assert all(candidate.net_charge == 0 for candidate in result.candidates)

    analysis = analyze(pick("Na", "F", "Li"))
    assert len(analysis.candidates) == 20
    assert analysis.rationale.startswith("Found 50 possible charge-balanced formulas")


def test_known_pair_among_candidates_raises_to_likely(pick) -> None:
    analysis = analyze(pick("S", "Na", "H"))
    assert analysis.likelihood is Likelihood.LIKELY
    assert "H2S" in [c.formula for c in analysis.candidates]
    assert analysis.rationale.startswith("Hydrogen sulfide (H₂S) is a known compound.")
    assert "mixed ionic/covalent character" in analysis.rationale
