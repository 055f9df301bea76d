"""
Sanity checks for core data assets.
"""

from __future__ import annotations

import pytest

from compounds.chem_data import ElementCategory, get_electronegativity


def test_periodic_table_contains_expected_elements(periodic_table_data) -> None:
    elements = periodic_table_data["elements"]
    symbols = {entry["symbol"] for entry in elements}
    for required in {"H", "O", "Na", "Cl", "C"}:
        assert required in symbols


def test_elements_are_sorted_and_unique(periodic_table_data) -> None:
    numbers = [entry["atomic_number"] for entry in periodic_table_data["elements"]]
    assert numbers == sorted(set(numbers))


def test_oxidation_states_are_integers(periodic_table_data) -> None:
    for entry in periodic_table_data["elements"]:
        assert entry["oxidation_states"], entry["symbol"]
        assert all(isinstance(state, int) for state in entry["oxidation_states"])


def test_categories_are_recognized(periodic_table_data) -> None:
    for entry in periodic_table_data["elements"]:
        assert ElementCategory.parse(entry["category"]) is not ElementCategory.UNKNOWN, entry["symbol"]


def test_dataset_agrees_with_electronegativity_table(periodic_table_data) -> None:
    for entry in periodic_table_data["elements"]:
        tabulated = get_electronegativity(entry["atomic_number"])
        recorded = entry["electronegativity_pauling"]
        if tabulated is not None and recorded is not None:
            assert recorded == pytest.approx(tabulated), entry["symbol"]


def test_periodic_table_status_fields(periodic_table_data) -> None:
    elements = periodic_table_data["elements"]
    for element in elements:
        assert "status" in element
    pending = [e for e in elements if e["status"] == "pending"]
    complete = [e for e in elements if e["status"] == "complete"]
    assert pending, "Expect pending placeholders for elements without electronegativity data."
    assert complete, "Expect at least one fully populated element entry."
