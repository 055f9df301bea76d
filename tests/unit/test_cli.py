"""Tests for the command-line front end."""

from __future__ import annotations

import json

import pytest

from compounds.cli import main


def test_json_report_for_water(capsys) -> None:
    assert main(["O", "H", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["likelihood"] == "likely"
    assert payload["bond_type"] == "polar covalent"
    assert "H2O" in [c["formula"] for c in payload["candidates"]]


def test_formula_option_validates_user_counts(capsys) -> None:
    assert main(["--formula", "CH4"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("LIKELY")
    assert "H4C" in out
    assert "Methane" in out


def test_count_option_accepts_names_and_numbers(capsys) -> None:
    assert main(["--count", "Sodium=1", "--count", "17=2", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["user_specified"] is True
    assert payload["candidates"][0]["formula"] == "NaCl2"
    assert payload["likelihood"] == "possible but unstable"


def test_text_report_truncates_formulas(capsys) -> None:
    assert main(["Fe", "O"]) == 0
    out = capsys.readouterr().out
    assert "more possibilities" in out
    assert "Electronegativity difference: 1.61" in out


def test_search_lists_matches(capsys) -> None:
    assert main(["--search", "chlor"]) == 0
    out = capsys.readouterr().out
    assert "Cl" in out
    assert "Chlorine" in out


@pytest.mark.parametrize(
    "argv",
    [
        ["H"],
        ["Xx", "O"],
        ["H", "O", "--count", "H"],
        ["H", "O", "--count", "H=-1"],
        ["--formula", "123"],
    ],
)
def test_usage_errors_exit_with_status_two(argv) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
