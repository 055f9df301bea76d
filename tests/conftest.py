"""
Shared pytest fixtures for the compound feasibility project.

These fixtures expose parsed configuration/data structures so tests can
build element sets without duplicating I/O logic.
"""

from __future__ import annotations

import json
import pathlib
import sys
from typing import Any, Callable, Dict, List

import pytest
import yaml

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from compounds.chem_data import Element  # noqa: E402
from compounds.config_loader import PeriodicTable, load_periodic_table  # noqa: E402


@pytest.fixture(scope="session")
def project_root() -> pathlib.Path:
    """Return repository root directory."""
    return REPO_ROOT


@pytest.fixture(scope="session")
def config_template(project_root: pathlib.Path) -> Dict[str, Any]:
    """Parsed representation of the default analyzer settings."""
    config_path = project_root / "config" / "analyzer.yaml"
    with config_path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


@pytest.fixture(scope="session")
def periodic_table_data(project_root: pathlib.Path) -> Dict[str, Any]:
    """Periodic table metadata loaded from the JSON dataset."""
    data_path = project_root / "data" / "periodic_table.json"
    with data_path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.fixture(scope="session")
def periodic_table(project_root: pathlib.Path) -> PeriodicTable:
    return load_periodic_table(project_root / "data" / "periodic_table.json")


@pytest.fixture(scope="session")
def pick(periodic_table: PeriodicTable) -> Callable[..., List[Element]]:
    """Resolve symbols to dataset elements: ``pick("H", "O")``."""

    def _pick(*symbols: str) -> List[Element]:
        return [periodic_table.get(symbol) for symbol in symbols]

    return _pick
