"""
Utilities for loading analyzer settings from YAML and element records from
the JSON periodic-table dataset.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import yaml

from feasibility import AnalyzerSettings
from compounds.chem_data import Element


logger = logging.getLogger(__name__)

_SEARCH_KEYS = ("max_atoms", "max_formulas", "max_surfaced_candidates", "fallback_limit")


@dataclass
class SettingsBundle:
    """Container returned by the settings loader."""

    settings: AnalyzerSettings
    metadata: Dict[str, Any] = field(default_factory=dict)
    dataset_path: Optional[Path] = None


def load_settings_from_yaml(path: Path) -> SettingsBundle:
    """Load analyzer settings plus metadata and the dataset location from YAML."""
    data = _load_yaml(path)
    settings = _build_settings(data.get("search") or {})
    dataset_path = None
    dataset = data.get("dataset") or {}
    if dataset.get("path"):
        dataset_path = Path(dataset["path"])
        if not dataset_path.is_absolute():
            dataset_path = path.parent / dataset_path
    return SettingsBundle(settings=settings, metadata=data.get("metadata") or {}, dataset_path=dataset_path)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle)
    if not isinstance(content, dict):
        raise ValueError(f"YAML file {path} must contain a mapping at the root.")
    return content


def _build_settings(config: Dict[str, Any]) -> AnalyzerSettings:
    unknown = set(config) - set(_SEARCH_KEYS)
    if unknown:
        raise ValueError(f"Unknown search settings: {', '.join(sorted(unknown))}")
    values: Dict[str, int] = {}
    for key in _SEARCH_KEYS:
        if key not in config:
            continue
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"Search setting '{key}' must be a positive integer, got {value!r}.")
        values[key] = value
    return AnalyzerSettings(**values)


class PeriodicTable:
    """Read-only collection of element records with symbol/name/number lookup."""

    def __init__(self, elements: Iterable[Element], version: str = "", source: str = ""):
        self.elements: List[Element] = sorted(elements, key=lambda el: el.atomic_number)
        self.version = version
        self.source = source
        self._by_symbol = {el.symbol.lower(): el for el in self.elements}
        self._by_name = {el.name.lower(): el for el in self.elements if el.name}
        self._by_number = {el.atomic_number: el for el in self.elements}

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    def get(self, token: Union[str, int]) -> Element:
        """Resolve a symbol, element name or atomic number; raises KeyError."""
        if isinstance(token, int):
            element = self._by_number.get(token)
        else:
            key = token.strip().lower()
            if key.isdigit():
                element = self._by_number.get(int(key))
            else:
                element = self._by_symbol.get(key) or self._by_name.get(key)
        if element is None:
            raise KeyError(f"Unknown element: {token!r}")
        return element

    def search(self, query: str) -> List[Element]:
        query = query.strip().lower()
        if not query:
            return []
        return [
            el
            for el in self.elements
            if query in el.name.lower() or query in el.symbol.lower() or query in str(el.atomic_number)
        ]

    def categories(self) -> Dict[str, int]:
        return dict(Counter(el.category.value for el in self.elements))


def load_periodic_table(path: Path) -> PeriodicTable:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if isinstance(data, list):
        records, version, source = data, "", ""
    elif isinstance(data, dict) and isinstance(data.get("elements"), list):
        records, version, source = data["elements"], str(data.get("version", "")), str(data.get("source", ""))
    else:
        raise ValueError(f"Dataset {path} must be a list of elements or contain an 'elements' list.")
    elements = [Element.from_mapping(record) for record in records]
    logger.info("Loaded %d elements from %s", len(elements), path)
    return PeriodicTable(elements, version=version, source=source)
