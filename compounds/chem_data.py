"""Element metadata used for electronegativity-driven bonding heuristics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

# Pauling scale, keyed by atomic number. Noble gases He, Ne and Ar carry no
# value; elements past Nd (Z = 60) are not tabulated.
ELECTRONEGATIVITY_PAULING: Dict[int, Optional[float]] = {
    1: 2.20,  # H
    2: None,  # He
    3: 0.98,  # Li
    4: 1.57,  # Be
    5: 2.04,  # B
    6: 2.55,  # C
    7: 3.04,  # N
    8: 3.44,  # O
    9: 3.98,  # F
    10: None,  # Ne
    11: 0.93,  # Na
    12: 1.31,  # Mg
    13: 1.61,  # Al
    14: 1.90,  # Si
    15: 2.19,  # P
    16: 2.58,  # S
    17: 3.16,  # Cl
    18: None,  # Ar
    19: 0.82,  # K
    20: 1.00,  # Ca
    21: 1.36,  # Sc
    22: 1.54,  # Ti
    23: 1.63,  # V
    24: 1.66,  # Cr
    25: 1.55,  # Mn
    26: 1.83,  # Fe
    27: 1.88,  # Co
    28: 1.91,  # Ni
    29: 1.90,  # Cu
    30: 1.65,  # Zn
    31: 1.81,  # Ga
    32: 2.01,  # Ge
    33: 2.18,  # As
    34: 2.55,  # Se
    35: 2.96,  # Br
    36: 3.00,  # Kr (revised)
    37: 0.82,  # Rb
    38: 0.95,  # Sr
    39: 1.22,  # Y
    40: 1.33,  # Zr
    41: 1.60,  # Nb
    42: 2.16,  # Mo
    43: 1.90,  # Tc
    44: 2.20,  # Ru
    45: 2.28,  # Rh
    46: 2.20,  # Pd
    47: 1.93,  # Ag
    48: 1.69,  # Cd
    49: 1.78,  # In
    50: 1.96,  # Sn
    51: 2.05,  # Sb
    52: 2.10,  # Te
    53: 2.66,  # I
    54: 2.60,  # Xe (revised)
    55: 0.79,  # Cs
    56: 0.89,  # Ba
    57: 1.10,  # La
    58: 1.12,  # Ce
    59: 1.13,  # Pr
    60: 1.14,  # Nd
}


class ElementCategory(Enum):
    ALKALI_METAL = "alkali metal"
    ALKALINE_EARTH_METAL = "alkaline earth metal"
    TRANSITION_METAL = "transition metal"
    POST_TRANSITION_METAL = "post-transition metal"
    METALLOID = "metalloid"
    DIATOMIC_NONMETAL = "diatomic nonmetal"
    POLYATOMIC_NONMETAL = "polyatomic nonmetal"
    NOBLE_GAS = "noble gas"
    LANTHANIDE = "lanthanide"
    ACTINIDE = "actinide"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "ElementCategory":
        """Map free-form dataset labels ("Noble-Gas", "noble_gas") onto a category."""
        if isinstance(value, ElementCategory):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        label = " ".join(value.strip().lower().replace("_", " ").split())
        # "post-transition" keeps its hyphen, everything else is space separated
        label = label.replace("-", " ").replace("post transition", "post-transition")
        for member in cls:
            if member.value == label:
                return member
        return cls.UNKNOWN


def get_electronegativity(atomic_number: int) -> Optional[float]:
    """Return the Pauling electronegativity for an atomic number, if tabulated."""

    return ELECTRONEGATIVITY_PAULING.get(atomic_number)


def _parse_oxidation_states(values: Optional[Iterable[Any]]) -> Tuple[int, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        values = [item for item in values.replace(",", ";").split(";") if item.strip()]
    states = []
    for value in values:
        try:
            states.append(int(str(value).strip()))
        except ValueError as exc:
            raise ValueError(f"Could not parse oxidation state from '{value}'") from exc
    return tuple(states)


@dataclass(frozen=True)
class Element:
    atomic_number: int
    symbol: str
    name: str = ""
    category: ElementCategory = ElementCategory.UNKNOWN
    oxidation_states: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def electronegativity(self) -> Optional[float]:
        return get_electronegativity(self.atomic_number)

    @property
    def is_noble_gas(self) -> bool:
        return self.category is ElementCategory.NOBLE_GAS

    @property
    def nonzero_oxidation_states(self) -> Tuple[int, ...]:
        return tuple(state for state in self.oxidation_states if state != 0)

    @property
    def display_name(self) -> str:
        return self.name or self.symbol

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "Element":
        """Build an element from a dataset record (snake_case or camelCase keys)."""
        atomic_number = record.get("atomic_number", record.get("atomicNumber"))
        symbol = record.get("symbol")
        if atomic_number is None or not symbol:
            raise ValueError("Element records require 'symbol' and 'atomic_number'.")
        oxidation = record.get("oxidation_states", record.get("oxidationStates"))
        return cls(
            atomic_number=int(atomic_number),
            symbol=str(symbol).strip(),
            name=str(record.get("name") or "").strip(),
            category=ElementCategory.parse(record.get("category")),
            oxidation_states=_parse_oxidation_states(oxidation),
        )
