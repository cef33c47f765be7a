"""Static type chart utilities for Pokemon battle calculations."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Sequence, Union


class ElementalType(str, Enum):
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"

    @classmethod
    def parse(cls, value: Union[str, "ElementalType"]) -> "ElementalType":
        """Resolve a type from its name, case-insensitively."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown elemental type: {value!r}") from None

    @property
    def label(self) -> str:
        return self.value.title()


TYPE_ORDER = list(ElementalType)

ALLOWED_MULTIPLIERS = frozenset({0.0, 0.5, 1.0, 2.0})

TYPE_RELATIONS: dict[str, dict[str, tuple[str, ...]]] = {
    "normal": {"double": (), "half": ("rock", "steel"), "zero": ("ghost",)},
    "fire": {
        "double": ("grass", "ice", "bug", "steel"),
        "half": ("fire", "water", "rock", "dragon"),
        "zero": (),
    },
    "water": {
        "double": ("fire", "ground", "rock"),
        "half": ("water", "grass", "dragon"),
        "zero": (),
    },
    "electric": {
        "double": ("water", "flying"),
        "half": ("electric", "grass", "dragon"),
        "zero": ("ground",),
    },
    "grass": {
        "double": ("water", "ground", "rock"),
        "half": ("fire", "grass", "poison", "flying", "bug", "dragon", "steel"),
        "zero": (),
    },
    "ice": {
        "double": ("grass", "ground", "flying", "dragon"),
        "half": ("fire", "water", "ice", "steel"),
        "zero": (),
    },
    "fighting": {
        "double": ("normal", "ice", "rock", "dark", "steel"),
        "half": ("poison", "flying", "psychic", "bug", "fairy"),
        "zero": ("ghost",),
    },
    "poison": {
        "double": ("grass", "fairy"),
        "half": ("poison", "ground", "rock", "ghost"),
        "zero": ("steel",),
    },
    "ground": {
        "double": ("fire", "electric", "poison", "rock", "steel"),
        "half": ("grass", "bug"),
        "zero": ("flying",),
    },
    "flying": {
        "double": ("grass", "fighting", "bug"),
        "half": ("electric", "rock", "steel"),
        "zero": (),
    },
    "psychic": {
        "double": ("fighting", "poison"),
        "half": ("psychic", "steel"),
        "zero": ("dark",),
    },
    "bug": {
        "double": ("grass", "psychic", "dark"),
        "half": ("fire", "fighting", "poison", "flying", "ghost", "steel", "fairy"),
        "zero": (),
    },
    "rock": {
        "double": ("fire", "ice", "flying", "bug"),
        "half": ("fighting", "ground", "steel"),
        "zero": (),
    },
    "ghost": {
        "double": ("psychic", "ghost"),
        "half": ("dark",),
        "zero": ("normal",),
    },
    "dragon": {
        "double": ("dragon",),
        "half": ("steel",),
        "zero": ("fairy",),
    },
    "dark": {
        "double": ("psychic", "ghost"),
        "half": ("fighting", "dark", "fairy"),
        "zero": (),
    },
    "steel": {
        "double": ("ice", "rock", "fairy"),
        "half": ("fire", "water", "electric", "steel"),
        "zero": (),
    },
    "fairy": {
        "double": ("fighting", "dragon", "dark"),
        "half": ("fire", "poison", "steel"),
        "zero": (),
    },
}

_RELATION_VALUES = {"double": 2.0, "half": 0.5, "zero": 0.0}


class TypeChart:
    """Read-only lookup of single-hit damage multipliers.

    Rows are keyed by the attacking type and only hold non-neutral entries;
    any pair that is not listed is neutral (1x). The table is directional:
    fire hitting water is not derived from water hitting fire.
    """

    def __init__(
        self, rows: Mapping[ElementalType, Mapping[ElementalType, float]]
    ) -> None:
        frozen: Dict[ElementalType, Mapping[ElementalType, float]] = {}
        for attacking, row in rows.items():
            entries: Dict[ElementalType, float] = {}
            for defending, value in row.items():
                value = float(value)
                if value not in ALLOWED_MULTIPLIERS:
                    raise ValueError(
                        f"Invalid multiplier {value} for {attacking.value} -> {defending.value}"
                    )
                if value != 1.0:
                    entries[defending] = value
            frozen[attacking] = MappingProxyType(entries)
        self._rows = MappingProxyType(frozen)

    @classmethod
    def from_relations(cls, relations: Mapping[str, Mapping[str, Iterable[str]]]) -> "TypeChart":
        rows: Dict[ElementalType, Dict[ElementalType, float]] = {}
        for attack_name, groups in relations.items():
            row = rows.setdefault(ElementalType.parse(attack_name), {})
            for group, defenders in groups.items():
                for defender in defenders:
                    row[ElementalType.parse(defender)] = _RELATION_VALUES[group]
        return cls(rows)

    def multiplier(self, attacking: ElementalType, defending: ElementalType) -> float:
        row = self._rows.get(attacking)
        if row is None:
            return 1.0
        return row.get(defending, 1.0)

    def combined_multiplier(
        self, attacking: ElementalType, defending_types: Sequence[ElementalType]
    ) -> float:
        """Stack the multipliers of one attacking type across a defender's types."""

        if not 1 <= len(defending_types) <= 2:
            raise ValueError(
                f"A defender has one or two types, got {len(defending_types)}"
            )
        result = 1.0
        for defending in defending_types:
            result *= self.multiplier(attacking, defending)
        return result

    def matchups(self, attacking: ElementalType) -> Mapping[ElementalType, float]:
        """Non-neutral entries of an attacking type's row."""

        return self._rows.get(attacking, MappingProxyType({}))


TYPE_CHART = TypeChart.from_relations(TYPE_RELATIONS)
