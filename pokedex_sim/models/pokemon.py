"""Immutable species snapshots supplied by the catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..data.type_chart import ElementalType


@dataclass(frozen=True, slots=True)
class BaseStats:
    hp: int
    attack: int
    defense: int
    speed: int

    def __post_init__(self) -> None:
        for name in ("hp", "attack", "defense", "speed"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Base stat {name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True, slots=True)
class Combatant:
    """One species instance taking part in analysis or battle."""

    id: int
    name: str
    types: Tuple[ElementalType, ...]
    stats: BaseStats
    sprite: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        types = tuple(ElementalType.parse(t) for t in self.types)
        if not 1 <= len(types) <= 2:
            raise ValueError(f"{self.name} must have one or two types, got {len(types)}")
        if len(set(types)) != len(types):
            raise ValueError(f"{self.name} lists the same type twice")
        object.__setattr__(self, "types", types)

    @property
    def display_name(self) -> str:
        return self.name.replace("-", " ").title()

    def as_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "types": [t.value for t in self.types],
            "stats": {
                "hp": self.stats.hp,
                "attack": self.stats.attack,
                "defense": self.stats.defense,
                "speed": self.stats.speed,
            },
            "sprite": self.sprite,
        }
