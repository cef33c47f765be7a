"""Team-building dataclasses and analyzer outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple

from ..data.type_chart import TYPE_ORDER, ElementalType
from ..errors import InvalidRosterError
from .pokemon import Combatant

MAX_TEAM_SIZE = 6


@dataclass(slots=True)
class TeamRoster:
    """Ordered collection of up to six unique combatants."""

    name: Optional[str] = None
    members: List[Combatant] = field(default_factory=list)

    def __post_init__(self) -> None:
        initial = list(self.members)
        self.members = []
        for combatant in initial:
            self.add(combatant)

    @classmethod
    def of(cls, combatants: Iterable[Combatant], *, name: Optional[str] = None) -> "TeamRoster":
        return cls(name=name, members=list(combatants))

    def add(self, combatant: Combatant) -> None:
        if len(self.members) >= MAX_TEAM_SIZE:
            raise InvalidRosterError(f"Team is full ({MAX_TEAM_SIZE} Pokémon max)")
        if self.contains(combatant.id):
            raise InvalidRosterError(f"{combatant.display_name} is already on the team")
        self.members.append(combatant)

    def remove(self, combatant_id: int) -> Combatant:
        for index, member in enumerate(self.members):
            if member.id == combatant_id:
                return self.members.pop(index)
        raise InvalidRosterError(f"No Pokémon with id {combatant_id} on the team")

    def clear(self) -> None:
        self.members.clear()

    def contains(self, combatant_id: int) -> bool:
        return any(member.id == combatant_id for member in self.members)

    def is_empty(self) -> bool:
        return not self.members

    def types_present(self) -> set[ElementalType]:
        return {t for member in self.members for t in member.types}

    def __iter__(self) -> Iterator[Combatant]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True, slots=True)
class TypeAnalysis:
    """Offensive and defensive coverage of a roster.

    ``strong_against`` and ``weak_against`` describe what the team's own
    types hit; the other three describe what hits the team.
    """

    strong_against: Tuple[ElementalType, ...] = ()
    weak_against: Tuple[ElementalType, ...] = ()
    immune_to: Tuple[ElementalType, ...] = ()
    resistant_to: Tuple[ElementalType, ...] = ()
    vulnerable_to: Tuple[ElementalType, ...] = ()

    def as_dict(self) -> dict[str, list[str]]:
        return {
            "strong_against": [t.value for t in self.strong_against],
            "weak_against": [t.value for t in self.weak_against],
            "immune_to": [t.value for t in self.immune_to],
            "resistant_to": [t.value for t in self.resistant_to],
            "vulnerable_to": [t.value for t in self.vulnerable_to],
        }


@dataclass(frozen=True, slots=True)
class Recommendation:
    type: ElementalType
    reason: str
    examples: Tuple[str, ...] = ()

    def as_dict(self) -> dict[str, object]:
        return {"type": self.type.value, "reason": self.reason, "examples": list(self.examples)}


@dataclass(frozen=True, slots=True)
class TeamReport:
    """Aggregated report returned by the analyzer tools."""

    members: Tuple[str, ...]
    analysis: TypeAnalysis
    recommendations: Tuple[Recommendation, ...] = ()

    def as_dict(self) -> dict[str, object]:
        return {
            "members": list(self.members),
            "analysis": self.analysis.as_dict(),
            "recommendations": [rec.as_dict() for rec in self.recommendations],
        }


def in_type_order(types: Iterable[ElementalType]) -> Tuple[ElementalType, ...]:
    wanted = set(types)
    return tuple(t for t in TYPE_ORDER if t in wanted)
