from __future__ import annotations

import pytest

from pokedex_sim.data.regions import find_region
from pokedex_sim.data.type_chart import ElementalType
from pokedex_sim.errors import InvalidRosterError
from pokedex_sim.models import BaseStats, Combatant, TeamRoster


def make(id_, name="mon", types=("normal",)):
    return Combatant(id=id_, name=name, types=types, stats=BaseStats(50, 50, 50, 50))


def test_combatant_parses_types_and_formats_name() -> None:
    combatant = make(122, "mr-mime", ("Psychic", "fairy"))
    assert combatant.types == (ElementalType.PSYCHIC, ElementalType.FAIRY)
    assert combatant.display_name == "Mr Mime"
    assert combatant.as_dict()["types"] == ["psychic", "fairy"]


@pytest.mark.parametrize("types", [(), ("fire", "water", "grass"), ("fire", "fire"), ("shadow",)])
def test_combatant_rejects_invalid_types(types) -> None:
    with pytest.raises(ValueError):
        make(1, types=types)


def test_base_stats_reject_negative_values() -> None:
    with pytest.raises(ValueError):
        BaseStats(hp=-1, attack=10, defense=10, speed=10)


def test_roster_enforces_size_and_uniqueness() -> None:
    roster = TeamRoster()
    for id_ in range(1, 7):
        roster.add(make(id_))
    assert len(roster) == 6

    with pytest.raises(InvalidRosterError):
        roster.add(make(7))
    with pytest.raises(InvalidRosterError):
        TeamRoster.of([make(1), make(1)])


def test_roster_remove_and_clear() -> None:
    roster = TeamRoster.of([make(1, types=("fire",)), make(2, types=("water", "ice"))])

    assert roster.types_present() == {ElementalType.FIRE, ElementalType.WATER, ElementalType.ICE}
    assert roster.remove(1).id == 1
    assert not roster.contains(1)
    with pytest.raises(InvalidRosterError):
        roster.remove(1)

    roster.clear()
    assert roster.is_empty()


def test_find_region_is_case_insensitive() -> None:
    assert find_region("Kanto")["name"] == "kanto"
    with pytest.raises(KeyError):
        find_region("orre")
