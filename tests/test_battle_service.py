from __future__ import annotations

import logging
import random

import pytest

from pokedex_sim.battle import Phase, SequenceRandom
from pokedex_sim.clients import CatalogUnavailable, PokemonNotFound
from pokedex_sim.errors import IllegalStateTransition, InvalidRosterError, UnknownSessionError
from pokedex_sim.models import BaseStats, Combatant
from pokedex_sim.services import BattleService


def make(id_, name, types, hp=50, attack=50, defense=50):
    return Combatant(id=id_, name=name, types=tuple(types), stats=BaseStats(hp, attack, defense, 50))


BLAZE = make(1, "blaze", ["fire"], attack=100)
SPROUT = make(2, "sprout", ["grass"])
SEEDLING = make(8, "seedling", ["grass"], hp=10, attack=10)
SHADE = make(92, "shade", ["ghost"])
PLAIN = make(20, "plain", ["normal"])


class FakeCatalog:
    def __init__(self, combatants, opponent_ids=None) -> None:
        self._by_id = {c.id: c for c in combatants}
        self._by_name = {c.name: c for c in combatants}
        self.opponent_ids = list(opponent_ids or self._by_id)
        self.offline = False

    def get_combatant(self, identifier):
        if self.offline:
            raise CatalogUnavailable("catalog offline")
        key = str(identifier).strip().lower()
        if key.isdigit() and int(key) in self._by_id:
            return self._by_id[int(key)]
        if key in self._by_name:
            return self._by_name[key]
        raise PokemonNotFound(f"Pokémon {identifier!r} not found")

    def random_combatant_id(self, rng) -> int:
        return self.opponent_ids[rng.randint(0, len(self.opponent_ids) - 1)]


def service_with(opponent_ids, *, combatants=(BLAZE, SPROUT, SEEDLING, SHADE, PLAIN), **kwargs):
    catalog = FakeCatalog(combatants, opponent_ids)
    return BattleService(catalog=catalog, rng=SequenceRandom(ints=(0,)), **kwargs)


def test_build_roster_resolves_names_and_ids() -> None:
    messages = []
    service = service_with([2], debug_logger=messages.append)

    roster = service.build_roster(["Blaze", "2"], name="starters")

    assert roster.name == "starters"
    assert [c.name for c in roster] == ["blaze", "sprout"]
    assert any("Fetched blaze" in msg for msg in messages)


def test_build_roster_rejects_duplicates_and_unknown_species() -> None:
    service = service_with([2])
    with pytest.raises(InvalidRosterError):
        service.build_roster(["blaze", "1"])
    with pytest.raises(PokemonNotFound):
        service.build_roster(["missingno"])


def test_build_roster_rejects_seven_members() -> None:
    combatants = [make(100 + i, f"mon{i}", ["normal"]) for i in range(7)]
    service = service_with([100], combatants=combatants)
    with pytest.raises(InvalidRosterError):
        service.build_roster([c.name for c in combatants])


def test_analyze_team_returns_report() -> None:
    service = service_with([2])
    report = service.analyze_team(service.build_roster(["blaze"]))
    assert report.members == ("Blaze",)
    assert report.analysis.strong_against == ()


def test_session_lifecycle_plays_opponent_reply() -> None:
    service = service_with([2])
    session_id, snapshot = service.start([BLAZE])
    assert snapshot.phase is Phase.AWAITING_SELECTION

    service.select_starter(session_id, BLAZE.id)
    snapshot = service.attack(session_id)

    # blaze hits for 80, sprout answers for 10
    assert snapshot.phase is Phase.PLAYER_TURN
    assert snapshot.opponent_hp == 20
    assert snapshot.player_hp == 90
    assert snapshot.log[-1] == "Blaze took 10 damage!"
    assert service.snapshot(session_id) == snapshot


def test_sessions_are_independent() -> None:
    service = service_with([2])
    first, _ = service.start([BLAZE])
    second, _ = service.start([SPROUT])

    service.select_starter(first, BLAZE.id)
    assert service.snapshot(second).phase is Phase.AWAITING_SELECTION
    assert first != second


def test_switch_after_faint_lets_opponent_move() -> None:
    service = service_with([1])
    session_id, _ = service.start([SEEDLING, SPROUT])
    service.select_starter(session_id, SEEDLING.id)

    snapshot = service.attack(session_id)
    assert snapshot.phase is Phase.AWAITING_SWITCH
    with pytest.raises(IllegalStateTransition):
        service.attack(session_id)

    snapshot = service.switch(session_id, SPROUT.id)
    assert snapshot.phase is Phase.PLAYER_TURN
    assert snapshot.player_hp == 20


def test_reset_and_discard_sessions() -> None:
    service = service_with([2])
    session_id, _ = service.start([BLAZE])
    service.select_starter(session_id, BLAZE.id)

    snapshot = service.reset(session_id)
    assert snapshot.phase is Phase.AWAITING_SELECTION
    assert len(snapshot.log) == 1

    service.discard(session_id)
    with pytest.raises(UnknownSessionError):
        service.snapshot(session_id)
    with pytest.raises(UnknownSessionError):
        service.discard(session_id)


def test_start_failure_does_not_register_session() -> None:
    service = service_with([2])
    service.catalog.offline = True
    with pytest.raises(CatalogUnavailable):
        service.start([BLAZE])
    assert service._sessions == {}


def test_simulate_plays_until_victory() -> None:
    service = service_with([8])
    snapshot = service.simulate([BLAZE], rng=random.Random(7))

    assert snapshot.phase is Phase.WON
    assert snapshot.result == "win"
    assert snapshot.log[-1] == "You defeated every opposing Pokémon. You win!"


def test_simulate_switches_in_survivors_until_loss() -> None:
    service = service_with([1])
    snapshot = service.simulate([SEEDLING, SPROUT], rng=SequenceRandom(ints=(0,)))

    assert snapshot.phase is Phase.LOST
    assert snapshot.player_team == ()
    assert "Go, Sprout!" in snapshot.log


def test_simulate_stalemate_logs_warning(caplog) -> None:
    # normal and ghost cannot touch each other
    service = service_with([92])
    with caplog.at_level(logging.WARNING):
        snapshot = service.simulate([PLAIN], turn_limit=10)

    assert snapshot.phase in (Phase.PLAYER_TURN, Phase.OPPONENT_TURN)
    assert snapshot.result is None
    assert "without a winner" in caplog.text


def test_idle_sessions_expire_after_ttl() -> None:
    now = [0.0]
    service = service_with([2], session_ttl=10, clock=lambda: now[0])
    session_id, _ = service.start([BLAZE])

    now[0] = 9.0
    assert service.snapshot(session_id).phase is Phase.AWAITING_SELECTION

    # the read above refreshed the idle timer
    now[0] = 18.0
    service.snapshot(session_id)

    now[0] = 28.0
    with pytest.raises(UnknownSessionError):
        service.snapshot(session_id)
    assert service._last_used == {}


def test_session_cap_evicts_least_recently_used() -> None:
    now = [0.0]
    service = service_with([2], max_sessions=2, clock=lambda: now[0])
    first, _ = service.start([BLAZE])
    second, _ = service.start([SPROUT])

    service.snapshot(first)
    third, _ = service.start([PLAIN])

    assert set(service._sessions) == {first, third}
    with pytest.raises(UnknownSessionError):
        service.snapshot(second)
