from __future__ import annotations

import json

from main import main
from pokedex_sim.battle import SequenceRandom
from pokedex_sim.clients import CatalogUnavailable, PokemonNotFound
from pokedex_sim.models import BaseStats, Combatant
from pokedex_sim.services import BattleService

CHARMANDER = Combatant(4, "charmander", ("fire",), BaseStats(39, 52, 43, 65))
VULPIX = Combatant(37, "vulpix", ("fire",), BaseStats(38, 41, 40, 65))
CATERPIE = Combatant(10, "caterpie", ("bug",), BaseStats(45, 30, 35, 45))


class FakeCatalog:
    def __init__(self, *, offline: bool = False) -> None:
        self.offline = offline
        self._known = {}
        for combatant in (CHARMANDER, VULPIX, CATERPIE):
            self._known[combatant.name] = combatant
            self._known[str(combatant.id)] = combatant

    def get_combatant(self, identifier):
        if self.offline:
            raise CatalogUnavailable("catalog offline")
        try:
            return self._known[str(identifier).lower()]
        except KeyError:
            raise PokemonNotFound(f"Pokémon {identifier!r} not found") from None

    def random_combatant_id(self, rng) -> int:
        return CATERPIE.id


def make_service(**kwargs) -> BattleService:
    return BattleService(catalog=FakeCatalog(**kwargs), rng=SequenceRandom())


def test_analyze_prints_human_report(capsys) -> None:
    code = main(["analyze", "charmander", "vulpix"], service=make_service())

    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith("Team: Charmander, Vulpix")
    assert "Strong against: Grass, Ice, Bug, Steel" in out
    assert "Immune to: none" in out
    assert "  - Water: Strong against Fire, Ground, Rock" in out


def test_analyze_json_output(capsys) -> None:
    code = main(["--json", "analyze", "charmander"], service=make_service())

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["members"] == ["Charmander"]
    assert payload["analysis"]["strong_against"] == []


def test_battle_runs_to_completion(capsys) -> None:
    code = main(["battle", "charmander", "--seed", "3"], service=make_service())

    out = capsys.readouterr().out
    assert code == 0
    assert "Go, Charmander!" in out
    assert out.rstrip().endswith("Victory!")


def test_battle_json_reports_result(capsys) -> None:
    code = main(["--json", "battle", "charmander", "--seed", "3"], service=make_service())

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["result"] == "win"
    assert payload["phase"] == "won"


def test_errors_go_to_stderr(capsys) -> None:
    assert main(["analyze", "missingno"], service=make_service()) == 1
    assert "Error:" in capsys.readouterr().err

    assert main(["battle", "charmander"], service=make_service(offline=True)) == 1
    assert "catalog offline" in capsys.readouterr().err

    assert main(["analyze", "charmander", "charmander"], service=make_service()) == 1
    assert "already on the team" in capsys.readouterr().err
