"""FastMCP server exposing Pokédex analysis and battle tools."""

from __future__ import annotations

import random
import sys
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import FastMCP

from .clients import CatalogUnavailable, PokeAPIClient
from .config import load_settings
from .data.type_chart import TYPE_CHART, ElementalType
from .errors import InvalidRosterError
from .logging_setup import setup_logging
from .services import BattleService

app = FastMCP("pokedex-sim", version="0.1.0")
_settings = load_settings()
_pokeapi = PokeAPIClient.from_settings(_settings)
_service = BattleService(catalog=_pokeapi)


@app.tool()
def get_pokemon_data(
    species: Annotated[str, "Species name or National Dex id (e.g., 'pikachu')"],
) -> str:
    """Get basic typing and stat info for a Pokémon via PokéAPI."""

    try:
        combatant = _pokeapi.get_combatant(species)
    except CatalogUnavailable as exc:
        return f"Error fetching {species}: {exc}"

    stats = combatant.stats
    return (
        f"Name: {combatant.display_name} (#{combatant.id})\n"
        f"Types: {', '.join(t.value for t in combatant.types)}\n"
        f"Stats: hp={stats.hp} attack={stats.attack} "
        f"defense={stats.defense} speed={stats.speed}"
    )


@app.tool()
def get_evolution_chain(
    species: Annotated[str, "Species name or National Dex id"],
) -> Dict[str, Any]:
    """Return the species' evolution tree with the level each step needs."""

    try:
        return _pokeapi.get_evolution_chain(species)
    except CatalogUnavailable as exc:
        return {"error": f"Error fetching evolutions for {species}: {exc}"}


@app.tool()
def calculate_type_matchup(
    attacker_type: Annotated[str, "Attacking type"],
    defender_type: Annotated[str, "Defending type, or two types separated by '/'"],
) -> str:
    """Return the effectiveness multiplier of an attacking type against a defender."""

    try:
        attack = ElementalType.parse(attacker_type)
        defenders = [ElementalType.parse(d) for d in defender_type.split("/") if d.strip()]
        multiplier = TYPE_CHART.combined_multiplier(attack, defenders)
    except ValueError as exc:
        return f"Error: {exc}"

    labels = "/".join(t.label for t in defenders)
    return f"{attack.label} vs {labels} -> {multiplier}x"


@app.tool()
def analyze_team(
    pokemon: Annotated[List[str], "Up to six species names or ids"],
) -> Dict[str, Any]:
    """Report the team's type coverage and up to three types that patch its gaps."""

    try:
        roster = _service.build_roster(pokemon)
    except (CatalogUnavailable, InvalidRosterError) as exc:
        return {"error": str(exc)}
    return _service.analyze_team(roster).as_dict()


@app.tool()
def simulate_battle(
    pokemon: Annotated[List[str], "Up to six species names or ids"],
    seed: Annotated[Optional[int], "Seed for a reproducible battle"] = None,
) -> Dict[str, Any]:
    """Auto-play a battle of the team against three random opponents."""

    try:
        roster = _service.build_roster(pokemon)
        snapshot = _service.simulate(roster, rng=random.Random(seed))
    except (CatalogUnavailable, InvalidRosterError) as exc:
        return {"error": f"Could not start battle: {exc}"}
    return snapshot.as_dict()


def run() -> None:
    """Entry point for `python -m pokedex_sim.server` or console script."""

    # stdout carries the MCP stdio transport
    setup_logging(_settings, stream=sys.stderr)
    print("[pokedex-sim] Starting MCP server. Press Ctrl+C to stop.", file=sys.stderr)
    app.run()


if __name__ == "__main__":
    run()
