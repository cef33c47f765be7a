"""FastAPI web server exposing the Pokédex, team analysis and battles via REST API."""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .battle import BattleSnapshot
from .clients import CatalogUnavailable, PokeAPIClient, PokemonNotFound
from .config import load_settings
from .data.regions import REGIONS, find_region
from .data.type_chart import TYPE_CHART, TYPE_ORDER, ElementalType
from .errors import IllegalStateTransition, InvalidRosterError, UnknownSessionError
from .logging_setup import setup_logging
from .services import BattleService

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pokédex Sim Web API",
    description="REST API for Pokédex lookups, team coverage analysis and battle simulation",
    version="0.1.0",
)

_settings = load_settings()
_pokeapi = PokeAPIClient.from_settings(_settings)
_service = BattleService(
    catalog=_pokeapi,
    session_ttl=_settings.session_ttl,
    max_sessions=_settings.max_sessions,
)


# Pydantic models for request/response
class TeamRequest(BaseModel):
    """Request model for endpoints that take a roster of species."""

    pokemon: List[str] = Field(..., description="Species names or ids, up to six")
    name: Optional[str] = None


class PokemonChoiceRequest(BaseModel):
    """Request model for choosing a team member during battle."""

    pokemon_id: int


class PokemonDataResponse(BaseModel):
    result: Dict[str, Any]


class PokemonListResponse(BaseModel):
    result: List[Dict[str, Any]]


class TypeMatchupResponse(BaseModel):
    result: Dict[str, Any]


class AnalyzeTeamResponse(BaseModel):
    result: Dict[str, Any]


class BattleResponse(BaseModel):
    """Response model carrying a battle snapshot."""

    session_id: str
    result: Dict[str, Any]


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, PokemonNotFound):
        return HTTPException(status_code=404, detail=f"Pokemon not found: {exc}")
    if isinstance(exc, UnknownSessionError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidRosterError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, IllegalStateTransition):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, CatalogUnavailable):
        return HTTPException(status_code=503, detail=f"Pokemon data unavailable: {exc}")
    return HTTPException(status_code=500, detail=str(exc))


def _battle_response(session_id: str, snapshot: BattleSnapshot) -> BattleResponse:
    return BattleResponse(session_id=session_id, result=snapshot.as_dict())


@app.get("/", response_class=HTMLResponse)
async def root():
    return "<html><body><h1>Pokédex Sim Web API</h1><p>See /docs for the endpoints.</p></body></html>"


@app.get("/api/pokemon/types")
async def get_types() -> List[str]:
    return [t.value for t in TYPE_ORDER]


@app.get("/api/pokemon/regions")
async def get_regions() -> List[Dict[str, Any]]:
    return REGIONS


@app.get("/api/pokemon/regions/{name}")
async def get_region(name: str) -> Dict[str, Any]:
    try:
        return find_region(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Region not found: {name}")


@app.get("/api/pokemon/suggestions")
def get_suggestions(query: str = Query(..., min_length=1, description="Part of a species name")) -> List[str]:
    try:
        return _pokeapi.get_suggestions(query)
    except CatalogUnavailable as exc:
        raise _http_error(exc)


@app.get("/api/pokemon/compare", response_model=PokemonDataResponse)
def compare_pokemon(
    first: str = Query(..., description="First species name or id"),
    second: str = Query(..., description="Second species name or id"),
) -> PokemonDataResponse:
    try:
        return PokemonDataResponse(result=_pokeapi.compare(first, second))
    except CatalogUnavailable as exc:
        raise _http_error(exc)


@app.get("/api/pokemon", response_model=PokemonListResponse)
def list_pokemon(
    type_name: str = Query(..., alias="type", description="Elemental type, e.g. 'fire'"),
    region: str = Query(..., description="Region name, e.g. 'kanto'"),
) -> PokemonListResponse:
    """List species of a type whose National Dex id belongs to the region."""
    try:
        combatants = _pokeapi.list_by_type_and_region(type_name, region)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Region not found: {region}")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except CatalogUnavailable as exc:
        raise _http_error(exc)
    return PokemonListResponse(result=[c.as_dict() for c in combatants])


@app.get("/api/pokemon/legendary/random", response_model=PokemonDataResponse)
def random_legendary() -> PokemonDataResponse:
    try:
        combatant = _pokeapi.random_legendary(_service.rng or random.Random())
    except CatalogUnavailable as exc:
        raise _http_error(exc)
    return PokemonDataResponse(result=combatant.as_dict())


@app.get("/api/pokemon/{name}/evolution", response_model=PokemonDataResponse)
def get_evolution(name: str) -> PokemonDataResponse:
    try:
        return PokemonDataResponse(result=_pokeapi.get_evolution_chain(name))
    except CatalogUnavailable as exc:
        raise _http_error(exc)


@app.get("/api/pokemon/{name}", response_model=PokemonDataResponse)
def get_pokemon_data(name: str) -> PokemonDataResponse:
    """Get typing and base stats for a Pokémon via PokéAPI."""
    try:
        combatant = _pokeapi.get_combatant(name)
    except CatalogUnavailable as exc:
        raise _http_error(exc)
    return PokemonDataResponse(result=combatant.as_dict())


@app.get("/api/type-matchup", response_model=TypeMatchupResponse)
async def calculate_type_matchup(
    attacker: str = Query(..., description="Attacking type"),
    defender: str = Query(..., description="Defending type(s), comma separated"),
) -> TypeMatchupResponse:
    """Return the effectiveness multiplier of an attacking type against a defender."""
    try:
        attack_type = ElementalType.parse(attacker)
        defender_types = [ElementalType.parse(d) for d in defender.split(",") if d.strip()]
        multiplier = TYPE_CHART.combined_multiplier(attack_type, defender_types)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return TypeMatchupResponse(
        result={
            "attacker": attack_type.value,
            "defender": [t.value for t in defender_types],
            "multiplier": multiplier,
        }
    )


@app.post("/api/team/analyze", response_model=AnalyzeTeamResponse)
def analyze_team(request: TeamRequest) -> AnalyzeTeamResponse:
    try:
        roster = _service.build_roster(request.pokemon, name=request.name)
    except (CatalogUnavailable, InvalidRosterError) as exc:
        raise _http_error(exc)
    return AnalyzeTeamResponse(result=_service.analyze_team(roster).as_dict())


def _could_not_start(exc: CatalogUnavailable) -> HTTPException:
    logger.warning("Could not start battle: %s", exc)
    return HTTPException(status_code=503, detail=f"Could not start battle: {exc}")


@app.post("/api/battle", response_model=BattleResponse)
def start_battle(request: TeamRequest) -> BattleResponse:
    try:
        roster = _service.build_roster(request.pokemon, name=request.name)
    except (PokemonNotFound, InvalidRosterError) as exc:
        raise _http_error(exc)
    except CatalogUnavailable as exc:
        raise _could_not_start(exc)
    try:
        session_id, snapshot = _service.start(roster)
    except InvalidRosterError as exc:
        raise _http_error(exc)
    except CatalogUnavailable as exc:
        # a missing random opponent is a catalog failure, not a user error
        raise _could_not_start(exc)
    return _battle_response(session_id, snapshot)


@app.get("/api/battle/{session_id}", response_model=BattleResponse)
def get_battle(session_id: str) -> BattleResponse:
    try:
        return _battle_response(session_id, _service.snapshot(session_id))
    except UnknownSessionError as exc:
        raise _http_error(exc)


@app.post("/api/battle/{session_id}/starter", response_model=BattleResponse)
def select_starter(session_id: str, request: PokemonChoiceRequest) -> BattleResponse:
    try:
        snapshot = _service.select_starter(session_id, request.pokemon_id)
    except (UnknownSessionError, InvalidRosterError, IllegalStateTransition) as exc:
        raise _http_error(exc)
    return _battle_response(session_id, snapshot)


@app.post("/api/battle/{session_id}/attack", response_model=BattleResponse)
def attack(session_id: str) -> BattleResponse:
    try:
        snapshot = _service.attack(session_id)
    except (UnknownSessionError, IllegalStateTransition) as exc:
        raise _http_error(exc)
    return _battle_response(session_id, snapshot)


@app.post("/api/battle/{session_id}/switch", response_model=BattleResponse)
def switch(session_id: str, request: PokemonChoiceRequest) -> BattleResponse:
    try:
        snapshot = _service.switch(session_id, request.pokemon_id)
    except (UnknownSessionError, InvalidRosterError, IllegalStateTransition) as exc:
        raise _http_error(exc)
    return _battle_response(session_id, snapshot)


@app.post("/api/battle/{session_id}/reset", response_model=BattleResponse)
def reset(session_id: str) -> BattleResponse:
    try:
        snapshot = _service.reset(session_id)
    except (UnknownSessionError, CatalogUnavailable) as exc:
        raise _http_error(exc)
    return _battle_response(session_id, snapshot)


@app.delete("/api/battle/{session_id}", status_code=204)
def discard(session_id: str) -> None:
    try:
        _service.discard(session_id)
    except UnknownSessionError as exc:
        raise _http_error(exc)


def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Entry point for running the web server."""
    import uvicorn

    setup_logging(_settings)
    logger.info("Starting web server at http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
