"""Lightweight wrapper around PokéAPI for fetching species data."""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, List, Optional, Union

import requests

from ..config import DEFAULT_BASE_URL, DEFAULT_MAX_POKEMON_ID, Settings
from ..data.legendaries import LEGENDARY_IDS
from ..data.regions import find_region
from ..data.type_chart import ElementalType
from ..models import BaseStats, Combatant

logger = logging.getLogger(__name__)

DEFAULT_BASE_STAT = 50
STAT_NAMES = ("hp", "attack", "defense", "speed")


class CatalogUnavailable(RuntimeError):
    """Raised when the PokeAPI request fails."""


class PokemonNotFound(CatalogUnavailable):
    """Raised when PokeAPI has no species for the requested name or id."""


class PokeAPIClient:
    """Small helper client with naive in-memory caching."""

    BASE_URL = DEFAULT_BASE_URL

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        max_pokemon_id: int = DEFAULT_MAX_POKEMON_ID,
        cache_ttl: int = 600,
        timeout: int = 10,
        user_agent: str = "pokedex-sim/0.1 (+https://github.com/)",
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.max_pokemon_id = max_pokemon_id
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self.user_agent = user_agent
        self._cache: Dict[str, tuple[float, Any]] = {}
        self._combatant_cache: Dict[str, Combatant] = {}

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "PokeAPIClient":
        return cls(
            base_url=settings.poke_api_base_url,
            max_pokemon_id=settings.max_pokemon_id,
            cache_ttl=settings.cache_ttl,
            timeout=settings.timeout,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_pokemon(self, name_or_id: Union[int, str]) -> Dict[str, Any]:
        slug = self._slugify_name(str(name_or_id))
        if not slug:
            raise PokemonNotFound(f"Invalid Pokémon name: {name_or_id!r}")
        payload = self._get_json(f"pokemon/{slug}", allow_404=True)
        if payload is None:
            raise PokemonNotFound(f"Pokémon {name_or_id!r} not found")
        return payload

    def get_combatant(self, name_or_id: Union[int, str]) -> Combatant:
        slug = self._slugify_name(str(name_or_id))
        cached = self._combatant_cache.get(slug)
        if cached:
            return cached
        combatant = self.combatant_from_payload(self.get_pokemon(name_or_id))
        self._combatant_cache[slug] = combatant
        self._combatant_cache[str(combatant.id)] = combatant
        return combatant

    def random_combatant_id(self, rng) -> int:
        return rng.randint(1, self.max_pokemon_id)

    def list_pokemon_names(self) -> List[str]:
        payload = self._get_json(f"pokemon?limit={self.max_pokemon_id}")
        return [entry["name"] for entry in payload.get("results", [])]

    def get_suggestions(self, query: str, limit: int = 10) -> List[str]:
        needle = query.strip().lower()
        if not needle:
            return []
        matches = [name for name in self.list_pokemon_names() if needle in name.lower()]
        logger.debug("Suggestions for %r: %d matches", query, len(matches))
        return matches[:limit]

    def compare(self, first: Union[int, str], second: Union[int, str]) -> Dict[str, Any]:
        left = self.get_combatant(first)
        right = self.get_combatant(second)
        differences = {
            stat: getattr(left.stats, stat) - getattr(right.stats, stat)
            for stat in STAT_NAMES
        }
        return {
            "first": left.as_dict(),
            "second": right.as_dict(),
            "differences": differences,
        }

    def list_by_type_and_region(self, type_name: str, region: str) -> List[Combatant]:
        """Species of one type whose National Dex id falls inside a region."""

        elemental = ElementalType.parse(type_name)
        bounds = find_region(region)["pokemon_range"]
        payload = self._get_json(f"type/{elemental.value}")
        ids = []
        for entry in payload.get("pokemon", []):
            species_id = self._id_from_url((entry.get("pokemon") or {}).get("url", ""))
            if species_id is not None and bounds["start"] <= species_id <= bounds["end"]:
                ids.append(species_id)
        logger.debug("%s-type species in %s: %d", elemental.value, region, len(ids))
        return [self.get_combatant(species_id) for species_id in sorted(ids)]

    def get_evolution_chain(self, name_or_id: Union[int, str]) -> Dict[str, Any]:
        """Evolution tree of a species as nested ``{"name", "min_level", "evolves_to"}``."""

        combatant = self.get_combatant(name_or_id)
        species = self._get_json(f"pokemon-species/{combatant.id}")
        try:
            chain_url = species["evolution_chain"]["url"]
            chain = self._get_json(chain_url)["chain"]
            return self._evolution_node(chain)
        except (KeyError, TypeError) as exc:
            raise CatalogUnavailable(
                f"Malformed evolution data for {combatant.name}: {exc}"
            ) from exc

    def random_legendary(self, rng) -> Combatant:
        candidates = [i for i in LEGENDARY_IDS if i <= self.max_pokemon_id]
        if not candidates:
            raise PokemonNotFound(f"No legendary Pokémon within ids 1..{self.max_pokemon_id}")
        return self.get_combatant(candidates[rng.randint(0, len(candidates) - 1)])

    @staticmethod
    def combatant_from_payload(payload: Dict[str, Any]) -> Combatant:
        try:
            return PokeAPIClient._build_combatant(payload)
        except (KeyError, TypeError, ValueError) as exc:
            label = payload.get("name") if isinstance(payload, dict) else None
            raise CatalogUnavailable(
                f"Malformed catalog record for {label or 'unknown species'}: {exc}"
            ) from exc

    @staticmethod
    def _build_combatant(payload: Dict[str, Any]) -> Combatant:
        slots = sorted(payload.get("types", []), key=lambda slot: slot.get("slot", 0))
        types = [slot["type"]["name"] for slot in slots]
        base = {
            (entry.get("stat") or {}).get("name"): entry.get("base_stat")
            for entry in payload.get("stats", [])
        }
        stats = {}
        for name in STAT_NAMES:
            value = base.get(name)
            stats[name] = value if isinstance(value, int) else DEFAULT_BASE_STAT
        sprites = payload.get("sprites") or {}
        return Combatant(
            id=int(payload["id"]),
            name=payload.get("name", str(payload["id"])),
            types=tuple(types),
            stats=BaseStats(**stats),
            sprite=sprites.get("front_default"),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_json(self, endpoint: str, *, allow_404: bool = False) -> Optional[Dict[str, Any]]:
        url = self._build_url(endpoint)
        now = time.time()
        cached = self._cache.get(url)
        if cached and now - cached[0] < self.cache_ttl:
            return cached[1]

        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
            if response.status_code == 404 and allow_404:
                return None
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("PokeAPI request to %s failed: %s", url, exc)
            raise CatalogUnavailable(str(exc)) from exc

        payload = response.json()
        self._cache[url] = (now, payload)
        return payload

    @classmethod
    def _evolution_node(cls, link: Dict[str, Any]) -> Dict[str, Any]:
        details = link.get("evolution_details") or [{}]
        return {
            "name": link["species"]["name"],
            "min_level": details[0].get("min_level"),
            "evolves_to": [cls._evolution_node(child) for child in link.get("evolves_to", [])],
        }

    @staticmethod
    def _id_from_url(url: str) -> Optional[int]:
        tail = url.rstrip("/").rsplit("/", 1)[-1]
        return int(tail) if tail.isdigit() else None

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        endpoint = endpoint.lstrip("/")
        return f"{self.base_url}/{endpoint}"

    @staticmethod
    def _slugify_name(name: str) -> str:
        slug = name.strip().lower()
        slug = re.sub(r"[\s\.]+", "-", slug)
        slug = slug.replace("'", "")
        slug = slug.replace(":", "")
        slug = slug.replace("%", "")
        slug = re.sub(r"[^a-z0-9\-]", "", slug)
        return slug
