"""Environment-driven settings for the catalog client and servers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load default .env first, then overlay .env.local so user-specific values win.
load_dotenv()
load_dotenv(".env.local", override=True)

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"
DEFAULT_MAX_POKEMON_ID = 898


@dataclass(frozen=True)
class Settings:
    poke_api_base_url: str = DEFAULT_BASE_URL
    max_pokemon_id: int = DEFAULT_MAX_POKEMON_ID
    cache_ttl: int = 600
    timeout: int = 10
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    session_ttl: int = 1800
    max_sessions: int = 256


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        poke_api_base_url=env.get("POKE_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        max_pokemon_id=_int_setting(env, "POKEDEX_MAX_ID", DEFAULT_MAX_POKEMON_ID),
        cache_ttl=_int_setting(env, "POKEDEX_CACHE_TTL", 600),
        timeout=_int_setting(env, "POKEDEX_TIMEOUT", 10),
        log_level=env.get("POKEDEX_LOG_LEVEL", "INFO").upper(),
        log_dir=env.get("POKEDEX_LOG_DIR") or None,
        session_ttl=_int_setting(env, "POKEDEX_SESSION_TTL", 1800),
        max_sessions=_int_setting(env, "POKEDEX_MAX_SESSIONS", 256),
    )


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{key} must be positive, got {value}")
    return value
