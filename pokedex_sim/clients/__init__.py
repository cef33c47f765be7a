"""External data clients used by the Pokédex services."""

from .pokeapi import CatalogUnavailable, PokeAPIClient, PokemonNotFound

__all__ = [
    "CatalogUnavailable",
    "PokeAPIClient",
    "PokemonNotFound",
]
