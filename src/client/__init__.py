"""PokeAPI client exported for convenience."""

from .base import ClientConfig
from .pokeapi import PokeAPIClient, normalize_query

__all__ = [
    "ClientConfig",
    "PokeAPIClient",
    "normalize_query",
]
