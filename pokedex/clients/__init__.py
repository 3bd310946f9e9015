"""Client modules for external API communication."""
from .pokeapi_client import PokeAPIClient, APIClientError, PokemonNotFoundError

__all__ = [
    'PokeAPIClient',
    'APIClientError',
    'PokemonNotFoundError',
]
