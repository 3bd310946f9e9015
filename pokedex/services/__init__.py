"""Domain services: details composition, evolution resolution and search."""
from .pokemon_service import PokemonService, extract_chain_id, linearize_chain
from .search import filter_pokemon

__all__ = [
    'PokemonService',
    'extract_chain_id',
    'linearize_chain',
    'filter_pokemon',
]
