from typing import Sequence
from pokedex.models import PokemonSummary


def filter_pokemon(pokemon: Sequence[PokemonSummary], query: str | None) -> list[PokemonSummary]:
    """
    Case-insensitive substring search over Pokemon names, preserving input order.
    An empty query returns the list unchanged.
    """
    if not query:
        return list(pokemon)

    # Upstream names are already lowercase, so only the query is folded
    needle = query.lower()
    return [entry for entry in pokemon if needle in entry.name]
