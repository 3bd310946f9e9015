"""
Pure transitions over PokedexState.

Every function returns a new state; nothing here performs I/O, so the whole
browser flow can be exercised without a rendering surface or network.
"""
from pokedex.models import PokedexState, PokedexView, PokemonDetails, PokemonSummary
from pokedex.services.search import filter_pokemon

LOADING_MESSAGE = "Loading..."
NO_RESULTS_MESSAGE = "No Results Found"


def start_list_load(state: PokedexState) -> PokedexState:
    return state.model_copy(update={"is_loading": True})


def finish_list_load(state: PokedexState, pokemon: list[PokemonSummary] | None) -> PokedexState:
    """Ends the LoadList transition. A failed load (None) keeps the current list."""
    update = {"is_loading": False}
    if pokemon is not None:
        update["pokemon"] = list(pokemon)
    return state.model_copy(update=update)


def update_search(state: PokedexState, value: str) -> PokedexState:
    return state.model_copy(update={"search_value": value})


def start_details_request(state: PokedexState) -> PokedexState:
    # Previous details are dropped right away so they never sit next to a newer request
    return state.model_copy(
        update={"details": None, "details_generation": state.details_generation + 1}
    )


def finish_details_request(
    state: PokedexState,
    details: PokemonDetails,
    generation: int,
    discard_stale: bool = False,
) -> PokedexState:
    """
    Stores composed details. When discard_stale is set, a result from an older
    request than the latest one is ignored; otherwise the last to finish wins.
    """
    if discard_stale and generation != state.details_generation:
        return state
    return state.model_copy(update={"details": details})


def visible_pokemon(state: PokedexState) -> list[PokemonSummary]:
    return filter_pokemon(state.pokemon, state.search_value)


def render_view(state: PokedexState) -> PokedexView:
    pokemon = visible_pokemon(state)
    message = None
    if not pokemon:
        message = LOADING_MESSAGE if state.is_loading else NO_RESULTS_MESSAGE
    return PokedexView(
        pokemon=pokemon,
        search_value=state.search_value,
        is_loading=state.is_loading,
        message=message,
        details=state.details,
    )
