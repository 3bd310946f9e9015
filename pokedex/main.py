import asyncio
from contextlib import asynccontextmanager, suppress
from fastapi import FastAPI, Depends
from pokedex.controller import PokedexController
from pokedex.dependencies import get_controller, get_pokemon_service
from pokedex.models import PokedexView, PokemonDetails, PokemonSummary, SearchUpdate
from pokedex.services import PokemonService, filter_pokemon


def _resolve_controller(app: FastAPI) -> PokedexController:
    # Lifespan runs outside dependency injection, so honour overrides by hand
    return app.dependency_overrides.get(get_controller, get_controller)()


@asynccontextmanager
async def lifespan(app: FastAPI):
    controller = _resolve_controller(app)
    # LoadList fires once at startup and runs in the background; the view
    # reports is_loading until it settles. Failures leave an empty list behind.
    app.state.list_load = controller.load_list()
    yield
    if not app.state.list_load.done():
        app.state.list_load.cancel()
        with suppress(asyncio.CancelledError):
            await app.state.list_load
    await controller.close()


app = FastAPI(
    title="Pokedex Browser API",
    description="Searchable Pokemon list with on-demand moves, types and evolution chain.",
    lifespan=lifespan,
)

# --- Browser state (rendering surface) ---

@app.get(
    "/pokedex",
    response_model=PokedexView,
    summary="Returns the current browser view",
)
async def get_view(controller: PokedexController = Depends(get_controller)):
    """Filtered list, search text, loading flag and the details panel, if any."""
    return controller.view()


@app.put(
    "/pokedex/search",
    response_model=PokedexView,
    summary="Updates the search text",
)
async def update_search(
    update: SearchUpdate,
    controller: PokedexController = Depends(get_controller),
):
    return controller.update_search(update.value)


@app.post(
    "/pokedex/details/{name}",
    response_model=PokedexView,
    summary="Requests the details panel for a Pokemon",
)
async def request_details(
    name: str,
    controller: PokedexController = Depends(get_controller),
):
    """
    Clears the current details and composes new ones. Failures are silent:
    the view comes back without details rather than with an error status.
    """
    await controller.request_details(name)
    return controller.view()

# --- Stateless lookups ---

@app.get(
    "/pokemon",
    response_model=list[PokemonSummary],
    summary="Searches the loaded Pokemon list",
)
async def search_pokemon(
    search: str = "",
    controller: PokedexController = Depends(get_controller),
):
    return filter_pokemon(controller.state.pokemon, search)


@app.get(
    "/pokemon/{name}",
    response_model=PokemonDetails,
    summary="Returns moves, types and evolutions for a Pokemon",
)
async def get_pokemon_details(
    name: str,
    service: PokemonService = Depends(get_pokemon_service),
):
    # Errors (404, 503) are raised by the PokeAPIClient as HTTPExceptions
    return await service.compose_details(name)


@app.get(
    "/evolution-chain/{chain_id}",
    response_model=list[str],
    summary="Returns the evolution line of a chain, root first",
)
async def get_evolution_chain(
    chain_id: str,
    service: PokemonService = Depends(get_pokemon_service),
):
    return await service.resolve_evolution_names(chain_id)
