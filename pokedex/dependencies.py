from pokedex.clients import PokeAPIClient
from pokedex.config import get_settings
from pokedex.controller import PokedexController
from pokedex.services import PokemonService
from fastapi import Depends

_poke_client = None
_controller = None

def get_poke_client() -> PokeAPIClient:
    global _poke_client
    if _poke_client is None:
        _poke_client = PokeAPIClient(get_settings())
    return _poke_client

def get_pokemon_service(
    poke_client: PokeAPIClient = Depends(get_poke_client),
) -> PokemonService:
    return PokemonService(poke_client=poke_client)

def get_controller() -> PokedexController:
    # One controller per process: the browser state is shared by all requests
    global _controller
    if _controller is None:
        _controller = PokedexController(
            PokemonService(poke_client=get_poke_client()),
            discard_stale_details=get_settings().discard_stale_details,
        )
    return _controller
