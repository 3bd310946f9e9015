import asyncio
import logging
from pokedex import state as transitions
from pokedex.models import PokedexState, PokedexView
from pokedex.services.pokemon_service import PokemonService

logger = logging.getLogger(__name__)


class PokedexController:
    """
    Holds the browser state and wires user actions to the service.

    Actions that need the network apply their first transition immediately and
    hand back an asyncio.Task for the rest. Failures inside those tasks are
    logged and dropped: a failed list load shows an empty list, a failed
    details request shows no details.
    """

    def __init__(self, service: PokemonService, discard_stale_details: bool = False):
        self._service = service
        self._discard_stale_details = discard_stale_details
        self.state = PokedexState()

    def view(self) -> PokedexView:
        return transitions.render_view(self.state)

    def load_list(self) -> asyncio.Task:
        self.state = transitions.start_list_load(self.state)
        return asyncio.create_task(self._load_list())

    async def _load_list(self):
        pokemon = None
        try:
            pokemon = await self._service.get_pokemon_list()
            logger.info(f"Loaded {len(pokemon)} Pokemon")
        except Exception as e:
            logger.warning(f"Pokemon list failed to load: {e}")
        finally:
            self.state = transitions.finish_list_load(self.state, pokemon)

    def update_search(self, value: str) -> PokedexView:
        self.state = transitions.update_search(self.state, value)
        return self.view()

    def request_details(self, name: str) -> asyncio.Task:
        self.state = transitions.start_details_request(self.state)
        return asyncio.create_task(self._request_details(name, self.state.details_generation))

    async def _request_details(self, name: str, generation: int):
        try:
            details = await self._service.compose_details(name)
        except Exception as e:
            logger.warning(f"Details for '{name}' failed to load: {e}")
            return
        self.state = transitions.finish_details_request(
            self.state, details, generation, discard_stale=self._discard_stale_details
        )

    async def close(self):
        await self._service.close()
