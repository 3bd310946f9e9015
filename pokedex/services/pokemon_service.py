import logging
from urllib.parse import urlsplit
from pokedex.clients.pokeapi_client import PokeAPIClient, APIClientError
from pokedex.models import ChainLink, PokemonDetails, PokemonSummary

logger = logging.getLogger(__name__)


def linearize_chain(chain: ChainLink) -> list[str]:
    """
    Walks the left spine of an evolution tree: the root, then always the first
    listed evolution. Branching evolutions collapse to their first branch.
    """
    names = [chain.species.name]
    link = chain
    while link.evolves_to:
        link = link.evolves_to[0]
        names.append(link.species.name)
    return names


def extract_chain_id(url: str) -> str:
    """Returns the last non-empty path segment of an evolution-chain URL."""
    segments = [segment for segment in urlsplit(url).path.split("/") if segment]
    if not segments:
        raise ValueError(f"No resource id in URL: {url!r}")
    return segments[-1]


class PokemonService:
    def __init__(self, poke_client: PokeAPIClient):
        self._poke_client = poke_client

    async def get_pokemon_list(self) -> list[PokemonSummary]:
        return await self._poke_client.get_pokemon_list()

    async def resolve_evolution_names(self, chain_id: str | int) -> list[str]:
        """Fetches an evolution chain and flattens it to species names, root first."""
        chain_data = await self._poke_client.get_evolution_chain(chain_id)
        return linearize_chain(chain_data.chain)

    async def compose_details(self, name: str) -> PokemonDetails:
        """
        Builds the details view for one Pokemon.
        The three fetches depend on each other and run strictly in sequence:
        pokemon -> species -> evolution chain.
        """
        pokemon = await self._poke_client.get_pokemon(name)
        species = await self._poke_client.get_pokemon_species(pokemon.name)

        if species.evolution_chain is None or not species.evolution_chain.url:
            raise APIClientError(status_code=503, detail=f"Species '{species.name}' has no evolution chain reference.")
        try:
            chain_id = extract_chain_id(species.evolution_chain.url)
        except ValueError as e:
            raise APIClientError(status_code=503, detail=str(e))

        evolutions = await self.resolve_evolution_names(chain_id)
        logger.info(f"Composed details for {pokemon.name} (evolution chain {chain_id})")

        return PokemonDetails(
            name=pokemon.name,
            moves=[slot.move.name for slot in pokemon.moves],
            types=[slot.type.name for slot in pokemon.types],
            evolutions=evolutions,
        )

    async def close(self):
        await self._poke_client.close()
