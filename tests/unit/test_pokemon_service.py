import pytest
from unittest.mock import AsyncMock
from pokedex.services.pokemon_service import PokemonService, extract_chain_id, linearize_chain
from pokedex.models import (
    ChainLink,
    EvolutionChainData,
    PokemonData,
    PokemonDetails,
    PokemonSpeciesData,
)
from pokedex.clients.pokeapi_client import APIClientError, PokemonNotFoundError

# Sample data returned by the MOCKED client
MOCK_POKEMON = PokemonData.model_validate({
    "name": "bulbasaur",
    "moves": [{"move": {"name": "razor-wind"}}, {"move": {"name": "tackle"}}],
    "types": [{"type": {"name": "grass"}}, {"type": {"name": "poison"}}],
})

MOCK_SPECIES = PokemonSpeciesData.model_validate({
    "name": "bulbasaur",
    "evolution_chain": {"url": "https://pokeapi.co/api/v2/evolution-chain/1/"},
})

MOCK_CHAIN = EvolutionChainData.model_validate({
    "id": 1,
    "chain": {
        "species": {"name": "bulbasaur"},
        "evolves_to": [{
            "species": {"name": "ivysaur"},
            "evolves_to": [{"species": {"name": "venusaur"}, "evolves_to": []}],
        }],
    },
})


def make_chain(tree: dict) -> ChainLink:
    return ChainLink.model_validate(tree)


@pytest.fixture
def poke_client():
    # Use AsyncMock for methods that are awaited
    client = AsyncMock()
    client.get_pokemon.return_value = MOCK_POKEMON
    client.get_pokemon_species.return_value = MOCK_SPECIES
    client.get_evolution_chain.return_value = MOCK_CHAIN
    return client

@pytest.fixture
def pokemon_service(poke_client):
    return PokemonService(poke_client=poke_client)

# --- EVOLUTION CHAIN LINEARIZATION ---

def test_linearize_follows_first_child_only():
    """A -> B -> C with a decoy second branch A -> D: D is never included."""
    chain = make_chain({
        "species": {"name": "A"},
        "evolves_to": [
            {"species": {"name": "B"}, "evolves_to": [{"species": {"name": "C"}, "evolves_to": []}]},
            {"species": {"name": "D"}, "evolves_to": []},
        ],
    })

    assert linearize_chain(chain) == ["A", "B", "C"]

def test_linearize_single_node():
    assert linearize_chain(make_chain({"species": {"name": "A"}, "evolves_to": []})) == ["A"]

def test_linearize_ignores_branches_below_the_root():
    chain = make_chain({
        "species": {"name": "tyrogue"},
        "evolves_to": [{
            "species": {"name": "hitmonlee"},
            "evolves_to": [],
        }, {
            "species": {"name": "hitmonchan"},
            "evolves_to": [{"species": {"name": "decoy"}, "evolves_to": []}],
        }],
    })

    assert linearize_chain(chain) == ["tyrogue", "hitmonlee"]

def test_linearize_handles_long_lines_without_recursion():
    tree = {"species": {"name": "stage-0"}, "evolves_to": []}
    node = tree
    for stage in range(1, 50):
        child = {"species": {"name": f"stage-{stage}"}, "evolves_to": []}
        node["evolves_to"].append(child)
        node = child

    names = linearize_chain(make_chain(tree))

    assert len(names) == 50
    assert names[-1] == "stage-49"

# --- CHAIN ID EXTRACTION ---

@pytest.mark.parametrize("url, expected", [
    ("https://host/api/v2/evolution-chain/5/", "5"),
    ("https://pokeapi.co/api/v2/evolution-chain/67", "67"),
    ("https://pokeapi.co/api/v2/evolution-chain/140/?lang=en", "140"),
])
def test_extract_chain_id_takes_last_path_segment(url, expected):
    assert extract_chain_id(url) == expected

def test_extract_chain_id_rejects_url_without_path():
    with pytest.raises(ValueError):
        extract_chain_id("https://pokeapi.co/")

# --- RESOLVER ---

@pytest.mark.asyncio
async def test_resolve_evolution_names(pokemon_service, poke_client):
    result = await pokemon_service.resolve_evolution_names("1")

    poke_client.get_evolution_chain.assert_called_once_with("1")
    assert result == ["bulbasaur", "ivysaur", "venusaur"]

@pytest.mark.asyncio
async def test_resolve_propagates_not_found(pokemon_service, poke_client):
    poke_client.get_evolution_chain.side_effect = PokemonNotFoundError(detail="Evolution chain '999' not found.")

    with pytest.raises(PokemonNotFoundError):
        await pokemon_service.resolve_evolution_names("999")

# --- DETAIL COMPOSITION ---

@pytest.mark.asyncio
async def test_compose_details_unwraps_moves_and_types(pokemon_service, poke_client):
    """
    Verifies the three fetches are chained (pokemon -> species -> chain id from URL)
    and merged into one PokemonDetails.
    """
    result = await pokemon_service.compose_details("Bulbasaur")

    poke_client.get_pokemon.assert_called_once_with("Bulbasaur")
    # Species is looked up by the canonical name returned in the first call
    poke_client.get_pokemon_species.assert_called_once_with("bulbasaur")
    poke_client.get_evolution_chain.assert_called_once_with("1")

    assert isinstance(result, PokemonDetails)
    assert result.name == "bulbasaur"
    assert result.moves == ["razor-wind", "tackle"]
    assert result.types == ["grass", "poison"]
    assert result.evolutions == ["bulbasaur", "ivysaur", "venusaur"]

@pytest.mark.asyncio
async def test_compose_single_move_and_type(pokemon_service, poke_client):
    poke_client.get_pokemon.return_value = PokemonData.model_validate({
        "name": "rattata",
        "moves": [{"move": {"name": "tackle"}}],
        "types": [{"type": {"name": "normal"}}],
    })

    result = await pokemon_service.compose_details("rattata")

    assert result.moves == ["tackle"]
    assert result.types == ["normal"]

@pytest.mark.asyncio
async def test_compose_aborts_when_species_fails(pokemon_service, poke_client):
    poke_client.get_pokemon_species.side_effect = APIClientError(status_code=503, detail="PokeAPI failed with status 500")

    with pytest.raises(APIClientError):
        await pokemon_service.compose_details("bulbasaur")

    # No chain lookup once an earlier step failed
    poke_client.get_evolution_chain.assert_not_called()

@pytest.mark.asyncio
async def test_compose_aborts_without_chain_reference(pokemon_service, poke_client):
    poke_client.get_pokemon_species.return_value = PokemonSpeciesData(name="bulbasaur", evolution_chain=None)

    with pytest.raises(APIClientError) as excinfo:
        await pokemon_service.compose_details("bulbasaur")

    assert excinfo.value.status_code == 503
    poke_client.get_evolution_chain.assert_not_called()

@pytest.mark.asyncio
async def test_compose_aborts_when_chain_fails(pokemon_service, poke_client):
    poke_client.get_evolution_chain.side_effect = PokemonNotFoundError(detail="Evolution chain '1' not found.")

    with pytest.raises(PokemonNotFoundError):
        await pokemon_service.compose_details("bulbasaur")
