from pydantic import BaseModel, ConfigDict, Field

# --- Upstream resources (Internal Contract) ---

# Reference that upstream gives only as a URL (e.g. a species' evolution chain)
class APIResource(BaseModel):
    url: str

class NamedResource(BaseModel):
    name: str
    url: str | None = None

# Entries of the catalog list are plain named resources; the url is only carried along for identity
PokemonSummary = NamedResource

class PokemonListData(BaseModel):
    results: list[PokemonSummary]

class MoveSlot(BaseModel):
    move: NamedResource

class TypeSlot(BaseModel):
    type: NamedResource

class PokemonData(BaseModel):
    name: str
    moves: list[MoveSlot] = []
    types: list[TypeSlot] = []

class PokemonSpeciesData(BaseModel):
    name: str
    evolution_chain: APIResource | None = None

# One node of the evolution tree; upstream nests children under "evolves_to"
class ChainLink(BaseModel):
    species: NamedResource
    evolves_to: list["ChainLink"] = []

class EvolutionChainData(BaseModel):
    chain: ChainLink

# --- Public models ---

class PokemonDetails(BaseModel):
    name: str
    moves: list[str]
    types: list[str]
    evolutions: list[str]

class PokedexState(BaseModel):
    """Everything the browser holds in memory. Transitions return new instances."""
    model_config = ConfigDict(frozen=True)

    pokemon: list[PokemonSummary] = []
    search_value: str = ""
    details: PokemonDetails | None = None
    is_loading: bool = False
    details_generation: int = 0

# Model rendered to the API consumer (list panel + details panel)
class PokedexView(BaseModel):
    pokemon: list[PokemonSummary]
    search_value: str
    is_loading: bool
    message: str | None = None
    details: PokemonDetails | None = None

class SearchUpdate(BaseModel):
    value: str = Field(default="", description="Free-text search over Pokemon names")
