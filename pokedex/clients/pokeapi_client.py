import httpx
import json
from fastapi import HTTPException
from pydantic import BaseModel, ValidationError
import logging
import redis.asyncio as aioredis
from pokedex.config import Settings, get_settings
from pokedex.models import (
    EvolutionChainData,
    PokemonData,
    PokemonListData,
    PokemonSpeciesData,
    PokemonSummary,
)

logger = logging.getLogger(__name__)

# Define a custom exception for client errors (Used for 5xx errors)
class APIClientError(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=f"External API Error: {detail}")

# Valid request, but upstream has nothing under that name or id
class PokemonNotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)

class PokeAPIClient:
    CACHE_PREFIX = "pokeapi:"

    def __init__(self, settings: Settings = None):
        if settings is None:
            settings = get_settings()
        self.settings = settings
        self.client = httpx.AsyncClient(
            base_url=settings.pokeapi_base_url, timeout=settings.request_timeout
        )
        self.redis = aioredis.from_url(settings.redis_url, decode_responses=True)

    async def _fetch_resource(self, path: str, label: str, params: dict = None) -> dict:
        """Internal method to fetch a raw resource body with caching and error handling."""
        cache_key = f"{self.CACHE_PREFIX}{path}"
        if params:
            cache_key += "?" + "&".join(f"{k}={v}" for k, v in sorted(params.items()))

        cached_data = await self.redis.get(cache_key)
        if cached_data:
            logger.info(f"Cache hit for {label}")
            return json.loads(cached_data)

        logger.info(f"Cache miss for {label}, fetching {path}")
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise PokemonNotFoundError(detail=f"{label} not found.")
            logger.error(f"PokeAPI returned {e.response.status_code} for {path}")
            raise APIClientError(status_code=503, detail=f"PokeAPI failed with status {e.response.status_code}")
        except httpx.RequestError as e:
            # Network failures and timeouts
            logger.error(f"PokeAPI network error for {path}: {str(e)}")
            raise APIClientError(status_code=503, detail=f"PokeAPI network error: {str(e)}")
        except ValueError:
            logger.error(f"PokeAPI returned a non-JSON body for {path}")
            raise APIClientError(status_code=503, detail="PokeAPI returned an unexpected response format.")

        # Only successful results get cached
        await self.redis.setex(cache_key, self.settings.cache_ttl, json.dumps(data))
        return data

    def _parse(self, model: type[BaseModel], data: dict, label: str):
        try:
            return model.model_validate(data)
        except ValidationError:
            logger.error(f"Unexpected shape for {label}")
            raise APIClientError(status_code=503, detail=f"PokeAPI returned an unexpected shape for {label}.")

    async def get_pokemon_list(self) -> list[PokemonSummary]:
        """Fetches the whole catalog in one page."""
        data = await self._fetch_resource(
            "/pokemon", "Pokemon list", params={"limit": self.settings.list_limit}
        )
        return self._parse(PokemonListData, data, "Pokemon list").results

    async def get_pokemon(self, name: str) -> PokemonData:
        normalized_name = name.lower()
        label = f"Pokemon '{normalized_name}'"
        data = await self._fetch_resource(f"/pokemon/{normalized_name}", label)
        return self._parse(PokemonData, data, label)

    async def get_pokemon_species(self, name: str) -> PokemonSpeciesData:
        normalized_name = name.lower()
        label = f"Pokemon species '{normalized_name}'"
        data = await self._fetch_resource(f"/pokemon-species/{normalized_name}", label)
        return self._parse(PokemonSpeciesData, data, label)

    async def get_evolution_chain(self, chain_id: str | int) -> EvolutionChainData:
        label = f"Evolution chain '{chain_id}'"
        data = await self._fetch_resource(f"/evolution-chain/{chain_id}", label)
        return self._parse(EvolutionChainData, data, label)

    async def clear_cache(self):
        """Clear the cached PokeAPI responses. Useful for testing."""
        keys = await self.redis.keys(f"{self.CACHE_PREFIX}*")
        if keys:
            await self.redis.delete(*keys)

    async def close(self):
        """Close HTTP and Redis connections (call on app shutdown)."""
        await self.client.aclose()
        await self.redis.aclose()
