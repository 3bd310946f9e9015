import os
from pydantic import BaseModel

_settings = None


class Settings(BaseModel):
    pokeapi_base_url: str = "https://pokeapi.co/api/v2"
    redis_url: str = "redis://localhost:6379"
    request_timeout: float = 5.0
    cache_ttl: int = 3600  # 1 hour
    # Asked of upstream so the whole catalog arrives in a single page
    list_limit: int = 1500
    discard_stale_details: bool = False


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Builds settings from environment variables, falling back to defaults."""
    defaults = Settings()
    return Settings(
        pokeapi_base_url=os.getenv("POKEAPI_BASE_URL", defaults.pokeapi_base_url),
        redis_url=os.getenv("REDIS_URL", defaults.redis_url),
        request_timeout=float(os.getenv("POKEAPI_TIMEOUT", defaults.request_timeout)),
        cache_ttl=int(os.getenv("POKEAPI_CACHE_TTL", defaults.cache_ttl)),
        list_limit=int(os.getenv("POKEMON_LIST_LIMIT", defaults.list_limit)),
        discard_stale_details=_env_flag(
            os.getenv("POKEDEX_DISCARD_STALE_DETAILS", str(defaults.discard_stale_details))
        ),
    )


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
