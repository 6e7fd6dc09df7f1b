"""Configuration from environment."""
import os


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag; accepts 1/true/yes/on (case-insensitive)."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


PORT = int(os.environ.get("PORT", "8001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

TESTING = os.environ.get("TESTING") == "true"

# When TESTING=true, use test DB URL so tests never touch production.
if TESTING:
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./locations.db",
    )

# Cache backend: "memory" (process-local) or "redis". Tests always use memory.
CACHE_BACKEND = "memory" if TESTING else os.environ.get("CACHE_BACKEND", "memory").lower()
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

SEARCH_CACHE_TTL_MINUTES = int(os.environ.get("SEARCH_CACHE_TTL_MINUTES", "15"))
DETAILS_CACHE_TTL_MINUTES = int(os.environ.get("DETAILS_CACHE_TTL_MINUTES", "15"))
MAP_CACHE_TTL_MINUTES = int(os.environ.get("MAP_CACHE_TTL_MINUTES", "60"))

GOOGLE_MAPS_API_KEY = os.environ.get("GOOGLE_MAPS_API_KEY", "")

RUN_MIGRATIONS_ON_STARTUP = _env_bool("RUN_MIGRATIONS_ON_STARTUP", True)
SEED_DEMO_LOCATIONS = _env_bool("SEED_DEMO_LOCATIONS", True)
