"""Cache keys and TTLs for location data. Key formats are shared across deployments."""
from datetime import timedelta

from directory_core.search_criteria import SearchCriteria
from utils.config import DETAILS_CACHE_TTL_MINUTES, MAP_CACHE_TTL_MINUTES, SEARCH_CACHE_TTL_MINUTES

LOCATION_PREFIX = "locations"
SEARCH_PREFIX = f"{LOCATION_PREFIX}.search:"
DETAILS_PREFIX = f"{LOCATION_PREFIX}.details:"
ALL_FOR_MAP = f"{LOCATION_PREFIX}.all_for_map"

SEARCH_TTL = timedelta(minutes=SEARCH_CACHE_TTL_MINUTES)
DETAILS_TTL = timedelta(minutes=DETAILS_CACHE_TTL_MINUTES)
# Map dataset changes less often and is the most expensive to assemble.
MAP_TTL = timedelta(minutes=MAP_CACHE_TTL_MINUTES)


def location_search(criteria: SearchCriteria) -> str:
    return f"{SEARCH_PREFIX}{criteria.fingerprint()}"


def location_details(location_id: int) -> str:
    return f"{DETAILS_PREFIX}{int(location_id)}"
