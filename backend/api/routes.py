"""Service-level API routes."""
from fastapi import APIRouter, Depends

from api.locations import get_location_service
from directory_core.location_service import LocationService
from schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(service: LocationService = Depends(get_location_service)) -> HealthResponse:
    """Liveness plus cache state (backend in use, whether the map dataset is warm)."""
    stats = service.get_cache_stats()
    return HealthResponse(cache_driver=stats["cache_driver"], map_cache_exists=stats["map_cache_exists"])
