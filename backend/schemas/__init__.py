# Schemas package
from .health import HealthResponse
from .locations import ErrorResponse, LocationDetail, LocationListItem, MapPageResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "LocationDetail",
    "LocationListItem",
    "MapPageResponse",
]
