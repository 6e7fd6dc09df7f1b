"""Location API routes."""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from db import get_db
from directory_core.geo import DEFAULT_RADIUS_KM
from directory_core.location_service import LocationService
from directory_core.search_criteria import SearchCriteria
from schemas.locations import (
    ErrorResponse,
    LocationDetailResponse,
    LocationListResponse,
    LocationSearchParams,
    MapFilters,
    MapPageResponse,
    NearbyLocationsResponse,
)
from utils.config import GOOGLE_MAPS_API_KEY

router = APIRouter(prefix="/locations", tags=["locations"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def get_location_service(request: Request) -> LocationService:
    """FastAPI dependency: the service created at startup."""
    return request.app.state.location_service


def strict_search_params(
    search: str | None = Query(default=None),
    stato: str | None = Query(default=None),
) -> LocationSearchParams:
    """Validate search/stato; unknown status is rejected (422)."""
    return LocationSearchParams.from_query(search, stato)


def render_map_page(request: Request, db: Session, service: LocationService) -> MapPageResponse:
    """Map page props. Filters are normalized leniently: bad input means no filter."""
    criteria = SearchCriteria.from_mapping(request.query_params)
    locations = service.search(db, criteria)
    return MapPageResponse(
        filters=MapFilters(search=criteria.search_term, stato=criteria.status),
        locations=locations,
        google_maps_api_key=GOOGLE_MAPS_API_KEY,
        google_maps_api_key_missing=not GOOGLE_MAPS_API_KEY,
    )


@router.get("", response_model=MapPageResponse)
def index(
    request: Request,
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> MapPageResponse:
    """Map page data with optional search/stato filters."""
    return render_map_page(request, db, service)


@router.get(
    "/search",
    response_model=LocationListResponse,
    responses={422: {"model": ErrorResponse}},
)
def search_locations(
    params: LocationSearchParams = Depends(strict_search_params),
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> LocationListResponse:
    """Search by text (title or address) and status."""
    return LocationListResponse(data=service.search(db, params.to_criteria()))


@router.get("/map", response_model=LocationListResponse)
def all_for_map(
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> LocationListResponse:
    """Every location, projected for map markers."""
    return LocationListResponse(data=service.get_all_for_map(db))


@router.get("/nearby", response_model=NearbyLocationsResponse)
def nearby_locations(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lng: float = Query(..., ge=-180.0, le=180.0),
    radius: float = Query(default=DEFAULT_RADIUS_KM, gt=0.0, le=20_100.0, description="Radius in km"),
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> NearbyLocationsResponse:
    """Locations within radius km of (lat, lng), nearest first."""
    return NearbyLocationsResponse(data=service.get_nearby(db, lat, lng, radius))


@router.get("/within-bounds", response_model=LocationListResponse)
def locations_within_bounds(
    min_lat: float = Query(..., ge=-90.0, le=90.0),
    min_lng: float = Query(..., ge=-180.0, le=180.0),
    max_lat: float = Query(..., ge=-90.0, le=90.0),
    max_lng: float = Query(..., ge=-180.0, le=180.0),
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> LocationListResponse:
    """Locations inside the box (bounds inclusive)."""
    if min_lat > max_lat or min_lng > max_lng:
        raise HTTPException(
            status_code=422,
            detail="min_lat/min_lng must not exceed max_lat/max_lng",
        )
    return LocationListResponse(data=service.get_within_bounds(db, min_lat, min_lng, max_lat, max_lng))


@router.get("/{location_id}", response_model=LocationDetailResponse, responses=_NOT_FOUND)
def show_location(
    location_id: int,
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> LocationDetailResponse:
    """Location by id."""
    return LocationDetailResponse(data=service.get_location_details(db, location_id))


@router.get("/{location_id}/details", response_model=LocationDetailResponse, responses=_NOT_FOUND)
def location_details(
    location_id: int,
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> LocationDetailResponse:
    """Detailed location information (same payload as show)."""
    return LocationDetailResponse(data=service.get_location_details(db, location_id))
