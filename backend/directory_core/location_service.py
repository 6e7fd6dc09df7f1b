"""Location service: cached search, details and map dataset on top of the repository."""
import logging

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from directory_core import cache_keys
from directory_core.cache import Cache
from directory_core.errors import LocationNotFoundError
from directory_core.geo import DEFAULT_RADIUS_KM
from directory_core.search_criteria import SearchCriteria
from models.location import Location
from repositories.location_repository import (
    LocationSummary,
    find_nearby as repo_find_nearby,
    get_location as repo_get_location,
    list_for_map as repo_list_for_map,
    list_within_bounds as repo_list_within_bounds,
    search_locations as repo_search_locations,
)
from schemas.locations import LocationDetail, LocationListItem, NearbyLocationItem, StatusInfo

LOG = logging.getLogger(__name__)

_LIST_ADAPTER = TypeAdapter(list[LocationListItem])
_DETAIL_ADAPTER = TypeAdapter(LocationDetail)


def _summary_to_item(loc: LocationSummary) -> LocationListItem:
    """Build LocationListItem from a projected row."""
    return LocationListItem(
        id=loc.id,
        title=loc.title,
        address=loc.address,
        latitude=float(loc.latitude),
        longitude=float(loc.longitude),
        status=loc.status,
    )


def _location_to_detail(loc: Location) -> LocationDetail:
    """Build LocationDetail from a full model instance."""
    return LocationDetail(
        id=loc.id,
        title=loc.title,
        description=loc.description or "",
        address=loc.address,
        latitude=float(loc.latitude),
        longitude=float(loc.longitude),
        status=StatusInfo(**loc.status.to_dict()),
        opening_hours=loc.opening_hours,
        ticket_price=loc.ticket_price,
        website=loc.website,
        phone=loc.phone,
        visitor_notes=loc.visitor_notes,
        created_at=loc.created_at,
        updated_at=loc.updated_at,
    )


class LocationService:
    """
    Read-side entry point for locations. Cached payloads are stored in their
    JSON form so in-memory and Redis backends behave the same; results are
    re-validated into schema objects on the way out.
    """

    def __init__(self, cache: Cache):
        self.cache = cache

    def search(self, session: Session, criteria: SearchCriteria) -> list[LocationListItem]:
        """Projected locations matching criteria, ordered by title. Cached per fingerprint."""
        key = cache_keys.location_search(criteria)
        payload = self.cache.get_or_compute(
            key,
            cache_keys.SEARCH_TTL,
            lambda: _LIST_ADAPTER.dump_python(self._perform_search(session, criteria), mode="json"),
        )
        return _LIST_ADAPTER.validate_python(payload)

    def get_location_details(self, session: Session, location_id: int) -> LocationDetail:
        """Full location by id. Raises LocationNotFoundError; a miss is never cached."""

        def load() -> dict:
            loc = repo_get_location(session, location_id)
            if loc is None:
                LOG.info("Location %s not found", location_id)
                raise LocationNotFoundError(location_id)
            return _DETAIL_ADAPTER.dump_python(_location_to_detail(loc), mode="json")

        payload = self.cache.get_or_compute(
            cache_keys.location_details(location_id),
            cache_keys.DETAILS_TTL,
            load,
        )
        return _DETAIL_ADAPTER.validate_python(payload)

    def get_all_for_map(self, session: Session) -> list[LocationListItem]:
        """Every location, projected for map markers."""
        payload = self.cache.get_or_compute(
            cache_keys.ALL_FOR_MAP,
            cache_keys.MAP_TTL,
            lambda: _LIST_ADAPTER.dump_python(
                [_summary_to_item(loc) for loc in repo_list_for_map(session)], mode="json"
            ),
        )
        return _LIST_ADAPTER.validate_python(payload)

    def get_nearby(
        self,
        session: Session,
        latitude: float,
        longitude: float,
        radius_km: float = DEFAULT_RADIUS_KM,
    ) -> list[NearbyLocationItem]:
        """Locations within radius_km, nearest first. Not cached."""
        return [
            NearbyLocationItem(**_summary_to_item(loc).model_dump(), distance_km=round(distance, 3))
            for loc, distance in repo_find_nearby(session, latitude, longitude, radius_km)
        ]

    def get_within_bounds(
        self,
        session: Session,
        min_lat: float,
        min_lng: float,
        max_lat: float,
        max_lng: float,
    ) -> list[LocationListItem]:
        """Locations inside an inclusive lat/lng box. Not cached."""
        return [
            _summary_to_item(loc)
            for loc in repo_list_within_bounds(session, min_lat, min_lng, max_lat, max_lng)
        ]

    def clear_location_cache(self, location_id: int) -> None:
        """
        Drop the details entry for location_id and the map dataset. Search
        entries are keyed by fingerprint and left to expire with their TTL.
        """
        self.cache.forget(cache_keys.location_details(location_id))
        self.cache.forget(cache_keys.ALL_FOR_MAP)
        LOG.info("Cleared cache for location %s", location_id)

    def clear_search_caches(self) -> int:
        """Drop every cached search result. Returns the number of entries removed."""
        removed = self.cache.forget_prefix(cache_keys.SEARCH_PREFIX)
        LOG.info("Cleared %d cached search results", removed)
        return removed

    def get_cache_stats(self) -> dict:
        """Cache state for monitoring."""
        return {
            "map_cache_exists": self.cache.has(cache_keys.ALL_FOR_MAP),
            "cache_driver": self.cache.backend_name,
        }

    def _perform_search(self, session: Session, criteria: SearchCriteria) -> list[LocationListItem]:
        return [_summary_to_item(loc) for loc in repo_search_locations(session, criteria)]
