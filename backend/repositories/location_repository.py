"""Location repository: search/filter/geo queries plus data-management helpers."""
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from directory_core.geo import DEFAULT_RADIUS_KM, bounding_box, great_circle_km
from directory_core.search_criteria import SearchCriteria, normalize_search
from directory_core.status import LocationStatus
from models.location import Location

# List/map views select only these columns; detail-only fields never load.
MAP_COLUMNS = (
    Location.id,
    Location.title,
    Location.address,
    Location.latitude,
    Location.longitude,
    Location.status,
)

UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "address",
        "latitude",
        "longitude",
        "status",
        "opening_hours",
        "ticket_price",
        "website",
        "phone",
        "visitor_notes",
    }
)


class LocationSummary(NamedTuple):
    """Projected row for list and map views."""

    id: int
    title: str
    address: str
    latitude: float
    longitude: float
    status: LocationStatus


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_search(stmt: Select, term: Optional[str]) -> Select:
    """Case-insensitive substring match on title OR address. Blank term is a no-op."""
    term = normalize_search(term)
    if term is None:
        return stmt
    pattern = f"%{_escape_like(term.lower())}%"
    return stmt.where(
        or_(
            func.lower(Location.title).like(pattern, escape="\\"),
            func.lower(Location.address).like(pattern, escape="\\"),
        )
    )


def apply_status(stmt: Select, status: LocationStatus | str | None) -> Select:
    """Exact status match. None or an unknown token is a no-op."""
    parsed = LocationStatus.parse(status)
    if parsed is None:
        return stmt
    return stmt.where(Location.status == parsed)


def _ordered(stmt: Select) -> Select:
    return stmt.order_by(Location.title, Location.id)


def _summaries(session: Session, stmt: Select) -> list[LocationSummary]:
    return [LocationSummary._make(row) for row in session.execute(stmt).all()]


def search_locations(session: Session, criteria: SearchCriteria) -> list[LocationSummary]:
    """Projected locations matching criteria, ordered by title."""
    stmt = select(*MAP_COLUMNS)
    stmt = apply_search(stmt, criteria.search)
    stmt = apply_status(stmt, criteria.status)
    return _summaries(session, _ordered(stmt))


def list_for_map(session: Session) -> list[LocationSummary]:
    """All locations, projected for the map, ordered by title."""
    return _summaries(session, _ordered(select(*MAP_COLUMNS)))


def list_within_bounds(
    session: Session,
    min_lat: float,
    min_lng: float,
    max_lat: float,
    max_lng: float,
) -> list[LocationSummary]:
    """Locations inside the box (bounds inclusive), ordered by title."""
    stmt = select(*MAP_COLUMNS).where(
        Location.latitude.between(min_lat, max_lat),
        Location.longitude.between(min_lng, max_lng),
    )
    return _summaries(session, _ordered(stmt))


def find_nearby(
    session: Session,
    lat: float,
    lng: float,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[tuple[LocationSummary, float]]:
    """
    Locations within radius_km of (lat, lng) as (summary, distance_km) pairs,
    nearest first. A bounding box narrows the rows in SQL; the exact
    great-circle distance is applied in Python so any backend works.
    """
    box = bounding_box(lat, lng, radius_km)
    candidates = list_within_bounds(session, box.min_lat, box.min_lng, box.max_lat, box.max_lng)
    nearby = []
    for loc in candidates:
        distance = great_circle_km(lat, lng, loc.latitude, loc.longitude)
        if distance <= radius_km:
            nearby.append((loc, distance))
    nearby.sort(key=lambda pair: (pair[1], pair[0].title))
    return nearby


def get_location(session: Session, location_id: int) -> Optional[Location]:
    """Return a location by id or None."""
    return session.get(Location, location_id)


def list_by_status(session: Session, status: LocationStatus | str) -> list[Location]:
    """Full rows with the given status, ordered by title. Unknown status returns all rows."""
    stmt = apply_status(select(Location), status)
    return list(session.execute(_ordered(stmt)).scalars().all())


def list_recently_modified(
    session: Session,
    hours: int = 24,
    now: Optional[datetime] = None,
) -> list[Location]:
    """Locations created or updated within the last `hours`, ordered by title."""
    since = (now or datetime.now(timezone.utc)) - timedelta(hours=hours)
    stmt = select(Location).where(or_(Location.created_at >= since, Location.updated_at >= since))
    return list(session.execute(_ordered(stmt)).scalars().all())


def count_locations(session: Session) -> int:
    """Return the number of locations (for seeding)."""
    result = session.execute(select(func.count()).select_from(Location))
    return result.scalar() or 0


def create_location(
    session: Session,
    *,
    title: str,
    address: str,
    latitude: float,
    longitude: float,
    description: str = "",
    status: LocationStatus | str = LocationStatus.Active,
    opening_hours: Optional[str] = None,
    ticket_price: Optional[str] = None,
    website: Optional[str] = None,
    phone: Optional[str] = None,
    visitor_notes: Optional[str] = None,
) -> Location:
    """Create a location, commit, and return it. Coordinates and status are validated on the model."""
    loc = Location(
        title=title,
        description=description,
        address=address,
        latitude=latitude,
        longitude=longitude,
        status=status,
        opening_hours=opening_hours,
        ticket_price=ticket_price,
        website=website,
        phone=phone,
        visitor_notes=visitor_notes,
    )
    session.add(loc)
    session.commit()
    session.refresh(loc)
    return loc


def update_location(session: Session, location_id: int, **fields: Any) -> Optional[Location]:
    """Update the given fields. Returns the updated location or None if not found."""
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update unknown location fields: {sorted(unknown)}")
    loc = get_location(session, location_id)
    if loc is None:
        return None
    for name, value in fields.items():
        setattr(loc, name, value)
    session.commit()
    session.refresh(loc)
    return loc


def delete_location(session: Session, location_id: int) -> bool:
    """Delete a location by id. Returns True if deleted, False if not found."""
    loc = get_location(session, location_id)
    if loc is None:
        return False
    session.delete(loc)
    session.commit()
    return True
