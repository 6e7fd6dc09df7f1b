"""Pydantic schemas for location API. JSON keys keep the public (Italian) field names."""
import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from directory_core.errors import InvalidLocationSearchError
from directory_core.search_criteria import SearchCriteria
from directory_core.status import LocationStatus

SEARCH_MAX_LENGTH = 255

_TAG_RE = re.compile(r"<[^>]*>")

# (field, pydantic error type) -> message returned to the client.
_SEARCH_ERROR_MESSAGES = {
    ("search", "string_too_short"): "The search term must contain at least 1 character.",
    ("search", "string_too_long"): f"The search term may not be greater than {SEARCH_MAX_LENGTH} characters.",
    ("stato", "enum"): "The selected status is invalid.",
}


class LocationListItem(BaseModel):
    """Location in list and map responses (no detail-only fields)."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = Field(alias="titolo")
    address: str = Field(alias="indirizzo")
    latitude: float
    longitude: float
    status: LocationStatus = Field(alias="stato")


class NearbyLocationItem(LocationListItem):
    """List item with its distance from the query point."""

    distance_km: float


class StatusInfo(BaseModel):
    """Status value with display metadata."""

    value: LocationStatus
    label: str
    color: str
    css_class: str


class LocationDetail(BaseModel):
    """Full location, as returned by the show/details endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = Field(alias="titolo")
    description: str = Field(alias="descrizione")
    address: str = Field(alias="indirizzo")
    latitude: float
    longitude: float
    status: StatusInfo = Field(alias="stato")
    opening_hours: str | None = Field(default=None, alias="orari_apertura")
    ticket_price: str | None = Field(default=None, alias="prezzo_biglietto")
    website: str | None = Field(default=None, alias="sito_web")
    phone: str | None = Field(default=None, alias="telefono")
    visitor_notes: str | None = Field(default=None, alias="note_visitatori")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LocationListResponse(BaseModel):
    data: list[LocationListItem]


class NearbyLocationsResponse(BaseModel):
    data: list[NearbyLocationItem]


class LocationDetailResponse(BaseModel):
    data: LocationDetail


class MapFilters(BaseModel):
    """Filters echoed back to the map page."""

    search: str = ""
    stato: LocationStatus | None = None


class MapPageResponse(BaseModel):
    """Props for the map page: active filters, markers, and the maps key."""

    filters: MapFilters
    locations: list[LocationListItem]
    google_maps_api_key: str = ""
    google_maps_api_key_missing: bool = True


class ErrorResponse(BaseModel):
    """Machine-readable error body."""

    message: str
    error: str
    errors: dict[str, list[str]] | None = None


class LocationSearchParams(BaseModel):
    """
    Strictly validated search query. Unlike SearchCriteria.from_input, an
    unknown status is rejected rather than ignored.
    """

    search: str | None = Field(default=None, min_length=1, max_length=SEARCH_MAX_LENGTH)
    stato: LocationStatus | None = None

    @field_validator("search", mode="before")
    @classmethod
    def _clean_search(cls, v: Any) -> str | None:
        if not isinstance(v, str):
            return None
        return _TAG_RE.sub("", v).strip() or None

    @field_validator("stato", mode="before")
    @classmethod
    def _clean_stato(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @classmethod
    def from_query(cls, search: Any = None, stato: Any = None) -> "LocationSearchParams":
        """Validate raw query values; raises InvalidLocationSearchError with per-field messages."""
        try:
            return cls(search=search, stato=stato)
        except ValidationError as e:
            errors: dict[str, list[str]] = {}
            for err in e.errors(include_url=False):
                field = str(err["loc"][0]) if err["loc"] else "query"
                message = _SEARCH_ERROR_MESSAGES.get((field, err["type"]), err["msg"])
                errors.setdefault(field, []).append(message)
            raise InvalidLocationSearchError(errors) from e

    def to_criteria(self) -> SearchCriteria:
        return SearchCriteria.from_input(self.search, self.stato)
