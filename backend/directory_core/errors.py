"""Domain errors surfaced to the HTTP layer."""


class LocationDirectoryError(Exception):
    """Base class for location directory errors."""


class LocationNotFoundError(LocationDirectoryError):
    """Requested location id does not exist."""

    error_code = "LOCATION_NOT_FOUND"

    def __init__(self, location_id: int, message: str = "Location not found"):
        self.location_id = location_id
        super().__init__(f"{message} (ID: {location_id})")


class InvalidLocationSearchError(LocationDirectoryError):
    """Search parameters rejected by strict validation. errors maps field -> messages."""

    error_code = "INVALID_SEARCH_PARAMETERS"

    def __init__(
        self,
        errors: dict[str, list[str]] | None = None,
        message: str = "Invalid location search parameters",
    ):
        self.errors = errors or {}
        super().__init__(message)
