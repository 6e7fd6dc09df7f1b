# Directory core: status enum, search criteria, geo math, cache, location service
from directory_core.errors import InvalidLocationSearchError, LocationDirectoryError, LocationNotFoundError
from directory_core.search_criteria import SearchCriteria
from directory_core.status import LocationStatus

__all__ = [
    "InvalidLocationSearchError",
    "LocationDirectoryError",
    "LocationNotFoundError",
    "LocationStatus",
    "SearchCriteria",
]
