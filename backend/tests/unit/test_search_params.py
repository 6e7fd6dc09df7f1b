"""Unit tests: strict search query validation."""
import pytest

from directory_core.errors import InvalidLocationSearchError
from directory_core.search_criteria import SearchCriteria
from directory_core.status import LocationStatus
from schemas.locations import SEARCH_MAX_LENGTH, LocationSearchParams

pytestmark = pytest.mark.unit


def test_empty_query_is_valid():
    """No parameters means no filters."""
    params = LocationSearchParams.from_query()
    assert params.search is None
    assert params.stato is None
    assert params.to_criteria() == SearchCriteria()


def test_search_is_trimmed_and_tags_stripped():
    """Markup is removed and whitespace trimmed before validation."""
    params = LocationSearchParams.from_query("  <b>Roma</b> ", None)
    assert params.search == "Roma"


def test_blank_search_after_cleaning_is_none():
    """A search made only of tags or whitespace becomes no filter."""
    assert LocationSearchParams.from_query("   ").search is None
    assert LocationSearchParams.from_query("<i></i>").search is None


def test_valid_status_is_parsed():
    """Known status tokens become LocationStatus members."""
    params = LocationSearchParams.from_query(None, " in_allarme ")
    assert params.stato is LocationStatus.InAlarm
    assert params.to_criteria().status_value == "in_allarme"


def test_unknown_status_is_rejected():
    """Strict mode rejects a status outside the enum, keyed by the stato field."""
    with pytest.raises(InvalidLocationSearchError) as exc_info:
        LocationSearchParams.from_query("Roma", "chiuso")
    err = exc_info.value
    assert err.error_code == "INVALID_SEARCH_PARAMETERS"
    assert err.errors == {"stato": ["The selected status is invalid."]}


def test_search_too_long_is_rejected():
    """Search longer than the maximum is rejected."""
    with pytest.raises(InvalidLocationSearchError) as exc_info:
        LocationSearchParams.from_query("x" * (SEARCH_MAX_LENGTH + 1))
    assert list(exc_info.value.errors) == ["search"]


def test_search_at_max_length_is_accepted():
    """Exactly the maximum length is fine."""
    params = LocationSearchParams.from_query("x" * SEARCH_MAX_LENGTH)
    assert len(params.search) == SEARCH_MAX_LENGTH


def test_to_criteria_matches_lenient_normalization():
    """Valid strict input yields the same criteria (and fingerprint) as lenient input."""
    strict = LocationSearchParams.from_query(" Colosseo ", "attivo").to_criteria()
    lenient = SearchCriteria.from_input("Colosseo", "attivo")
    assert strict == lenient
    assert strict.fingerprint() == lenient.fingerprint()
