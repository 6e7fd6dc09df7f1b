"""Integration tests: SQLite test engine behaviour (transaction isolation, Unicode lower)."""
import pytest
from sqlalchemy import func, select

from repositories.location_repository import count_locations, update_location

pytestmark = pytest.mark.integration


def test_committed_rows_stay_inside_the_test_transaction(db_session, make_location):
    """Repository commits release the savepoint but not the outer transaction."""
    loc = make_location(title="Riga Temporanea")
    update_location(db_session, loc.id, title="Riga Temporanea Bis")
    assert db_session.connection().in_transaction()
    assert count_locations(db_session) == 1


def test_rows_from_previous_test_are_rolled_back(db_session):
    """Runs after the test above: nothing it committed is visible here."""
    assert count_locations(db_session) == 0


def test_sqlite_lower_folds_unicode(db_session):
    assert db_session.execute(select(func.lower("ÉREMO CITTÀ"))).scalar() == "éremo città"
