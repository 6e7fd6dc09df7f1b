"""
Invalidate cached location data after commits that change locations.

Ids of inserted/updated/deleted Location rows are collected on flush and
stored on session.info; after a successful commit the service drops their
details entries and the map dataset. A rollback discards the pending ids.
"""
import logging

from sqlalchemy import event
from sqlalchemy.orm import Session

from directory_core.location_service import LocationService
from models.location import Location

LOG = logging.getLogger(__name__)

_PENDING_KEY = "_changed_location_ids"


class LocationCacheInvalidator:
    """Binds Session-class events to a LocationService. install()/uninstall() are idempotent."""

    def __init__(self, service: LocationService, session_target=Session):
        self.service = service
        self.session_target = session_target

    def install(self) -> None:
        for name, fn in self._listeners():
            if not event.contains(self.session_target, name, fn):
                event.listen(self.session_target, name, fn)

    def uninstall(self) -> None:
        for name, fn in self._listeners():
            if event.contains(self.session_target, name, fn):
                event.remove(self.session_target, name, fn)

    def _listeners(self):
        return (
            ("after_flush", self._collect),
            ("after_commit", self._invalidate),
            ("after_soft_rollback", self._discard),
        )

    def _collect(self, session: Session, flush_context) -> None:
        changed = session.info.setdefault(_PENDING_KEY, set())
        for obj in (*session.new, *session.dirty, *session.deleted):
            if isinstance(obj, Location) and obj.id is not None:
                changed.add(obj.id)

    def _invalidate(self, session: Session) -> None:
        changed = session.info.pop(_PENDING_KEY, None)
        if not changed:
            return
        for location_id in sorted(changed):
            self.service.clear_location_cache(location_id)

    def _discard(self, session: Session, previous_transaction) -> None:
        if session.info.pop(_PENDING_KEY, None):
            LOG.debug("Rollback: dropped pending location cache invalidations")
