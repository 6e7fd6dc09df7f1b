"""Location model for DB persistence."""
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy.types import TypeDecorator

from directory_core.status import LocationStatus
from models import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusType(TypeDecorator):
    """Stores LocationStatus as its raw value; refuses anything outside the enum."""

    impl = String(16)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:
        if value is None:
            return None
        status = LocationStatus.parse(value)
        if status is None:
            raise ValueError(f"Invalid location status {value!r}; expected one of {LocationStatus.values()}")
        return status.value

    def process_result_value(self, value: Optional[str], dialect) -> Optional[LocationStatus]:
        if value is None:
            return None
        return LocationStatus(value)


class Location(Base):
    """Point of interest shown on the map."""

    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint("status IN ('attivo', 'disattivo', 'in_allarme')", name="ck_locations_status"),
        Index("ix_locations_status", "status"),
        Index("ix_locations_latitude_longitude", "latitude", "longitude"),
        Index("ix_locations_title", "title"),
        Index("ix_locations_address", "address"),
        Index("ix_locations_status_title", "status", "title"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    # Numeric(10, 8) / Numeric(11, 8) in the schema; exposed as float.
    latitude: Mapped[float] = mapped_column(Numeric(10, 8, asdecimal=False), nullable=False)
    longitude: Mapped[float] = mapped_column(Numeric(11, 8, asdecimal=False), nullable=False)
    status: Mapped[LocationStatus] = mapped_column(
        StatusType(), nullable=False, default=LocationStatus.Active, server_default=LocationStatus.Active.value
    )
    opening_hours: Mapped[str | None] = mapped_column(Text, nullable=True)
    ticket_price: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(255), nullable=True)
    visitor_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    @validates("title")
    def _validate_title(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("title is required")
        return value.strip()

    @validates("latitude")
    def _validate_latitude(self, key: str, value: Any) -> float:
        lat = float(value)
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"latitude must be between -90 and 90, got {lat}")
        return lat

    @validates("longitude")
    def _validate_longitude(self, key: str, value: Any) -> float:
        lng = float(value)
        if not -180.0 <= lng <= 180.0:
            raise ValueError(f"longitude must be between -180 and 180, got {lng}")
        return lng

    @validates("status")
    def _validate_status(self, key: str, value: Any) -> LocationStatus:
        status = LocationStatus.parse(value)
        if status is None:
            raise ValueError(f"Invalid location status {value!r}; expected one of {LocationStatus.values()}")
        return status

    @property
    def is_active(self) -> bool:
        return self.status == LocationStatus.Active

    @property
    def is_in_alarm(self) -> bool:
        return self.status == LocationStatus.InAlarm

    def __repr__(self) -> str:
        return f"<Location {self.id}: {self.title}>"
