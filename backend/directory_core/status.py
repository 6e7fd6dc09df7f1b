"""Location status enumeration with display metadata."""
from enum import Enum
from typing import Any, Optional


class LocationStatus(str, Enum):
    """Operational state of a location. Raw values are what gets persisted."""
    Active = "attivo"
    Inactive = "disattivo"
    InAlarm = "in_allarme"

    @classmethod
    def values(cls) -> list[str]:
        """Raw values in declaration order."""
        return [member.value for member in cls]

    @classmethod
    def parse(cls, raw: Any) -> Optional["LocationStatus"]:
        """Return the matching status or None. Never raises."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip())
        except ValueError:
            return None

    @classmethod
    def is_valid(cls, raw: Any) -> bool:
        return cls.parse(raw) is not None

    @property
    def label(self) -> str:
        return _DISPLAY[self][0]

    @property
    def color(self) -> str:
        """Hex color used for map markers and badges."""
        return _DISPLAY[self][1]

    @property
    def css_class(self) -> str:
        return _DISPLAY[self][2]

    def to_dict(self) -> dict[str, str]:
        """Value plus display metadata, as rendered in location details."""
        return {
            "value": self.value,
            "label": self.label,
            "color": self.color,
            "css_class": self.css_class,
        }


# status -> (label, color, css_class)
_DISPLAY: dict[LocationStatus, tuple[str, str, str]] = {
    LocationStatus.Active: ("Attivo", "#10B981", "success"),
    LocationStatus.Inactive: ("Disattivo", "#9CA3AF", "muted"),
    LocationStatus.InAlarm: ("In Allarme", "#EF4444", "danger"),
}
