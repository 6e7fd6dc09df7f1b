"""Search criteria value object: lenient normalization and cache fingerprint."""
import hashlib
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from directory_core.status import LocationStatus


def normalize_search(raw: Any) -> Optional[str]:
    """Trimmed search text, or None for non-strings and blank input."""
    if not isinstance(raw, str):
        return None
    term = raw.strip()
    return term or None


@dataclass(frozen=True)
class SearchCriteria:
    """
    Canonical search filter. Build it with from_input/from_mapping so that
    equal user intent always yields equal fields (and an equal fingerprint).
    """

    search: Optional[str] = None
    status: Optional[LocationStatus] = None

    @classmethod
    def from_input(cls, raw_search: Any = None, raw_status: Any = None) -> "SearchCriteria":
        """Normalize raw input; unknown status tokens are dropped, not rejected."""
        return cls(search=normalize_search(raw_search), status=LocationStatus.parse(raw_status))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SearchCriteria":
        """Build from request-like data with `search` and `stato` keys."""
        return cls.from_input(data.get("search"), data.get("stato"))

    @property
    def search_term(self) -> str:
        return self.search or ""

    @property
    def status_value(self) -> Optional[str]:
        return self.status.value if self.status is not None else None

    def has_filters(self) -> bool:
        return self.search is not None or self.status is not None

    def fingerprint(self) -> str:
        """MD5 hex of "<search>|<status>"; stable across processes."""
        raw = f"{self.search_term}|{self.status_value or ''}"
        return hashlib.md5(raw.encode("utf-8")).hexdigest()
