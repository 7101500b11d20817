"""Sort options for search results."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class SortConfig(BaseModel):
    """A sortable result field."""

    model_config = ConfigDict(frozen=True)

    key: str
    display_name: str


SORT_CONFIGS: List[SortConfig] = [
    SortConfig(key="cited_by_count", display_name="Citations"),
    # only for non-work entities
    SortConfig(key="works_count", display_name="Works"),
    # only for works
    SortConfig(key="publication_date", display_name="Date"),
    # only meaningful with a text search
    SortConfig(key="relevance_score", display_name="Relevance"),
]

SORT_KEYS = frozenset(c.key for c in SORT_CONFIGS)

DEFAULT_SORT_KEY = "relevance_score"
NO_QUERY_SORT_KEY = "cited_by_count"
DEFAULT_SORT_DIRECTION = "desc"


def parse_sort(value: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split a ``key:direction`` sort param into (key, direction or None)."""
    if not value:
        return None, None
    key, sep, direction = str(value).partition(":")
    return key.strip(), ((direction.strip() or None) if sep else None)


def coerce_sort_key(value: object) -> str:
    """Return the sort key in `value`, or the default if it is not recognized.

    Accepts a bare key or ``key:direction``; only the key is checked.
    """
    key, _ = parse_sort(value if isinstance(value, str) else None)
    return key if key in SORT_KEYS else DEFAULT_SORT_KEY


def get_sort_config(key: str) -> Optional[SortConfig]:
    """Look up the config for a sort key."""
    return next((c for c in SORT_CONFIGS if c.key == key), None)
