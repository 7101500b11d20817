"""Typed search state model.

One SearchState per orchestrator. Assignments are validated, so the page
and sort invariants hold no matter which operation writes them.
"""

import math
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from facetsearch.domains.filters.types import Filter
from facetsearch.search.sort import DEFAULT_SORT_DIRECTION, DEFAULT_SORT_KEY, coerce_sort_key

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_page(value: Any) -> int:
    """Parse a page number; anything that is not a positive integer becomes 1.

    Strings are read like parseInt: leading digits count, the rest is ignored.
    """
    if isinstance(value, bool) or value is None:
        return 1
    if isinstance(value, float):
        if not math.isfinite(value):
            return 1
        value = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 1
        value = int(match.group(1))
    elif not isinstance(value, int):
        return 1
    return value if value >= 1 else 1


class SearchState(BaseModel):
    """Mutable search state owned by the SearchOrchestrator.

    The orchestrator writes to it through its named operations:
    - boot_from_url / do_text_search -> entity_type, text_search, filters, page, sort
    - add_filters / remove_filters -> input_filters, page
    - do_search -> results, response_time, results_count, results_filters, is_loading
    - set_entity_zoom / close_entity_zoom -> entity_zoom_*
    """

    model_config = ConfigDict(validate_assignment=True)

    # =========================================================================
    # Query
    # =========================================================================
    entity_type: Optional[str] = Field(default=None, description="Collection being searched")
    input_filters: List[Filter] = Field(
        default_factory=list, description="Active filters, unique by as_str"
    )
    text_search: str = Field(default="", description="Free-text query")
    page: int = Field(default=1, description="1-based result page")
    sort: str = Field(default=DEFAULT_SORT_KEY, description="Sort key")
    sort_direction: str = Field(default=DEFAULT_SORT_DIRECTION, description="Sort direction")

    # =========================================================================
    # Response
    # =========================================================================
    results: List[Dict[str, Any]] = Field(default_factory=list, description="Result records")
    results_filters: List[Filter] = Field(
        default_factory=list, description="Facet values with counts from the last search"
    )
    response_time: Optional[float] = Field(default=None, description="API db time in ms")
    results_count: Optional[int] = Field(default=None, description="Total matching records")
    is_loading: bool = Field(default=False, description="Advisory loading flag")

    # =========================================================================
    # Entity zoom overlay
    # =========================================================================
    entity_zoom_data: Optional[Dict[str, Any]] = None
    entity_zoom_type: Optional[str] = None
    entity_zoom_is_open: bool = False

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, v: Any) -> int:
        return parse_page(v)

    @field_validator("sort", mode="before")
    @classmethod
    def _coerce_sort(cls, v: Any) -> str:
        return coerce_sort_key(v)

    @field_validator("text_search", mode="before")
    @classmethod
    def _none_text_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def add_input_filter(self, f: Filter) -> bool:
        """Append a filter unless one with the same as_str is active.

        Returns:
            True if the filter was added.
        """
        if any(existing.as_str == f.as_str for existing in self.input_filters):
            return False
        self.input_filters.append(f)
        return True

    def remove_input_filter(self, f: Filter) -> bool:
        """Remove the active filter with the same as_str.

        Returns:
            True if a filter was removed.
        """
        before = len(self.input_filters)
        self.input_filters = [x for x in self.input_filters if x.as_str != f.as_str]
        return len(self.input_filters) != before
