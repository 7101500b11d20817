"""Display helpers for filter values."""

import math
from datetime import date
from typing import Optional, Sequence, Union

YearBound = Union[int, str, float, None]


def _normalize_bound(bound: YearBound) -> Union[int, str]:
    if bound is None or bound == "":
        return ""
    if isinstance(bound, float):
        if math.isinf(bound) or math.isnan(bound):
            return ""
        return int(bound)
    return bound


def display_year_range(
    year_range: Sequence[YearBound], current_year: Optional[int] = None
) -> Union[int, str, None]:
    """Format a ``[from, to]`` year range for display.

    Cases, checked in this order:
        both bounds empty       -> None
        from == to              -> the year itself
        from empty              -> "through <to>"
        to empty                -> "since <from>", or the bare current year
                                   when from is the current year
        otherwise               -> "<from>-<to>"

    Empty means None, "" or an infinite float.

    Args:
        year_range: Two bounds, each possibly empty.
        current_year: Year treated as "now". Defaults to today's year.
    """
    start, end = (_normalize_bound(b) for b in year_range)
    if current_year is None:
        current_year = date.today().year

    if start == "" and end == "":
        return None
    if start == end:
        return start
    if start == "":
        return f"through {end}"
    if end == "":
        if str(start) == str(current_year):
            return current_year
        return f"since {start}"
    return f"{start}-{end}"
