"""Merge filters that share a key into the compact OR encoding.

Negated filters are never combined with each other or with positive ones.
"""

from typing import Dict, Iterable, List, Optional

from facetsearch.domains.filters.codec import FILTER_SEPARATOR, KEY_SEPARATOR, VALUE_SEPARATOR
from facetsearch.domains.filters.types import NEGATION_PREFIX, Filter


def _negated_entry(f: Filter) -> str:
    return f"{f.key}{KEY_SEPARATOR}{NEGATION_PREFIX}{f.encoded_value}"


def merge(filters: Iterable[Filter]) -> List[str]:
    """Merge filters into encoded entries.

    Positive filters are grouped by key in order of first appearance and each
    group becomes ``key:v1|v2|...`` with values in their existing order.
    Every negated filter contributes its own ``key:!value``. Positive groups
    come first, negated entries after.
    """
    filters = list(filters)
    groups: Dict[str, List[str]] = {}
    for f in filters:
        if not f.is_negated:
            groups.setdefault(f.key, []).append(f.encoded_value)

    positive = [
        f"{key}{KEY_SEPARATOR}{VALUE_SEPARATOR.join(values)}" for key, values in groups.items()
    ]
    negated = [_negated_entry(f) for f in filters if f.is_negated]
    return positive + negated


def merge_facet_filters(filters: Iterable[Filter]) -> List[str]:
    """Merge the filters of a single facet.

    All positive values are joined under the key of the first positive
    filter, regardless of their own keys. Use merge() for mixed keys.
    """
    filters = list(filters)
    if not filters:
        return []
    positive = [f for f in filters if not f.is_negated]
    merged: Optional[str] = None
    if positive:
        values = VALUE_SEPARATOR.join(f.encoded_value for f in positive)
        merged = f"{positive[0].key}{KEY_SEPARATOR}{values}"
    negated = [_negated_entry(f) for f in filters if f.is_negated]
    return [merged, *negated] if merged else negated


def to_query_string(filters: Iterable[Filter]) -> str:
    """Deduplicate, sort and merge filters into the string sent to the API."""
    unique = {f.as_str: f for f in filters}
    ordered = [unique[k] for k in sorted(unique)]
    return FILTER_SEPARATOR.join(merge(ordered))
