"""Filter string codec.

Grammar of the ``filter`` query parameter::

    filters   := filter ("," filter)*
    filter    := key ":" valueSpec
    valueSpec := "!" value | value ("|" value)*

Decoding is lenient: fragments that do not fit the grammar are dropped so
stale or hand-edited links still load. There is no escaping for ``,``
``|`` or a leading ``!`` inside values.
"""

from typing import Iterable, List, Optional, Tuple

from facetsearch.domains.facets.protocols import FacetConfigRegistryProtocol
from facetsearch.domains.filters.model import create_filter
from facetsearch.domains.filters.types import NEGATION_PREFIX, Filter

FILTER_SEPARATOR = ","
VALUE_SEPARATOR = "|"
KEY_SEPARATOR = ":"
SEARCH_KEY_SUFFIX = ".search"


def _split_fragment(fragment: str) -> Optional[Tuple[str, str]]:
    key, sep, values_str = fragment.partition(KEY_SEPARATOR)
    key = key.strip()
    if not sep or not key:
        return None
    return key, values_str


def decode(
    query_string: Optional[str],
    entity_type: Optional[str] = None,
    *,
    registry: Optional[FacetConfigRegistryProtocol] = None,
) -> List[Filter]:
    """Decode a filter string into single-valued filter records.

    An OR-list ``key:a|b`` expands to one record per value. Splits on the
    first colon only, so values may themselves contain colons.

    Args:
        query_string: The encoded filter string; None and "" are accepted.
        entity_type: Entity type used for facet metadata lookups.
        registry: Facet registry, defaults to the process-wide one.

    Returns:
        Filters in the order they appear. Never raises on malformed input.
    """
    if not query_string or KEY_SEPARATOR not in query_string:
        return []

    filters: List[Filter] = []
    for fragment in query_string.split(FILTER_SEPARATOR):
        parsed = _split_fragment(fragment)
        if parsed is None:
            continue
        key, values_str = parsed

        if values_str.startswith(NEGATION_PREFIX):
            value = values_str[len(NEGATION_PREFIX) :]
            if value:
                filters.append(create_filter(entity_type, key, value, True, registry=registry))
            continue

        for value in values_str.split(VALUE_SEPARATOR):
            if value:
                filters.append(create_filter(entity_type, key, value, False, registry=registry))
    return filters


def encode(filters: Iterable[Filter]) -> str:
    """Encode filters as a flat, deduplicated, sorted filter string."""
    return FILTER_SEPARATOR.join(sorted({f.as_str for f in filters}))


def text_search_from_query_string(query_string: Optional[str], key: Optional[str] = None) -> str:
    """Return the free-text query carried by a search filter, or "".

    Args:
        query_string: The encoded filter string.
        key: Search key to look for. When omitted, the first ``*.search``
            filter of any key is used.
    """
    if not query_string:
        return ""
    for fragment in query_string.split(FILTER_SEPARATOR):
        parsed = _split_fragment(fragment)
        if parsed is None:
            continue
        fragment_key = parsed[0].lower()
        matches = fragment_key == key if key else fragment_key.endswith(SEARCH_KEY_SUFFIX)
        if matches:
            return parsed[1]
    return ""