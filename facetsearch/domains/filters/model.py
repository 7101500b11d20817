"""Filter construction and normalization.

Every Filter in the system is built here, either from raw key/value input
(URL fragments, UI selections, persistent identifiers) or from a facet
counts response of the search API. This is the only place that decides
whether a value is the null sentinel.
"""

import math
from typing import Any, Dict, Iterable, List, Optional

from facetsearch.core.config import settings
from facetsearch.core.logging import logger
from facetsearch.domains.facets.protocols import FacetConfigRegistryProtocol
from facetsearch.domains.facets.registry import default_registry
from facetsearch.domains.filters.types import (
    NEGATION_PREFIX,
    NULL_TOKEN,
    Filter,
    FilterValue,
)

model_logger = logger.with_prefix("[FilterModel] ")

NULL_VALUES = frozenset({"unknown", "null"})


def _registry(
    registry: Optional[FacetConfigRegistryProtocol],
) -> FacetConfigRegistryProtocol:
    return registry if registry is not None else default_registry()


def _encode_value(value: FilterValue) -> str:
    if value is None:
        return NULL_TOKEN
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def create_filter_id(key: str, value: FilterValue, is_negated: bool = False) -> str:
    """Build the canonical single-filter encoding.

    Args:
        key: Facet key, lower-cased in the output.
        value: API-bound value; None encodes as ``null``.
        is_negated: Whether to prefix the value with ``!``.

    Returns:
        ``key:value`` or ``key:!value``.
    """
    negate = NEGATION_PREFIX if is_negated else ""
    return f"{key.lower()}:{negate}{_encode_value(value)}"


def create_filter(
    entity_type: Optional[str],
    key: str,
    raw_value: FilterValue,
    is_negated: bool = False,
    *,
    registry: Optional[FacetConfigRegistryProtocol] = None,
) -> Filter:
    """Create a filter from raw input.

    Textual values lose the canonical entity URL prefix. Entity values (and
    any value that carried the prefix) are lower-cased in the identity so
    ``I123`` and ``https://openalex.org/i123`` are the same filter. The
    tokens ``unknown`` and ``null`` become a None API value while the
    display value keeps the token.

    A key the registry does not know still yields a filter, without
    display metadata.
    """
    key = key.lower()
    config = _registry(registry).find(entity_type, key)

    prefix = settings.ENTITY_URL_PREFIX
    had_prefix = isinstance(raw_value, str) and raw_value.startswith(prefix)
    display_value = raw_value[len(prefix) :] if had_prefix else raw_value
    api_value = None if display_value in NULL_VALUES else display_value

    identity_value = api_value
    if isinstance(identity_value, str) and (had_prefix or (config and config.is_entity)):
        identity_value = identity_value.lower()

    return Filter(
        entity_type=entity_type,
        key=key,
        value=api_value,
        display_value=display_value,
        is_negated=bool(is_negated),
        as_str=create_filter_id(key, identity_value, bool(is_negated)),
        kv=create_filter_id(key, identity_value),
        config=config,
    )


def create_display_filter(
    entity_type: Optional[str],
    key: str,
    value: FilterValue,
    is_negated: bool,
    display_value: FilterValue,
    count: int,
    total_count: Optional[int] = None,
    *,
    registry: Optional[FacetConfigRegistryProtocol] = None,
) -> Filter:
    """Create a filter carrying facet counts for display.

    ``count_percent`` is ``100 * count / total_count`` and NaN when the total
    is zero or unknown; callers check with math.isnan before rendering it.
    """
    base = create_filter(entity_type, key, value, is_negated, registry=registry)
    count_percent = (count / total_count) * 100 if total_count else math.nan
    return base.model_copy(
        update={
            "display_value": display_value,
            "count": count,
            "count_percent": count_percent,
        }
    )


def create_filter_from_identifier(
    identifier: Optional[str],
    *,
    registry: Optional[FacetConfigRegistryProtocol] = None,
) -> Optional[Filter]:
    """Create a filter from a persistent identifier such as a DOI or ORCID.

    Every configured PID pattern is tried in registry order. The first
    pattern that matches with exactly one capture group decides the facet;
    later matches are logged and ignored.

    Returns:
        The filter, or None when the identifier is empty or nothing matches.
    """
    if not identifier:
        return None
    trimmed = identifier.strip()
    if not trimmed:
        return None

    registry = _registry(registry)
    matches = []
    for config in registry.list_all():
        if config.regex is None:
            continue
        match = config.regex.search(trimmed)
        if match and len(match.groups()) == 1:
            matches.append((config, match.group(1)))

    if not matches:
        return None
    if len(matches) > 1:
        model_logger.warning(
            f"Identifier '{trimmed}' matches several facets "
            f"({', '.join(c.key for c, _ in matches)}); using '{matches[0][0].key}'"
        )

    config, value = matches[0]
    return create_filter(config.entity_type, config.key, value, registry=registry)


def filters_from_api_response(
    entity_type: Optional[str],
    api_facets: Iterable[Dict[str, Any]],
    total_count: Optional[int] = None,
    *,
    registry: Optional[FacetConfigRegistryProtocol] = None,
) -> List[Filter]:
    """Build display filters from a ``<entity_type>/filters/...`` response.

    Args:
        entity_type: Entity type the response belongs to.
        api_facets: The response ``filters`` list:
            ``[{key, is_negated, values: [{value, display_name, count}]}]``.
        total_count: Result count used for count percentages.
        registry: Facet registry, defaults to the process-wide one.

    Returns:
        One filter per facet value, search facets excluded.
    """
    ret: List[Filter] = []
    for facet in api_facets:
        key = facet.get("key", "")
        if key == "search" or key.endswith(".search"):
            continue
        is_negated = bool(facet.get("is_negated"))
        for value_obj in facet.get("values") or []:
            ret.append(
                create_display_filter(
                    entity_type,
                    key,
                    value_obj.get("value"),
                    is_negated,
                    value_obj.get("display_name"),
                    value_obj.get("count") or 0,
                    total_count,
                    registry=registry,
                )
            )
    return ret


def sorted_filters(filters: Iterable[Filter], sort_by_value: bool = False) -> List[Filter]:
    """Return filters sorted by value (descending) or by count (descending)."""
    if sort_by_value:
        return sorted(filters, key=lambda f: _encode_value(f.value), reverse=True)
    return sorted(filters, key=lambda f: f.count or 0, reverse=True)
