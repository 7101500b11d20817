"""Factory for wiring a SearchOrchestrator with production adapters."""

from typing import Optional

from facetsearch.adapters.api.openalex import OpenAlexApiClient
from facetsearch.adapters.navigation.history import HistoryNavigator
from facetsearch.core.logging import logger
from facetsearch.core.protocols.api_client import SearchApiClient
from facetsearch.domains.facets.protocols import FacetConfigRegistryProtocol
from facetsearch.search.orchestrator import SearchOrchestrator


def create_orchestrator(
    url: str = "/",
    *,
    api: Optional[SearchApiClient] = None,
    registry: Optional[FacetConfigRegistryProtocol] = None,
) -> SearchOrchestrator:
    """Build an orchestrator whose navigator starts at `url`.

    Args:
        url: Initial location, e.g. ``/works?filter=is_oa:true&page=2``.
        api: API client. Defaults to a new OpenAlexApiClient, which the
            caller closes with aclose() when done.
        registry: Facet registry, defaults to the process-wide one.

    Returns:
        A SearchOrchestrator ready for boot_from_url().
    """
    navigator = HistoryNavigator.from_url(url)
    return SearchOrchestrator(
        api=api or OpenAlexApiClient(),
        navigator=navigator,
        registry=registry,
        logger=logger.with_context(component="search"),
    )
