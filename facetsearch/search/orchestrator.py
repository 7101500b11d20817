"""Search orchestrator.

The orchestrator is responsible for:
1. Owning the SearchState and mutating it only through named operations
2. Keeping the navigator location in sync with the state
3. Issuing the results request and the facet counts request
4. Discarding responses from searches that have been superseded

Every search takes a generation number. Only the latest generation may write
results or clear the loading flag, so a slow early response can never
overwrite the results of a later search.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

from facetsearch.core.exceptions import NavigationDuplicatedError
from facetsearch.core.logging import ContextualLogger
from facetsearch.core.logging import logger as default_logger
from facetsearch.core.protocols.api_client import SearchApiClient
from facetsearch.core.protocols.navigation import Location, Navigator
from facetsearch.domains.facets.protocols import FacetConfigRegistryProtocol
from facetsearch.domains.facets.registry import default_registry
from facetsearch.domains.facets.types import FacetConfig
from facetsearch.domains.filters.codec import decode, text_search_from_query_string
from facetsearch.domains.filters.merger import to_query_string
from facetsearch.domains.filters.model import create_filter, filters_from_api_response
from facetsearch.domains.filters.types import Filter
from facetsearch.search.sort import (
    DEFAULT_SORT_KEY,
    NO_QUERY_SORT_KEY,
    SORT_CONFIGS,
    SortConfig,
    get_sort_config,
    parse_sort,
)
from facetsearch.search.state import SearchState

SERP_LOCATION_NAME = "Serp"
TEXT_SEARCH_KEY = "display_name.search"
DEFAULT_ENTITY_TYPE = "works"

_TEXT_SEARCH_DELIMITERS = re.compile(r"[,|]+")


class SearchOrchestrator:
    """Owns the search state and runs searches against the API.

    Usage::

        orchestrator = SearchOrchestrator(api=client, navigator=navigator)
        await orchestrator.boot_from_url()
        await orchestrator.add_filters([create_filter("works", "is_oa", True)])
        print(orchestrator.state.results_count)
    """

    def __init__(
        self,
        api: SearchApiClient,
        navigator: Navigator,
        registry: Optional[FacetConfigRegistryProtocol] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            api: Search API transport.
            navigator: Navigation layer whose location mirrors the state.
            registry: Facet registry, defaults to the process-wide one.
            logger: Logger, defaults to the package logger.
        """
        self._api = api
        self._navigator = navigator
        self._registry = registry if registry is not None else default_registry()
        self._logger = (logger or default_logger).with_prefix("[SearchOrchestrator] ")
        self.state = SearchState()
        self._generation = 0
        self._zoom_generation = 0

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        """Generation of the most recently started search."""
        return self._generation

    @property
    def text_search_filter(self) -> Optional[Filter]:
        """The free-text query as a search filter, None without a query.

        Filter delimiters in the query are replaced by spaces and a leading
        ``!`` is dropped, so the encoded string stays decodable.
        """
        text = _TEXT_SEARCH_DELIMITERS.sub(" ", self.state.text_search).lstrip("!").strip()
        if not text:
            return None
        return create_filter(
            self.state.entity_type, TEXT_SEARCH_KEY, text, registry=self._registry
        )

    @property
    def input_filters_for_url(self) -> List[Filter]:
        """Active filters plus the text search filter."""
        text_filter = self.text_search_filter
        return [*self.state.input_filters, *([text_filter] if text_filter else [])]

    @property
    def input_filters_as_string(self) -> str:
        """Merged, deterministic filter string for the URL and the API."""
        return to_query_string(self.input_filters_for_url)

    @property
    def search_query(self) -> Dict[str, Any]:
        """Query params of the current search: page, filter (if any) and sort."""
        query: Dict[str, Any] = {"page": self.state.page}
        filter_str = self.input_filters_as_string
        if filter_str:
            query["filter"] = filter_str
        if self.state.sort:
            query["sort"] = f"{self.state.sort}:{self.state.sort_direction}"
        return query

    @property
    def search_api_url(self) -> str:
        """Absolute API URL of the current search."""
        return self._api.get_url(self.state.entity_type or "", self.search_query)

    @property
    def sort_object(self) -> Optional[SortConfig]:
        """Config of the current sort key."""
        return get_sort_config(self.state.sort)

    @property
    def sort_options(self) -> List[SortConfig]:
        """Sort configs whose key is a field of the current results."""
        if not self.state.results:
            return []
        first = self.state.results[0]
        return [c for c in SORT_CONFIGS if c.key in first]

    @property
    def search_facet_configs(self) -> List[FacetConfig]:
        """Facets offered for the current entity type, search facets excluded."""
        return [
            c for c in self._registry.list_for_entity_type(self.state.entity_type) if not c.is_search
        ]

    # ------------------------------------------------------------------
    # State changes followed by a search
    # ------------------------------------------------------------------

    def reset_search(self) -> None:
        """Restore every field to its default and invalidate in-flight searches."""
        self.state = SearchState()
        self._generation += 1
        self._zoom_generation += 1

    async def boot_from_url(self) -> None:
        """Load the state from the navigator's current location, then search."""
        location = self._navigator.current_location()
        entity_type = location.entity_type or DEFAULT_ENTITY_TYPE
        filter_str = location.query.get("filter")

        self.state.entity_type = entity_type
        self.state.page = location.query.get("page")
        sort_key, direction = parse_sort(location.query.get("sort"))
        self.state.sort = sort_key
        if direction:
            self.state.sort_direction = direction

        # Other *.search keys stay as ordinary input filters
        self.state.input_filters = []
        for f in decode(filter_str, entity_type, registry=self._registry):
            if f.key != TEXT_SEARCH_KEY:
                self.state.add_input_filter(f)
        self.state.text_search = text_search_from_query_string(filter_str, TEXT_SEARCH_KEY)

        self._logger.debug(f"Booted from {location.to_url()}")
        await self.do_search()

    async def do_text_search(self, entity_type: str, text: str) -> None:
        """Start a fresh search for `text` in `entity_type`."""
        self.reset_search()
        self.state.entity_type = entity_type
        self.state.text_search = text
        await self.do_search()

    async def set_sort(self, sort: str) -> None:
        """Change the sort key (``key`` or ``key:direction``) and go to page 1.

        The direction is ignored when the key is not recognized.
        """
        key, direction = parse_sort(sort)
        self.state.sort = sort
        if direction and self.state.sort == key:
            self.state.sort_direction = direction
        self.state.page = 1
        await self.do_search()

    async def set_page(self, page: Any) -> None:
        """Go to `page`; invalid values mean page 1."""
        self.state.page = page
        await self.do_search()

    async def add_filters(self, filters: Iterable[Filter]) -> None:
        """Activate filters (duplicates by as_str are ignored) and go to page 1."""
        for f in filters:
            self.state.add_input_filter(f)
        self.state.page = 1
        await self.do_search()

    async def remove_filters(self, filters: Iterable[Filter]) -> None:
        """Deactivate filters matching by as_str and go to page 1."""
        for f in filters:
            self.state.remove_input_filter(f)
        self.state.page = 1
        await self.do_search()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def do_search(self) -> None:
        """Run the search described by the current state.

        Pushes the location, fetches results, then fetches facet counts when
        any filter (or text search) is active. Errors from the navigator or
        the API propagate unchanged; the loading flag is cleared either way.

        Raises:
            ValueError: If no entity type is set.
        """
        state = self.state
        if not state.entity_type:
            raise ValueError("entity_type must be set before searching")

        self._generation += 1
        generation = self._generation
        state.is_loading = True

        # Relevance sort needs a text query
        if self.text_search_filter is None and state.sort == DEFAULT_SORT_KEY:
            state.sort = NO_QUERY_SORT_KEY

        entity_type = state.entity_type
        query = self.search_query
        filter_str = self.input_filters_as_string
        search_logger = self._logger.with_context(generation=generation, entity_type=entity_type)
        search_logger.debug(f"Searching {query}")

        try:
            self._push_search_url()

            resp = await self._api.get(entity_type, query)
            if not self._is_current(generation, state):
                search_logger.debug("Discarding results of superseded search")
                return
            meta = resp.get("meta") or {}
            state.results = resp.get("results") or []
            state.response_time = meta.get("db_response_time_ms")
            state.results_count = meta.get("count")

            if not filter_str:
                state.results_filters = []
                return

            filters_resp = await self._api.get(f"{entity_type}/filters/{filter_str}")
            if not self._is_current(generation, state):
                search_logger.debug("Discarding facet counts of superseded search")
                return
            state.results_filters = filters_from_api_response(
                entity_type,
                filters_resp.get("filters") or [],
                state.results_count,
                registry=self._registry,
            )
        finally:
            if self._is_current(generation, state):
                state.is_loading = False

    def _is_current(self, generation: int, state: SearchState) -> bool:
        return generation == self._generation and state is self.state

    def _push_search_url(self) -> None:
        """Push the current search to the navigator; duplicates are ignored."""
        location = Location(
            name=SERP_LOCATION_NAME,
            entity_type=self.state.entity_type,
            query={k: str(v) for k, v in self.search_query.items()},
        )
        try:
            self._navigator.push(location)
        except NavigationDuplicatedError:
            self._logger.debug(f"Already at {location.to_url()}")

    # ------------------------------------------------------------------
    # Entity zoom
    # ------------------------------------------------------------------

    async def set_entity_zoom(self, entity_id: str) -> None:
        """Open the detail overlay for an entity and load its data.

        Raises:
            UnknownEntityIdError: If the id has no registered type prefix.
        """
        zoom_type = self._registry.entity_type_from_id(entity_id)
        self._zoom_generation += 1
        generation = self._zoom_generation

        self.state.entity_zoom_is_open = True
        self.state.entity_zoom_type = zoom_type
        self.state.entity_zoom_data = None

        bare_id = entity_id.strip().rsplit("/", 1)[-1]
        data = await self._api.get(f"{zoom_type}/{bare_id}")
        if generation != self._zoom_generation:
            self._logger.debug(f"Discarding zoom data for superseded {bare_id}")
            return
        self.state.entity_zoom_data = data

    def close_entity_zoom(self) -> None:
        """Close the detail overlay.

        Without a search entity type, the zoomed entity's type becomes the
        search entity type.
        """
        if not self.state.entity_type:
            self.state.entity_type = self.state.entity_zoom_type
        self._push_search_url()
        self._zoom_generation += 1
        self.state.entity_zoom_is_open = False
        self.state.entity_zoom_type = None
        self.state.entity_zoom_data = None
