"""Filter domain: filter records, codec and merger."""

from facetsearch.domains.filters.codec import decode, encode, text_search_from_query_string
from facetsearch.domains.filters.formatting import display_year_range
from facetsearch.domains.filters.merger import merge, merge_facet_filters, to_query_string
from facetsearch.domains.filters.model import (
    create_display_filter,
    create_filter,
    create_filter_from_identifier,
    filters_from_api_response,
    sorted_filters,
)
from facetsearch.domains.filters.types import Filter

__all__ = [
    "Filter",
    "create_display_filter",
    "create_filter",
    "create_filter_from_identifier",
    "decode",
    "display_year_range",
    "encode",
    "filters_from_api_response",
    "merge",
    "merge_facet_filters",
    "sorted_filters",
    "text_search_from_query_string",
    "to_query_string",
]
