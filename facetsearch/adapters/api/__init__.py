"""Search API adapters."""

from facetsearch.adapters.api.fake import FakeSearchApiClient
from facetsearch.adapters.api.openalex import OpenAlexApiClient

__all__ = ["OpenAlexApiClient", "FakeSearchApiClient"]
