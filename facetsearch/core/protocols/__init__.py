"""Core protocols for the collaborators the search core depends on."""

from facetsearch.core.protocols.api_client import SearchApiClient
from facetsearch.core.protocols.navigation import Location, Navigator

__all__ = [
    "Location",
    "Navigator",
    "SearchApiClient",
]
