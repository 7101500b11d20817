"""Search API client protocol.

Read-only access to the search API. Paths are relative to the API base
URL, for example ``works``, ``works/filters/is_oa:true`` or
``works/W2741809807``.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class SearchApiClient(Protocol):
    """Protocol for the search API transport.

    Retry and backoff are the implementation's business; callers see either
    a decoded JSON body or an exception.
    """

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a path and return the decoded JSON body.

        Args:
            path: API path relative to the base URL.
            params: Query parameters.

        Returns:
            The decoded JSON object.

        Raises:
            SearchApiError: When the request fails.
        """
        ...

    def get_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Return the absolute URL the client would request for `path`."""
        ...
