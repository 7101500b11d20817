"""Shared exceptions module."""

from typing import Optional


class FacetSearchException(Exception):
    """Base exception for facetsearch."""

    pass


class NavigationError(FacetSearchException):
    """Exception raised when the navigator fails to push a location."""

    def __init__(self, message: Optional[str] = "Navigation failed"):
        """Create a new NavigationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class NavigationDuplicatedError(NavigationError):
    """Raised when pushing a location identical to the current one."""

    def __init__(self, location: str):
        """Create a new NavigationDuplicatedError instance.

        Args:
        ----
            location (str): The duplicated location, rendered as a URL.

        """
        self.location = location
        super().__init__(f"Avoided redundant navigation to current location: {location}")


class SearchApiError(FacetSearchException):
    """Exception raised when the search API fails."""

    def __init__(
        self,
        path: str,
        status_code: Optional[int] = None,
        message: Optional[str] = "Search API request failed",
    ):
        """Create a new SearchApiError instance.

        Args:
        ----
            path (str): The API path that was requested.
            status_code (int, optional): HTTP status code, None for transport errors.
            message (str, optional): The error message. Has default message.

        """
        self.path = path
        self.status_code = status_code
        self.message = message
        status = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"{path}{status}: {message}")


class UnknownEntityIdError(FacetSearchException):
    """Raised when an identifier carries no known entity type prefix."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Cannot determine entity type for id: {identifier!r}")


class FacetRegistryError(FacetSearchException):
    """Raised when the facet configuration table is invalid."""

    pass
