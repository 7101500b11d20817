"""In-memory history navigator.

Keeps a stack of visited locations, the way a browser history does, and
converts between Location objects and relative URLs such as
``/works?filter=is_oa:true&page=2``.
"""

from typing import List, Optional
from urllib.parse import parse_qsl, urlsplit

from facetsearch.core.exceptions import NavigationDuplicatedError
from facetsearch.core.logging import logger
from facetsearch.core.protocols.navigation import Location


def location_from_url(url: str, name: str = "Serp") -> Location:
    """Parse a relative or absolute URL into a Location.

    The first path segment is the entity type. Repeated query keys keep the
    last value.
    """
    parts = urlsplit(url)
    segments = [s for s in parts.path.split("/") if s]
    return Location(
        name=name,
        entity_type=segments[0] if segments else None,
        query=dict(parse_qsl(parts.query, keep_blank_values=False)),
    )


class HistoryNavigator:
    """Navigator backed by a list of visited locations."""

    def __init__(self, initial: Optional[Location] = None) -> None:
        """Initialize with a starting location (defaults to the root location)."""
        self._history: List[Location] = [initial or Location()]
        self._logger = logger.with_prefix("[Navigator] ")

    @classmethod
    def from_url(cls, url: str) -> "HistoryNavigator":
        """Create a navigator whose current location is parsed from `url`."""
        return cls(location_from_url(url))

    def current_location(self) -> Location:
        """Return the most recently pushed location."""
        return self._history[-1]

    def push(self, location: Location) -> None:
        """Push a location.

        Raises:
            NavigationDuplicatedError: If `location` equals the current location.
        """
        if location == self.current_location():
            raise NavigationDuplicatedError(location.to_url())
        self._history.append(location)
        self._logger.debug(f"Navigated to {location.to_url()}")

    def back(self) -> Location:
        """Pop the current location and return the one before it."""
        if len(self._history) > 1:
            self._history.pop()
        return self.current_location()

    @property
    def history(self) -> List[Location]:
        """Copy of the visited locations, oldest first."""
        return list(self._history)
