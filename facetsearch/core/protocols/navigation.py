"""Navigation protocol.

The orchestrator keeps the browser-style location in sync with the search
state. It only ever reads the current location and pushes a new one.

Usage:
    location = navigator.current_location()
    try:
        navigator.push(Location(name="Serp", entity_type="works", query={"page": "2"}))
    except NavigationDuplicatedError:
        pass
"""

from typing import Dict, Optional, Protocol, runtime_checkable
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """A navigation target: a named view, its entity type and query params."""

    model_config = ConfigDict(frozen=True)

    name: str = "Serp"
    entity_type: Optional[str] = None
    query: Dict[str, str] = Field(default_factory=dict)

    @property
    def path(self) -> str:
        """Path part of the location, e.g. ``/works``."""
        return f"/{self.entity_type}" if self.entity_type else "/"

    def to_url(self) -> str:
        """Render as a relative URL with a stable query order."""
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(sorted(self.query.items()))}"


@runtime_checkable
class Navigator(Protocol):
    """Protocol for the navigation layer (router)."""

    def current_location(self) -> Location:
        """Return the location currently displayed."""
        ...

    def push(self, location: Location) -> None:
        """Navigate to `location`.

        Raises:
            NavigationDuplicatedError: If `location` equals the current location.
            NavigationError: For any other navigation failure.
        """
        ...
