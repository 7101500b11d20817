"""Fake navigator for testing."""

from typing import List, Optional

from facetsearch.core.exceptions import NavigationDuplicatedError
from facetsearch.core.protocols.navigation import Location


class FakeNavigator:
    """Test implementation of Navigator.

    Records every push. Duplicate pushes raise NavigationDuplicatedError like
    a real router; fail_with() makes the next pushes raise a given error.

    Usage:
        fake = FakeNavigator(Location(entity_type="works", query={"page": "2"}))
        navigator_user(fake)

        assert fake.pushed[-1].query["page"] == "1"
    """

    def __init__(self, current: Optional[Location] = None) -> None:
        """Initialize with a current location."""
        self._current = current or Location()
        self.pushed: List[Location] = []
        self.duplicates = 0
        self._error: Optional[Exception] = None

    def current_location(self) -> Location:
        """Return the current location."""
        return self._current

    def push(self, location: Location) -> None:
        """Record the push, raising the configured error if any."""
        if self._error is not None:
            raise self._error
        if location == self._current:
            self.duplicates += 1
            raise NavigationDuplicatedError(location.to_url())
        self.pushed.append(location)
        self._current = location

    # Test helpers

    def fail_with(self, error: Optional[Exception]) -> None:
        """Make subsequent pushes raise `error` (None to stop failing)."""
        self._error = error

    @property
    def push_count(self) -> int:
        """Number of successful pushes."""
        return len(self.pushed)
