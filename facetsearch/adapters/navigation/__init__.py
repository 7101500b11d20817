"""Navigation adapters."""

from facetsearch.adapters.navigation.fake import FakeNavigator
from facetsearch.adapters.navigation.history import HistoryNavigator, location_from_url

__all__ = ["HistoryNavigator", "FakeNavigator", "location_from_url"]
