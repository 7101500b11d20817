"""Search orchestration: state, sort options and the orchestrator."""

from facetsearch.search.factory import create_orchestrator
from facetsearch.search.orchestrator import SearchOrchestrator
from facetsearch.search.sort import SORT_CONFIGS, SortConfig
from facetsearch.search.state import SearchState

__all__ = [
    "SORT_CONFIGS",
    "SearchOrchestrator",
    "SearchState",
    "SortConfig",
    "create_orchestrator",
]
