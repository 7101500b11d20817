"""Fake search API client for testing."""

import asyncio
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple, Union
from urllib.parse import urlencode

Reply = Union[Dict[str, Any], BaseException]


class FakeSearchApiClient:
    """Test implementation of SearchApiClient.

    Replies are looked up per path: first one-shot replies queued with
    enqueue(), then the persistent reply from seed(), then the default from
    seed_default(). A queued reply may be held back by an asyncio.Event so
    tests can control the order in which concurrent requests resolve.

    Usage:
        fake = FakeSearchApiClient()
        fake.seed("works", {"results": [], "meta": {"count": 0, "db_response_time_ms": 1}})

        body = await fake.get("works", {"page": 1})
        assert fake.calls == [("works", {"page": 1})]
    """

    def __init__(self) -> None:
        """Initialize with no replies."""
        self._queued: Dict[str, Deque[Tuple[Reply, Optional[asyncio.Event]]]] = {}
        self._seeded: Dict[str, Reply] = {}
        self._default: Optional[Reply] = None
        self.calls: List[Tuple[str, Optional[Dict[str, Any]]]] = []

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Record the call and return (or raise) the matching reply."""
        self.calls.append((path, params))

        gate: Optional[asyncio.Event] = None
        queue = self._queued.get(path)
        if queue:
            reply, gate = queue.popleft()
        elif path in self._seeded:
            reply = self._seeded[path]
        elif self._default is not None:
            reply = self._default
        else:
            raise KeyError(f"No fake reply for path {path!r}")

        if gate is not None:
            await gate.wait()
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def get_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Return a deterministic fake URL."""
        url = f"https://api.test/{path.lstrip('/')}"
        return f"{url}?{urlencode(params)}" if params else url

    # Test helpers

    def seed(self, path: str, reply: Reply) -> None:
        """Set the persistent reply for a path."""
        self._seeded[path] = reply

    def seed_default(self, reply: Reply) -> None:
        """Set the reply for any path without a more specific one."""
        self._default = reply

    def enqueue(self, path: str, reply: Reply, gate: Optional[asyncio.Event] = None) -> None:
        """Queue a one-shot reply, optionally held until `gate` is set."""
        self._queued.setdefault(path, deque()).append((reply, gate))

    def paths(self) -> List[str]:
        """Paths requested so far, in order."""
        return [path for path, _ in self.calls]

    def clear(self) -> None:
        """Reset all replies and recorded calls."""
        self._queued.clear()
        self._seeded.clear()
        self._default = None
        self.calls.clear()
