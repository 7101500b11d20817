"""HTTP client for the OpenAlex-style search API.

Satisfies the :class:`~facetsearch.core.protocols.api_client.SearchApiClient`
protocol. Transient failures (429, 502-504, timeouts, connection errors) are
retried with tenacity; everything else surfaces as SearchApiError.
"""

import time
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote, urlencode

import httpx
from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt

from facetsearch.adapters.api.retry import (
    log_retry_attempt,
    retry_if_transient,
    wait_rate_limit_with_backoff,
)
from facetsearch.core.config import settings
from facetsearch.core.exceptions import SearchApiError
from facetsearch.core.logging import logger

# Characters of the filter grammar that may stay literal in a path segment.
# Everything else, including "?", "#" and "%", is percent-encoded.
PATH_SAFE_CHARS = "/:,|!"


class OpenAlexApiClient:
    """Async search API client.

    Usage::

        async with OpenAlexApiClient() as api:
            body = await api.get("works", {"filter": "is_oa:true", "page": 1})
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        mailto: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        wait: Optional[Callable[[RetryCallState], float]] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL. Defaults to settings.API_BASE_URL.
            mailto: Contact email for the polite pool. Defaults to settings.API_MAILTO.
            timeout: Per-request timeout in seconds. Defaults to settings.API_TIMEOUT_SECONDS.
            max_attempts: Attempts per request. Defaults to settings.API_MAX_RETRIES.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
            wait: Optional tenacity wait strategy overriding the default backoff.
        """
        self._base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._mailto = mailto if mailto is not None else settings.API_MAILTO
        self._max_attempts = max_attempts or settings.API_MAX_RETRIES
        self._wait = wait or wait_rate_limit_with_backoff
        self._logger = logger.with_prefix("[SearchApi] ").with_context(base_url=self._base_url)
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout or settings.API_TIMEOUT_SECONDS),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "OpenAlexApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    def _params(self, params: Optional[Dict[str, Any]]) -> Dict[str, str]:
        merged = {k: str(v) for k, v in (params or {}).items() if v is not None}
        if self._mailto:
            merged.setdefault("mailto", self._mailto)
        return merged

    def get_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Return the absolute URL for `path` with `params` encoded."""
        url = f"{self._base_url}/{_quote_path(path)}"
        query = self._params(params)
        return f"{url}?{urlencode(query)}" if query else url

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET `path` and return the decoded JSON object.

        Raises:
            SearchApiError: On non-retryable HTTP errors, exhausted retries,
                or a body that is not a JSON object.
        """
        path = path.lstrip("/")
        query = self._params(params)
        request_path = _quote_path(path)
        start = time.monotonic()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                retry=retry_if_transient,
                wait=self._wait,
                before_sleep=log_retry_attempt(self._logger, self._max_attempts),
                reraise=True,
            ):
                with attempt:
                    response = await self._client.get(request_path, params=query)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SearchApiError(path, e.response.status_code, _error_message(e.response)) from e
        except httpx.HTTPError as e:
            raise SearchApiError(path, None, str(e) or type(e).__name__) from e

        duration_ms = (time.monotonic() - start) * 1000
        self._logger.debug(f"GET {path} -> {response.status_code} in {duration_ms:.0f}ms")

        try:
            body = response.json()
        except ValueError as e:
            raise SearchApiError(path, response.status_code, "Response body is not JSON") from e
        if not isinstance(body, dict):
            raise SearchApiError(path, response.status_code, "Response body is not a JSON object")
        return body


def _quote_path(path: str) -> str:
    """Percent-encode a relative API path, keeping filter delimiters literal."""
    return quote(path.lstrip("/"), safe=PATH_SAFE_CHARS)

def _error_message(response: httpx.Response) -> str:
    """Best-effort error text from an API error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or data)
    return str(data)
