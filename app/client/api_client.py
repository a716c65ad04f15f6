"""
API Client
Async JSON client for the sync API with a hard deadline on every request
"""

import asyncio
from typing import Any, Dict, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class ApiError(Exception):
    """Raised for non-2xx responses and for requests that ran past their deadline."""

    def __init__(self, reason: str, status_code: Optional[int] = None, details: Optional[str] = None):
        self.reason = reason
        self.status_code = status_code
        self.details = details

        message = f"API Error: {reason}"
        if details:
            message = f"{message} - {details}"
        super().__init__(message)


class ApiClient:
    """
    Thin wrapper around httpx.AsyncClient.

    Every request is bounded twice: httpx's per-phase timeout and an overall
    ``deadline`` enforced with asyncio.wait_for. Cancelling the awaiting task
    cancels the request.

    Usage:
        async with ApiClient("http://localhost:8000") as api:
            stats = await api.get("/stats")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        deadline: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, endpoints are appended to it
            timeout: httpx connect/read/write/pool timeout in seconds
            deadline: upper bound for one logical request in seconds
            transport: custom transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.deadline = deadline
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """
        Send one request and return the raw response, whatever its status.

        ``url`` may be an endpoint ("/stats") or an absolute URL (manifest,
        snapshot sources); absolute URLs bypass ``base_url``.

        Raises:
            ApiError: deadline exceeded
            httpx.HTTPError: transport failure
        """
        try:
            return await asyncio.wait_for(
                self._client.request(method, url, json=json, headers=headers),
                timeout=self.deadline,
            )
        except asyncio.TimeoutError as e:
            logger.warning("api_request_deadline_exceeded", method=method, url=url, deadline=self.deadline)
            raise ApiError(f"Request timed out after {self.deadline}s") from e

    async def _json(self, method: str, url: str, json: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        response = await self.request(method, url, json=json, headers=headers)

        if response.is_error:
            raise ApiError(response.reason_phrase, response.status_code, _error_details(response))

        if not response.content:
            return {}
        return response.json()

    async def get(self, endpoint: str) -> Any:
        return await self._json("GET", endpoint, headers=NO_CACHE_HEADERS)

    async def post(self, endpoint: str, data: Any) -> Any:
        return await self._json("POST", endpoint, json=data)

    async def put(self, endpoint: str, data: Any) -> Any:
        return await self._json("PUT", endpoint, json=data)

    async def delete(self, endpoint: str) -> Any:
        return await self._json("DELETE", endpoint)

    async def fetch_json(self, url: str) -> Any:
        """GET an absolute URL without caching (manifest and snapshot files)."""
        return await self._json("GET", url, headers=NO_CACHE_HEADERS)


def _error_details(response: httpx.Response) -> Optional[str]:
    """Backend error message from a JSON error body ({details} or {detail})."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        details = body.get("details") or body.get("detail")
        return str(details) if details else None
    return None
