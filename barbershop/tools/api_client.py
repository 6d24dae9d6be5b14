"""
HTTP client for the internal booking backend.

Resolves paths against the configured base URL, attaches the session's
bearer token, and turns every failure into an ``ApiError`` carrying a
message. There is no retry or backoff; callers decide what a failure means.
"""

import logging
from typing import Any, Optional

import httpx

from barbershop.config import settings
from barbershop.schemas.session_schema import SessionData
from barbershop.tools.errors import ApiError

logger = logging.getLogger(__name__)


def _error_message(payload: Any, status_code: int) -> str:
    """Pick the most useful message out of an error body."""
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Request failed with status {status_code}"


class ApiClient:
    """Thin JSON wrapper over ``httpx.AsyncClient``.

    Usage:
        async with ApiClient(session=SessionData(token="...")) as api:
            body = await api.get("/team-members")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[SessionData] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api.base_url).rstrip("/")
        self.session = session or SessionData()
        self._client = httpx.AsyncClient(transport=transport)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        """Resolve a backend path; absolute URLs pass through unchanged."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises ApiError on transport failures, non-2xx responses, and
        bodies that are not JSON.
        """
        url = self.url_for(path)
        try:
            response = await self._client.request(
                method, url, json=json, params=params, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise ApiError(str(exc) or exc.__class__.__name__) from exc

        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = None
            if response.is_success:
                raise ApiError(
                    f"Invalid JSON in response from {path}",
                    status_code=response.status_code,
                ) from None

        if not response.is_success:
            message = _error_message(payload, response.status_code)
            logger.warning(
                "%s %s returned %d: %s", method, url, response.status_code, message
            )
            raise ApiError(message, status_code=response.status_code, payload=payload)

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return payload

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)
