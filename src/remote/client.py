"""
HTTP client for the hosted store database (PostgREST / Supabase REST API).

Two kinds of calls are made: stored procedures via ``POST /rest/v1/rpc/<fn>``
and table reads via ``GET /rest/v1/<table>`` with PostgREST query parameters.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from utils.config import Settings
from utils.errors import ServiceUnavailable
from utils.logger import get_logger

_logger = get_logger(__name__)


class RemoteError(Exception):
    """Transport or HTTP level failure reported by the store service."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return f"[{self.status}] {self.message}"


def _error_message(status: int, body: Any, text: str) -> str:
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "hint", "details"):
            if body.get(key):
                return str(body[key])
    return text.strip() or f"HTTP {status}"


class RemoteClient:
    """
    Thin async wrapper around one aiohttp session.

    The session is opened lazily and must be closed with ``close()`` when the
    application shuts down.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise ServiceUnavailable()

    @property
    def rest_url(self) -> str:
        return f"{self.settings.supabase_url}/rest/v1"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            key = self.settings.supabase_key
            self._session = aiohttp.ClientSession(
                headers={
                    "apikey": key,
                    "Authorization": f"Bearer {key}",
                    "Accept": "application/json",
                }
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> Any:
        self.ensure_configured()
        session = await self._get_session()
        try:
            async with session.request(method, url, params=params, json=json) as resp:
                text = await resp.text()
                try:
                    body = await resp.json(content_type=None) if text else None
                except ValueError:
                    body = None
                if resp.status >= 400:
                    message = _error_message(resp.status, body, text)
                    _logger.debug(f"{method} {url} -> {resp.status}: {message}")
                    raise RemoteError(resp.status, message)
                return body
        except aiohttp.ClientError as e:
            raise RemoteError(0, f"Network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise RemoteError(0, "Request timed out") from e

    async def rpc(self, fn: str, params: Dict[str, Any]) -> Any:
        """Invoke a stored procedure and return its decoded JSON result."""
        return await self._request("POST", f"{self.rest_url}/rpc/{fn}", json=params)

    async def select(self, table: str, params: Dict[str, str]) -> Any:
        """Read rows from a table; ``params`` are PostgREST query parameters."""
        return await self._request("GET", f"{self.rest_url}/{table}", params=params)
