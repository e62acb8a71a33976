"""
HTTP client for the areas REST service.

Endpoints:
    GET    /areas/categories      -> {"<code>": "<text>", ...}
    GET    /areas?page=&limit=    -> {"items": [...], "noItems": <total>}
    GET    /areas/{id}            -> area
    POST   /areas                 -> area
    PATCH  /areas/{id}            -> area
    DELETE /areas/{id}            -> empty

Transport failures (unreachable host, reset connection, timeout) are
reported as CONNECTIVITY; any HTTP error status or malformed body is
reported as OPERATION.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import aiohttp

from ..config import SyncConfig
from ..exceptions import (
    AuthenticationError,
    ConnectivityError,
    OperationError,
    RemoteNotFoundError,
    RemoteValidationError,
)
from ..models import Area, AreasPage, CategoryMap, categories_from_dict
from .base import AreasAPI, RemoteResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

# HTTP status -> OperationError subclass
_STATUS_ERRORS: dict[int, type[OperationError]] = {
    400: RemoteValidationError,
    401: AuthenticationError,
    403: AuthenticationError,
    404: RemoteNotFoundError,
    422: RemoteValidationError,
}


class HttpAreasAPI(AreasAPI):
    """aiohttp-based client for the areas service.

    Example:
        >>> async with HttpAreasAPI(SyncConfig(api_url="https://api.example.com")) as api:
        ...     result = await api.get_area("65f0c0ffee0000000000beef")
        ...     if result.ok:
        ...         print(result.value.name)
    """

    def __init__(
        self,
        config: SyncConfig,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Sync configuration (URL, token, timeout)
            session: Optional externally owned aiohttp session
        """
        self.config = config
        self.base_url = config.api_url
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> HttpAreasAPI:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"Accept": "application/json"}
            if self.config.api_token:
                headers["Authorization"] = f"Bearer {self.config.api_token}"
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying session if we created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(
        self,
        method: str,
        path: str,
        parse: Callable[[Any], T],
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> RemoteResult[T]:
        """Perform a request and classify its outcome."""
        url = f"{self.base_url}{path}"
        session = self._get_session()

        try:
            async with session.request(method, url, params=params, json=payload) as response:
                body = await response.read()
                status = response.status
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError, OSError) as e:
            logger.info(f"{method} {path} unreachable: {e}")
            return RemoteResult.connectivity_failure(ConnectivityError(url, e))
        except aiohttp.ClientError as e:
            logger.warning(f"{method} {path} failed: {e}")
            return RemoteResult.operation_failure(OperationError(f"{method} {path} failed: {e}"))

        if status >= 400:
            error_cls = _STATUS_ERRORS.get(status, OperationError)
            message = _error_message(body) or f"{method} {path} returned {status}"
            logger.warning(f"{method} {path} returned {status}: {message}")
            return RemoteResult.operation_failure(error_cls(message, status_code=status))

        try:
            data = json.loads(body) if body.strip() else None
            return RemoteResult.success(parse(data))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            return RemoteResult.operation_failure(
                OperationError(
                    f"Malformed response from {method} {path}",
                    status_code=status,
                    details={"cause": str(e)},
                )
            )

    async def get_categories(self) -> RemoteResult[CategoryMap]:
        return await self._request("GET", "/areas/categories", categories_from_dict)

    async def get_page(self, page: int, limit: int) -> RemoteResult[AreasPage]:
        params = {"page": page}
        if limit > 0:
            params["limit"] = limit
        return await self._request("GET", "/areas", AreasPage.from_dict, params=params)

    async def get_area(self, area_id: str) -> RemoteResult[Area]:
        return await self._request("GET", f"/areas/{area_id}", Area.from_dict)

    async def create_area(self, data: dict[str, Any]) -> RemoteResult[Area]:
        return await self._request("POST", "/areas", Area.from_dict, payload=data)

    async def patch_area(self, area_id: str, data: dict[str, Any]) -> RemoteResult[Area]:
        return await self._request("PATCH", f"/areas/{area_id}", Area.from_dict, payload=data)

    async def delete_area(self, area_id: str) -> RemoteResult[None]:
        return await self._request("DELETE", f"/areas/{area_id}", lambda _: None)


def _error_message(body: bytes) -> str | None:
    """Best-effort extraction of an error message from a JSON error body."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("message") or data.get("error") or data.get("detail")
        return str(message) if message else None
    return None
