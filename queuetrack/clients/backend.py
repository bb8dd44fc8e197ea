from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from queuetrack.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)


class BackendClient:
    """Async HTTP client for the remote appointment record backend."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._client: Optional[httpx.AsyncClient] = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def get(
        self, path: str, params: Dict[str, Any] | None = None
    ) -> Any:
        client = self._ensure_client()
        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.exception("Record backend returned error %s", exc.response.status_code)
            raise DownstreamServiceError(
                "Record backend returned an error response",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach record backend: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach record backend", status_code=None, cause=exc
            ) from exc

    async def put(self, path: str, payload: Any) -> Any:
        client = self._ensure_client()
        try:
            logger.debug("PUT %s%s", self._base_url, path)
            response = await client.put(path, json=payload)
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.exception("Record backend returned error %s", exc.response.status_code)
            raise DownstreamServiceError(
                "Record backend returned an error response",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach record backend: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach record backend", status_code=None, cause=exc
            ) from exc
