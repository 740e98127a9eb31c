"""
Signals Server HTTP Client Integration

Posts batched signal queries to the signals server and returns the decoded
JSON list. Every failure surfaces as TransportError.
"""
from typing import Any, Dict, List, Optional

import httpx

from ivis_data.config import settings
from ivis_data.core.exceptions import ResponseFormatError, TransportError
from ivis_data.logger import logger


class SignalsClient:
    """Async client for the batched signals query endpoint.

    Owns its httpx.AsyncClient unless one is injected (tests pass a client
    built on httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ) -> None:
        self.base_url = (base_url or settings.DATA_ACCESS.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.DATA_ACCESS.request_timeout_seconds

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.timeout)

    def url_for(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def post(self, endpoint: str, body: List[Dict[str, Any]]) -> List[Any]:
        """POST a JSON body and return the decoded JSON response.

        Raises:
            TransportError: On connection errors, timeouts and non-2xx responses
            ResponseFormatError: If the response body is not valid JSON
        """
        url = self.url_for(endpoint)
        logger.debug(f"POST {url} ({len(body)} queries)")

        try:
            response = await self._client.post(url, json=body)
        except httpx.HTTPError as exc:
            logger.error(f"Error connecting to signals server: {exc!r}")
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            logger.error(
                f"Signals query failed: status={response.status_code} body={response.text[:500]}"
            )
            raise TransportError(
                f"Signals query failed: {response.status_code} {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ResponseFormatError(f"Invalid JSON from {url}: {exc}") from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "SignalsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
