"""HTTP transport that normalizes every call into a ``ResponsePayload``.

TransportAdapter is the interface the model layer talks to. HttpAdapter
implements it on top of ``httpx.AsyncClient``: one request per call, JSON
bodies in and out, and a ``TransportError`` carrying the same payload shape
for any non-2xx status or network failure.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field

from resourcekit.config import AdapterSettings
from resourcekit.errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

DEFAULT_HEADERS = {"content-type": "application/json"}


class ResponsePayload(BaseModel):
    """Normalized HTTP response. ``data`` is ``None`` when the body is not JSON."""

    status: int
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None


class TransportAdapter(ABC):
    """Base interface for issuing requests against a JSON:API backend.

    Implementations return a ``ResponsePayload`` for 2xx responses and raise
    ``TransportError`` otherwise.
    """

    @abstractmethod
    async def request(
        self, method: HttpMethod, url: str, data: Any = None
    ) -> ResponsePayload:
        """Issue one request.

        Args:
            method: HTTP verb.
            url: Path relative to the adapter's host and namespace.
            data: JSON-serializable request body, if any.
        """
        ...

    async def get(self, url: str) -> ResponsePayload:
        return await self.request("GET", url)

    async def post(self, url: str, data: Any) -> ResponsePayload:
        return await self.request("POST", url, data)

    async def put(self, url: str, data: Any) -> ResponsePayload:
        return await self.request("PUT", url, data)

    async def patch(self, url: str, data: Any) -> ResponsePayload:
        return await self.request("PATCH", url, data)

    async def delete(self, url: str) -> ResponsePayload:
        return await self.request("DELETE", url)


class HttpAdapter(TransportAdapter):
    """TransportAdapter backed by httpx.

    Args:
        host: Scheme and authority, e.g. ``https://api.example.com``.
        namespace: Path prefix added before every request path, e.g. ``/v2``.
        headers: Extra headers merged over ``content-type: application/json``.
        timeout: Per-request timeout in seconds.
        client: Optional shared ``httpx.AsyncClient``. When omitted a client
            is opened and closed around each request.
        transport: Optional httpx transport for per-request clients
            (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        host: str = "",
        namespace: str = "",
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.host = host
        self.namespace = namespace
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self.timeout = timeout
        self._client = client
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: AdapterSettings, **overrides: Any) -> HttpAdapter:
        """Build an adapter from settings; keyword overrides win."""
        options: dict[str, Any] = {
            "host": settings.host,
            "namespace": settings.namespace,
            "headers": settings.headers,
            "timeout": settings.timeout,
        }
        options.update(overrides)
        return cls(**options)

    def endpoint(self, url: str) -> str:
        return f"{self.host}{self.namespace}{url}"

    async def request(
        self, method: HttpMethod, url: str, data: Any = None
    ) -> ResponsePayload:
        if not self.host:
            msg = "HttpAdapter has no host. Pass host= or set RESOURCEKIT_HOST."
            raise ConfigurationError(msg)
        endpoint = self.endpoint(url)
        logger.debug("%s %s", method, endpoint)
        try:
            if self._client is not None:
                response = await self._send(self._client, method, endpoint, data)
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    response = await self._send(client, method, endpoint, data)
        except httpx.RequestError as exc:
            logger.warning("Request failed: %s %s -> %s", method, endpoint, exc)
            payload = ResponsePayload(status=0, status_text=str(exc) or type(exc).__name__)
            raise TransportError(payload) from exc

        payload = ResponsePayload(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            data=self._parse_body(response),
        )
        logger.debug("%s %s -> %s", method, endpoint, payload.status)
        if not response.is_success:
            raise TransportError(payload)
        return payload

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: HttpMethod,
        endpoint: str,
        data: Any,
    ) -> httpx.Response:
        return await client.request(
            method,
            endpoint,
            headers=self.headers,
            json=data,
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        """Parsed JSON body, or ``None`` when the body is empty or not JSON."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(
                "Response body from %s is not JSON; data left empty", response.url
            )
            return None

    async def aclose(self) -> None:
        """Close the shared client, if one was supplied."""
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> HttpAdapter:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
