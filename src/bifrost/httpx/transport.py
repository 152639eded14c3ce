"""Awaitable transport backed by an httpx AsyncClient."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from bifrost import DEFAULT_TIMEOUT
from bifrost._user_agent import default_user_agent
from bifrost.models import TransportRequest

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Send resolved requests through an httpx AsyncClient.

    Example:
        async with HttpxTransport() as transport:
            response = await transport.send(endpoint.request)
    """

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        client_name: Optional[str] = None,
        **kwargs,
    ):
        """Initialize the transport.

        Args:
            client: Client to send through. A new one is created (and owned) when omitted.
            timeout: Timeout in seconds for the whole request, None to disable
            client_name: Name added to User-Agent
            **kwargs: Additional arguments passed to the httpx client (e.g. verify, transport).
        """
        self._owns_client = client is None
        if client is None:
            headers = httpx.Headers(kwargs.pop("headers", None))
            user_agent = default_user_agent(httpx, client_name)
            headers.setdefault(user_agent.key.raw_value, user_agent.value)
            client = httpx.AsyncClient(headers=headers, timeout=timeout, **kwargs)
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(self, request: TransportRequest) -> httpx.Response:
        logger.debug(f"Sending {request.method} {request.url}")
        resp = await self._client.request(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.body,
        )
        logger.debug(f"Got status={resp.status_code} for {request.method} {request.url}")
        return resp

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
