"""Protocol definitions for transports and the responses they return."""

from typing import Mapping, Protocol, runtime_checkable

from bifrost.models import TransportRequest


@runtime_checkable
class Response(Protocol):
    """Protocol for HTTP response objects (requests.Response or httpx.Response)."""

    status_code: int
    headers: Mapping[str, str]
    content: bytes


@runtime_checkable
class Transport(Protocol):
    """Blocking transport: performs the network call for a resolved request."""

    def send(self, request: TransportRequest) -> Response:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


@runtime_checkable
class AsyncTransport(Protocol):
    """Awaitable transport: performs the network call for a resolved request."""

    async def send(self, request: TransportRequest) -> Response:
        raise NotImplementedError

    async def aclose(self) -> None:
        raise NotImplementedError
