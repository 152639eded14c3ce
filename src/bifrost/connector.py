"""Dispatch endpoints, validate responses and decode bodies."""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional, Type, TypeVar, Union

from bifrost import DEFAULT_ENV_CONFIG_FILE_PATH, DEFAULT_TIMEOUT
from bifrost._protocols import AsyncTransport, Response, Transport
from bifrost.endpoint import Endpoint, Method
from bifrost.env_config import Environment, get_environment, load_bifrost_env_config
from bifrost.errors import (
    BadResponse,
    BadResponseCode,
    BifrostError,
    FailedToDecode,
    InvalidRequest,
    InvalidURL,
    NoData,
    UnknownError,
)
from bifrost.httpx.transport import HttpxTransport
from bifrost.models import TransportRequest
from bifrost.requests.transport import RequestsTransport
from bifrost.serde import KeyDecodingStrategy, decode

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _resolve_request(endpoint: Endpoint) -> TransportRequest:
    try:
        return endpoint.request
    except (InvalidURL, TypeError, ValueError) as e:
        raise InvalidRequest(f"Could not build request: {e}") from e


def _check_response(resp: Any) -> bytes:
    """Validate status and body of a transport response and return the body.

    An empty body is rejected even for success codes such as 204.
    """
    status_code = getattr(resp, "status_code", None)
    if not isinstance(status_code, int) or isinstance(status_code, bool):
        raise BadResponse(f"Expected an HTTP response, got {type(resp).__name__}")
    if not 200 <= status_code <= 299:
        raise BadResponseCode(status_code)
    content = getattr(resp, "content", None)
    if not isinstance(content, (bytes, bytearray)):
        raise BadResponse(f"Expected a byte body, got {type(content).__name__}")
    if len(content) == 0:
        raise NoData("Response body is empty")
    return bytes(content)


class Connector:
    """Execute endpoints through a transport and turn responses into values.

    Three ways to call an endpoint:
    - ``await connect(endpoint, cls)``: decode the body into ``cls``, keys must match exactly
    - ``connect_future(endpoint, cls)``: same on a worker thread, snake_case keys are
      converted to camelCase, returns a ``concurrent.futures.Future``
    - ``await download(endpoint)``: return the raw body

    A connector built with ``from_env`` also hands out endpoints for that environment
    through ``endpoint(path)``.

    Example:
        async with Connector() as connector:
            user = await connector.connect(Endpoint("https://api.example.com", path="users/1"), User)
    """

    def __init__(
        self,
        *,
        transport: Optional[Transport] = None,
        async_transport: Optional[AsyncTransport] = None,
        max_workers: Optional[int] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        client_name: Optional[str] = "auto",
        environment: Optional[Environment] = None,
    ):
        """Initialize the connector.

        Args:
            transport: Blocking transport used by connect_future. Defaults to a RequestsTransport.
            async_transport: Awaitable transport used by connect and download. Defaults to an HttpxTransport.
            max_workers: Size of the worker pool used by connect_future
            timeout: Timeout in seconds for default transports
            client_name: Name added to User-Agent. Use "auto" for class name, None for no name.
            environment: Environment whose base url and headers seed ``endpoint()``
        """
        if client_name == "auto":
            client_name = self.__class__.__name__
        self._transport = transport or RequestsTransport(timeout=timeout, client_name=client_name)
        self._async_transport = async_transport or HttpxTransport(timeout=timeout, client_name=client_name)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="bifrost")
        self._environment = environment

    @property
    def environment(self) -> Optional[Environment]:
        return self._environment

    def endpoint(self, path: Optional[str] = None, method: Method = Method.GET) -> Endpoint:
        """Create an endpoint against the connector's environment.

        Raises:
            ValueError: If the connector was created without an environment
        """
        if self._environment is None:
            raise ValueError("Connector has no environment, use Connector.from_env() or pass environment=")
        return self._environment.endpoint(path, method)

    @classmethod
    def from_env(
        cls,
        env: Optional[str] = None,
        *,
        env_config_path: Union[str, os.PathLike] = "",
        **kwargs,
    ) -> Connector:
        """Create a connector from a named environment in the config file.

        Args:
            env: Environment name to look up in the config file. Defaults to its default_environment.
            env_config_path: Path to config file. Defaults to ~/.config/bifrost/environments.json.
            **kwargs: Additional arguments passed to the constructor (e.g. max_workers).
        """
        config_file_path = env_config_path or DEFAULT_ENV_CONFIG_FILE_PATH
        cfg = load_bifrost_env_config(config_file_path)
        resolved = get_environment(cfg, env)
        kwargs.setdefault("environment", resolved)
        if resolved.timeout is not None:
            kwargs.setdefault("timeout", resolved.timeout)
        return cls(**kwargs)

    async def connect(self, endpoint: Endpoint, cls: Optional[Type[T]] = None) -> T:
        """Call the endpoint and decode the body into ``cls``.

        Raises:
            InvalidRequest: If the endpoint does not resolve to a request
            BadResponse, BadResponseCode, NoData: If the response fails validation
            FailedToDecode: If the body does not decode into ``cls``
            UnknownError: If the transport fails
        """
        content = await self._fetch(endpoint)
        try:
            return decode(content, cls, KeyDecodingStrategy.USE_DEFAULT_KEYS)
        except Exception:
            raise FailedToDecode(f"Could not decode response into {_type_name(cls)}") from None

    async def download(self, endpoint: Endpoint) -> bytes:
        """Call the endpoint and return the raw, non-empty body."""
        return await self._fetch(endpoint)

    def connect_future(self, endpoint: Endpoint, cls: Optional[Type[T]] = None) -> Future:
        """Call the endpoint on the worker pool and decode the body into ``cls``.

        Keys in the body are converted from snake_case to camelCase before decoding.
        The returned future completes once, with the value or with a BifrostError.
        Failures that are not a BifrostError, decode errors included, are wrapped in
        UnknownError.
        """
        try:
            request = _resolve_request(endpoint)
        except InvalidRequest as e:
            return _failed_future(e)
        try:
            return self._executor.submit(self._connect_blocking, request, cls)
        except RuntimeError as e:
            # worker pool already shut down by close()
            return _failed_future(UnknownError(e))

    def _connect_blocking(self, request: TransportRequest, cls: Optional[Type[T]]) -> T:
        try:
            resp = self._transport.send(request)
            content = _check_response(resp)
            return decode(content, cls, KeyDecodingStrategy.CONVERT_FROM_SNAKE_CASE)
        except BifrostError:
            raise
        except Exception as e:
            raise UnknownError(e) from e

    async def _fetch(self, endpoint: Endpoint) -> bytes:
        request = _resolve_request(endpoint)
        try:
            resp: Response = await self._async_transport.send(request)
        except BifrostError:
            raise
        except Exception as e:
            raise UnknownError(e) from e
        return _check_response(resp)

    def close(self) -> None:
        """Shut down the worker pool and the blocking transport."""
        self._executor.shutdown(wait=True)
        self._transport.close()

    async def aclose(self) -> None:
        """Close everything, including the awaitable transport."""
        self.close()
        await self._async_transport.aclose()

    def __enter__(self) -> Connector:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> Connector:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def _type_name(cls: Any) -> str:
    return getattr(cls, "__name__", None) or str(cls)


def _failed_future(exc: BaseException) -> Future:
    future: Future = Future()
    future.set_exception(exc)
    return future
