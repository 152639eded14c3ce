"""Blocking transport backed by a requests Session."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from requests import Session

from bifrost import DEFAULT_TIMEOUT
from bifrost._user_agent import default_user_agent
from bifrost.models import TransportRequest

logger = logging.getLogger(__name__)


def create_session(client_name: Optional[str] = None) -> Session:
    """Create a requests session with the bifrost User-Agent set."""
    session = requests.Session()
    user_agent = default_user_agent(requests, client_name)
    session.headers[user_agent.key.raw_value] = user_agent.value
    return session


class RequestsTransport:
    """Send resolved requests through a requests Session.

    Safe to share between worker threads, one request per call.
    Headers set on the request override the session defaults.
    """

    def __init__(
        self,
        *,
        session: Optional[Session] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        client_name: Optional[str] = None,
    ):
        self._owns_session = session is None
        self._session = session if session is not None else create_session(client_name)
        self._timeout = timeout

    @property
    def session(self) -> Session:
        return self._session

    def send(self, request: TransportRequest) -> requests.Response:
        logger.debug(f"Sending {request.method} {request.url}")
        resp = self._session.request(
            request.method,
            request.url,
            headers=dict(request.headers),
            data=request.body,
            timeout=self._timeout,
        )
        logger.debug(f"Got status={resp.status_code} for {request.method} {request.url}")
        return resp

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
