"""Error taxonomy raised by endpoints and the connector."""

from typing import Optional


class BifrostError(Exception):
    """Base class for every failure surfaced by bifrost."""


class InvalidURL(BifrostError):
    """The endpoint's URL components could not be resolved into a valid URL."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class UnsupportedURL(InvalidURL):
    """The URL is well formed but uses a scheme the transports cannot handle."""


class InvalidRequest(BifrostError):
    """A transport request could not be built from the endpoint."""


class BadResponse(BifrostError):
    """The transport returned something that is not a structured HTTP response."""


class BadResponseCode(BifrostError):
    """The response status code is outside 200..299."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Got unexpected status code {status_code}")


class NoData(BifrostError):
    """The response body was empty."""


class FailedToDecode(BifrostError):
    """The response body could not be decoded into the requested type."""


class FailedToEncode(BifrostError):
    """A request body could not be encoded as JSON."""


class UnknownError(BifrostError):
    """Wraps any other failure, e.g. a network error raised by the transport."""

    def __init__(self, original: BaseException):
        self.original = original
        super().__init__(f"{type(original).__name__}: {original}")
