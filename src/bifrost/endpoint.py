"""Declarative, immutable description of a single HTTP request."""

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from bifrost.errors import InvalidURL, UnsupportedURL
from bifrost.models import TransportRequest
from bifrost.serde import encode_json

logger = logging.getLogger(__name__)

# RFC 3986 pchar plus "/", unreserved characters are always kept by quote()
PATH_SAFE_CHARS = "/!$&'()*+,;=:@"
QUERY_SAFE_CHARS = "/?!$'()*,;:@"

SUPPORTED_SCHEMES = ("http", "https")
_UNSAFE_URL_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def _missing_(cls, value):
        # Raw method strings are matched case-insensitively, anything unknown is a GET
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return cls.GET

    @property
    def allows_body(self) -> bool:
        return self in (Method.POST, Method.PUT, Method.PATCH)


@dataclass(frozen=True)
class CustomHeader:
    """Header key outside the well-known set, sent exactly as given."""

    name: str

    @property
    def raw_value(self) -> str:
        return self.name


class HeaderType(Enum):
    """Well-known HTTP header names."""

    WWW_AUTHENTICATE = auto()
    AUTHORIZATION = auto()
    PROXY_AUTHENTICATE = auto()
    PROXY_AUTHORIZATION = auto()
    CONNECTION = auto()
    KEEP_ALIVE = auto()
    ACCEPT = auto()
    ACCEPT_ENCODING = auto()
    ACCEPT_LANGUAGE = auto()
    COOKIE = auto()
    ORIGIN = auto()
    CONTENT_LENGTH = auto()
    CONTENT_TYPE = auto()
    CONTENT_ENCODING = auto()
    CONTENT_LANGUAGE = auto()
    CONTENT_LOCATION = auto()
    FROM = auto()
    HOST = auto()
    REFERER = auto()
    REFERRER_POLICY = auto()
    USER_AGENT = auto()

    @property
    def raw_value(self) -> str:
        """Wire key, e.g. ``USER_AGENT`` -> ``User-Agent``."""
        if self is HeaderType.WWW_AUTHENTICATE:
            return "WWW-Authenticate"
        return "-".join(word.capitalize() for word in self.name.split("_"))

    @staticmethod
    def custom(name: str) -> CustomHeader:
        return CustomHeader(name)


HeaderKey = Union[HeaderType, CustomHeader]


def _coerce_key(key: Union[HeaderKey, str]) -> HeaderKey:
    if isinstance(key, (HeaderType, CustomHeader)):
        return key
    if isinstance(key, str):
        return CustomHeader(key)
    raise TypeError(f"Header key must be a HeaderType, CustomHeader or str, got {type(key).__name__}")


@dataclass(frozen=True)
class Header:
    key: HeaderKey
    value: str

    def __post_init__(self):
        object.__setattr__(self, "key", _coerce_key(self.key))


@dataclass(frozen=True)
class QueryParam:
    name: str
    value: Optional[str] = None

    def encode(self) -> str:
        name = quote(self.name, safe=QUERY_SAFE_CHARS)
        if self.value is None:
            return name
        return f"{name}={quote(self.value, safe=QUERY_SAFE_CHARS)}"


@dataclass(frozen=True)
class Endpoint:
    """Immutable description of one HTTP request.

    Every ``with_*``/``without_*`` method returns a new Endpoint, so a base
    endpoint can be shared and specialised freely:

        users = Endpoint(base_url="https://api.example.com", path="users")
        req = users.with_query_param("id", "42").with_header(HeaderType.ACCEPT, "application/json")
    """

    base_url: str
    method: Method = Method.GET
    path: Optional[str] = None
    headers: Tuple[Header, ...] = field(default_factory=tuple)
    params: Tuple[QueryParam, ...] = field(default_factory=tuple)
    body: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "method", Method(self.method))
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "params", tuple(_coerce_param(p) for p in self.params))
        if self.body is not None:
            object.__setattr__(self, "body", bytes(self.body))

    @property
    def url(self) -> str:
        """Resolve base URL, path and query parameters into an absolute URL.

        Raises:
            InvalidURL: If the base URL is not absolute or the path cannot be encoded
            UnsupportedURL: If the scheme is neither http nor https
        """
        if not isinstance(self.base_url, str) or _UNSAFE_URL_CHARS.search(self.base_url):
            raise InvalidURL(
                f"Base url contains whitespace or control characters: {self.base_url!r}", url=self.base_url
            )
        try:
            base = urlsplit(self.base_url)
            base.port  # raises ValueError for a non-numeric or out-of-range port
        except ValueError as e:
            raise InvalidURL(f"Could not parse base url {self.base_url!r}: {e}", url=self.base_url) from e
        if not base.scheme or not base.hostname:
            raise InvalidURL(f"Base url must be absolute, got {self.base_url!r}", url=self.base_url)
        if base.scheme.lower() not in SUPPORTED_SCHEMES:
            raise UnsupportedURL(f"Unsupported url scheme {base.scheme!r}", url=self.base_url)

        url = self.base_url
        if self.path is not None:
            try:
                encoded_path = quote(self.path, safe=PATH_SAFE_CHARS)
            except (TypeError, UnicodeEncodeError) as e:
                raise InvalidURL(f"Could not percent-encode path {self.path!r}", url=self.base_url) from e
            url = urljoin(url, encoded_path)

        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise InvalidURL(f"Could not resolve path {self.path!r} against {self.base_url!r}", url=url) from e
        if not parts.scheme or not parts.netloc:
            raise InvalidURL(f"Path {self.path!r} did not resolve to an absolute url", url=url)

        if self.params:
            query = "&".join(param.encode() for param in self.params)
            if parts.query:
                query = f"{parts.query}&{query}"
            parts = parts._replace(query=query)
        return urlunsplit(parts)

    @property
    def request(self) -> TransportRequest:
        """Build the transport request for this endpoint.

        The body is only attached for POST, PUT and PATCH.
        """
        req = TransportRequest(url=self.url, method=self.method.value)
        for header in self.headers:
            req.headers[header.key.raw_value] = header.value
        if self.body is not None and self.method.allows_body:
            req.body = self.body
        elif self.body is not None:
            logger.debug(f"Dropping body for {self.method.value} request to {req.url}")
        return req

    def with_body(self, body: bytes) -> "Endpoint":
        return dataclasses.replace(self, body=bytes(body))

    def with_json(self, mapping: Mapping[str, Any]) -> "Endpoint":
        """Return a copy with ``mapping`` JSON-encoded as the body.

        Raises:
            FailedToEncode: If the mapping is not representable as JSON
        """
        return dataclasses.replace(self, body=encode_json(mapping))

    def with_header(self, key: Union[Header, HeaderKey, str], value: Optional[str] = None) -> "Endpoint":
        if isinstance(key, Header):
            header = key
        else:
            if value is None:
                raise ValueError("value is required when passing a header key")
            header = Header(key, value)
        return dataclasses.replace(self, headers=self.headers + (header,))

    def without_header(self, key: Union[HeaderKey, str]) -> "Endpoint":
        """Return a copy with every header under ``key`` removed.

        Keys are compared by wire key, so ``"Content-Type"`` also drops ``HeaderType.CONTENT_TYPE``.
        """
        key = _coerce_key(key)
        return dataclasses.replace(self, headers=tuple(h for h in self.headers if h.key.raw_value != key.raw_value))

    def with_query_param(self, name: Union[QueryParam, str], value: Optional[str] = None) -> "Endpoint":
        param = name if isinstance(name, QueryParam) else QueryParam(name, value)
        return dataclasses.replace(self, params=self.params + (param,))

    def without_query_param(self, name: str) -> "Endpoint":
        """Return a copy with every query parameter called ``name`` removed."""
        return dataclasses.replace(self, params=tuple(p for p in self.params if p.name != name))


def _coerce_param(param: Union[QueryParam, Sequence[str]]) -> QueryParam:
    if isinstance(param, QueryParam):
        return param
    name, value = param
    return QueryParam(name, value)
