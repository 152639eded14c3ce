import logging
import os
from logging import NullHandler
from pathlib import Path

logging.getLogger(__name__).addHandler(NullHandler())

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0"

DEFAULT_TIMEOUT = 60.0

DEFAULT_ENV_CONFIG_FILE_PATH = (
    Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "bifrost" / "environments.json"
)

from bifrost.connector import Connector  # noqa: E402
from bifrost.endpoint import CustomHeader, Endpoint, Header, HeaderType, Method, QueryParam  # noqa: E402
from bifrost.errors import (  # noqa: E402
    BadResponse,
    BadResponseCode,
    BifrostError,
    FailedToDecode,
    FailedToEncode,
    InvalidRequest,
    InvalidURL,
    NoData,
    UnknownError,
    UnsupportedURL,
)
from bifrost.serde import KeyDecodingStrategy  # noqa: E402

__all__ = [
    "BadResponse",
    "BadResponseCode",
    "BifrostError",
    "Connector",
    "CustomHeader",
    "Endpoint",
    "FailedToDecode",
    "FailedToEncode",
    "Header",
    "HeaderType",
    "InvalidRequest",
    "InvalidURL",
    "KeyDecodingStrategy",
    "Method",
    "NoData",
    "QueryParam",
    "UnknownError",
    "UnsupportedURL",
]
