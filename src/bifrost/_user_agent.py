"""Default User-Agent header sent by the bundled transports."""

import platform
from types import ModuleType
from typing import Optional

from bifrost import __version__
from bifrost.endpoint import Header, HeaderType

# Product tokens for libraries whose distribution name differs from the import name
_PRODUCT_TOKENS = {"httpx": "python-httpx"}


def library_token(library: ModuleType) -> str:
    """Product token for an HTTP library module, e.g. ``requests/2.31.0``."""
    name = library.__name__.split(".")[0]
    return f"{_PRODUCT_TOKENS.get(name, name)}/{getattr(library, '__version__', 'unknown')}"


def default_user_agent(library: ModuleType, client_name: Optional[str] = None) -> Header:
    """Build the User-Agent header for a transport sending through ``library``.

    The value looks like ``bifrost/1.0.0 python/3.11.0 requests/2.31.0 MyClient``.
    An endpoint's own User-Agent header replaces it per request.
    """
    tokens = [f"bifrost/{__version__}", f"python/{platform.python_version()}", library_token(library)]
    if client_name:
        tokens.append(client_name)
    return Header(HeaderType.USER_AGENT, " ".join(tokens))
