"""Request value handed from an Endpoint to a transport."""

from dataclasses import dataclass, field
from typing import Optional

from requests.structures import CaseInsensitiveDict


@dataclass
class TransportRequest:
    """Fully resolved request consumed by Transport implementations.

    Header keys are case-insensitive and the last value set for a key wins.
    """

    url: str
    method: str = "GET"
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Optional[bytes] = None
