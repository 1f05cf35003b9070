"""Client for the Arch User Repository RPC interface.

Two flavours share one request/response contract:

- `AurClient` blocks the calling thread (httpx.Client).
- `AsyncAurClient` is awaited from asyncio code (httpx.AsyncClient).

Both build identical query strings, classify status codes identically and
raise the same `AurError` subclasses.
"""

from aur_rpc.aio import AsyncAurClient
from aur_rpc.client import AurClient, BaseAurClient
from aur_rpc.errors import (
    AurError,
    BadRequestError,
    DecodeError,
    FormatError,
    InvalidRequestError,
    TransportError,
    UriError,
)
from aur_rpc.models import PackageDetail, PackageSummary, RelationKind, SearchEnvelope

__all__ = [
    "AsyncAurClient",
    "AurClient",
    "AurError",
    "BadRequestError",
    "BaseAurClient",
    "DecodeError",
    "FormatError",
    "InvalidRequestError",
    "PackageDetail",
    "PackageSummary",
    "RelationKind",
    "SearchEnvelope",
    "TransportError",
    "UriError",
]
