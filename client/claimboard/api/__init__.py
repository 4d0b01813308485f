# API module
from .client import (
    LedgerClient,
    LedgerClientError,
    LedgerResponseError,
    LedgerTransportError,
)

__all__ = [
    "LedgerClient",
    "LedgerClientError",
    "LedgerResponseError",
    "LedgerTransportError",
]
