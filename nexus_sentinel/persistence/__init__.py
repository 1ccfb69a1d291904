"""
Persistence module - JSON-based data storage

Provides:
- JSONStore: Base class for JSON file handling
- PrincipalStore: User and client records
- TokenLedger: Append-only record of issued tokens
"""

from .json_store import JSONStore, JSONStoreError, JSONStoreIOError, JSONStoreFormatError
from .principal_store import PrincipalStore, PrincipalStoreError, PrincipalExistsError
from .token_ledger import TokenLedger, TokenLedgerError, IssuedToken, digest_token

__all__ = [
    "JSONStore",
    "JSONStoreError",
    "JSONStoreIOError",
    "JSONStoreFormatError",
    "PrincipalStore",
    "PrincipalStoreError",
    "PrincipalExistsError",
    "TokenLedger",
    "TokenLedgerError",
    "IssuedToken",
    "digest_token",
]
