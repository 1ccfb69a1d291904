"""
Nexus Sentinel

Issues, refreshes and validates bearer tokens for human users and
machine clients, and registers new principals of either kind.

CHANGELOG:
[2026-10-11 v0.1.0] Initial release
  - HS256 access/refresh tokens with kind-specific claims
  - bcrypt credential verification
  - Kind-dispatched registration
  - Append-only token ledger
  - aiohttp HTTP API

ARCHITECTURE:
- Layer 1 : Transport (HTTP API, error translation)
- Layer 2 : Services (AuthenticationService, RegistrationResolver)
- Layer 3 : Token lifecycle (SigningKey, TokenCodec, CredentialVerifier)
- Layer 4 : Persistence (PrincipalStore, TokenLedger)

SECURITY NOTES:
- Signing secret validated at startup, fatal if malformed
- Secrets stored as bcrypt hashes, tokens stored as SHA-256 digests
- TLS terminated in front of the service
"""

__version__ = "0.1.0"
__author__ = "Nexus Sentinel Team"

from .core.config import AuthConfig
from .core.sentinel import NexusSentinel
from .model import PrincipalKind, TokenKind, TokenPair
from .security.authentication import AuthenticationService, TokenCodec, SigningKey
from .registration import RegistrationResolver

__all__ = [
    "AuthConfig",
    "NexusSentinel",
    "PrincipalKind",
    "TokenKind",
    "TokenPair",
    "AuthenticationService",
    "TokenCodec",
    "SigningKey",
    "RegistrationResolver",
]
