"""
Authentication module - Token lifecycle and credential verification

Provides:
- SigningKey: HMAC key built once from the base64 secret
- TokenCodec: HS256 token issuance and parsing
- CredentialVerifier: bcrypt secret hashing
- AuthenticationService: authenticate / refresh for users and clients
"""

from .signing_key import SigningKey, SigningConfigurationError
from .token_codec import TokenCodec, InvalidTokenError, utc_now
from .credential_verifier import CredentialVerifier
from .authentication_service import (
    AuthenticationService,
    AuthenticationError,
    PrincipalNotFoundError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UnknownPrincipalKindError,
)

__all__ = [
    "SigningKey",
    "SigningConfigurationError",
    "TokenCodec",
    "InvalidTokenError",
    "utc_now",
    "CredentialVerifier",
    "AuthenticationService",
    "AuthenticationError",
    "PrincipalNotFoundError",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "UnknownPrincipalKindError",
]
