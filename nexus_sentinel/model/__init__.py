"""
Model module - Principals, kinds, claims and messages

Provides:
- PrincipalKind / TokenKind: enumerations written into token claims
- User / Client: stored principals
- UserClaims / ClientClaims: typed custom claims
- Registration requests, RegisteredPrincipal, TokenPair
"""

from .kinds import PrincipalKind, TokenKind
from .principal import Principal, User, Client
from .claims import (
    RESERVED_CLAIMS,
    UserClaims,
    ClientClaims,
    PrincipalClaims,
    claims_for_kind,
    claim_names,
)
from .messages import (
    UserRegistrationRequest,
    ClientRegistrationRequest,
    RegisteredPrincipal,
    TokenPair,
)

__all__ = [
    "PrincipalKind",
    "TokenKind",
    "Principal",
    "User",
    "Client",
    "RESERVED_CLAIMS",
    "UserClaims",
    "ClientClaims",
    "PrincipalClaims",
    "claims_for_kind",
    "claim_names",
    "UserRegistrationRequest",
    "ClientRegistrationRequest",
    "RegisteredPrincipal",
    "TokenPair",
]
