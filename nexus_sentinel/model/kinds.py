"""
Kinds - Principal and token kind enumerations

Module: model.kinds
Date: 2026-10-05
Version: 0.1.0

CHANGELOG:
[2026-10-05 v0.1.0] Initial implementation
  - PrincipalKind (USER, CLIENT)
  - TokenKind (BEARER_JWT, REFRESH_TOKEN + reserved kinds)

NOTES:
Enum values are the names written into the "type" and "subject_type"
claims of every signed token, so they must never be renamed.
"""

from enum import Enum


class PrincipalKind(Enum):
    """Kind of authenticated entity"""
    USER = "USER"
    CLIENT = "CLIENT"


class TokenKind(Enum):
    """
    Kind of issued credential

    Only BEARER_JWT and REFRESH_TOKEN are issued by the authentication
    flows. The remaining kinds may be listed in a principal's
    allowed_token_kinds but nothing issues them yet.
    """
    BEARER_JWT = "BEARER_JWT"
    REFRESH_TOKEN = "REFRESH_TOKEN"
    OPAQUE = "OPAQUE"
    API_KEY = "API_KEY"
    SESSION = "SESSION"
    HMAC = "HMAC"
