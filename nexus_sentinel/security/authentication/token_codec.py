"""
Token Codec - Signed token issuance and parsing

Module: security.authentication.token_codec
Date: 2026-10-07
Version: 0.1.0

CHANGELOG:
[2026-10-07 v0.1.0] Initial implementation
  - HS256 token issuance with custom claims
  - Signature, structure, issuer and expiry verification
  - Token kind / subject kind extraction

ARCHITECTURE:
TokenCodec provides:
  - issue(): sub, iss, iat, exp, jti, type, subject_type + custom claims
  - parse(): verified claim set or InvalidTokenError
  - validate() / is_expired() / kind_of() / is_refresh_kind()

Access and refresh tokens share this encoding and the same key; they
differ only by the "type" claim and their TTL.

SECURITY NOTES:
- HS256 only; the algorithm list is pinned on decode
- System claims are written after custom claims and always win
- parse() raises a single error type whatever the failure reason
- All times in UTC, whole seconds
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from ...model.kinds import PrincipalKind, TokenKind
from .signing_key import SigningKey

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti"]


class InvalidTokenError(Exception):
    """Token is malformed, badly signed, foreign or expired"""
    pass


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds (JWT NumericDate)"""
    return datetime.now(timezone.utc).replace(microsecond=0)


class TokenCodec:
    """
    Builds and parses HS256-signed tokens.

    The signing key is created at startup and handed in; the codec never
    reads configuration itself.
    """

    def __init__(self, signing_key: SigningKey, issuer: str):
        """
        Initialize codec

        Args:
            signing_key: Process-wide signing key
            issuer: Value of the "iss" claim
        """
        self.logger = logging.getLogger("security.token_codec")
        self._key = signing_key.material
        self.issuer = issuer

    def issue(
        self,
        subject: str,
        kind: TokenKind,
        claims: Dict[str, Any],
        subject_kind: PrincipalKind,
        ttl: timedelta,
        issued_at: Optional[datetime] = None,
    ) -> str:
        """
        Issue a signed token

        Args:
            subject: "sub" claim (username or client_id)
            kind: Token kind ("type" claim)
            claims: Custom claims bag
            subject_kind: Principal kind ("subject_type" claim)
            ttl: Lifetime, may be negative
            issued_at: Issuance time (defaults to now)

        Returns:
            Compact signed token
        """
        if not subject:
            raise ValueError("subject required")

        now = issued_at or utc_now()
        payload = dict(claims)
        payload.update({
            "jti": str(uuid.uuid4()),
            "sub": subject,
            "iss": self.issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "type": kind.value,
            "subject_type": subject_kind.value,
        })

        return jwt.encode(payload, self._key, algorithm=ALGORITHM)

    def parse(self, token: str) -> Dict[str, Any]:
        """
        Verify a token and return its claims

        Raises:
            InvalidTokenError: On bad signature, malformed structure,
                foreign issuer, missing claims or expiry
        """
        return self._decode(token, verify_exp=True)

    def validate(self, token: str) -> bool:
        """True iff parse() succeeds"""
        try:
            self.parse(token)
            return True
        except InvalidTokenError as e:
            self.logger.warning(f"Invalid token: {e}")
            return False

    def is_expired(self, token: str) -> bool:
        """
        Check expiry of a correctly signed token

        Raises:
            InvalidTokenError: If the signature or structure is invalid
        """
        claims = self._decode(token, verify_exp=False)
        return claims["exp"] <= int(datetime.now(timezone.utc).timestamp())

    def kind_of(self, token: str) -> TokenKind:
        """
        Token kind from the "type" claim

        Raises:
            InvalidTokenError: If the token is invalid or its kind unknown
        """
        claims = self.parse(token)
        try:
            return TokenKind(claims.get("type"))
        except ValueError:
            raise InvalidTokenError(f"Unknown token type: {claims.get('type')!r}")

    def subject_kind_of(self, token: str) -> PrincipalKind:
        """
        Principal kind from the "subject_type" claim

        Raises:
            InvalidTokenError: If the token is invalid or its kind unknown
        """
        return self._subject_kind(self.parse(token))

    def is_refresh_kind(self, token: str) -> bool:
        """True if the token is a valid refresh token, False otherwise"""
        try:
            return self.kind_of(token) is TokenKind.REFRESH_TOKEN
        except InvalidTokenError:
            return False

    @staticmethod
    def _subject_kind(claims: Dict[str, Any]) -> PrincipalKind:
        try:
            return PrincipalKind(claims.get("subject_type"))
        except ValueError:
            raise InvalidTokenError(
                f"Unknown subject type: {claims.get('subject_type')!r}"
            )

    def _decode(self, token: str, verify_exp: bool) -> Dict[str, Any]:
        if not token or not isinstance(token, str):
            raise InvalidTokenError("Token must be non-empty string")

        try:
            return jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                issuer=self.issuer,
                options={"require": REQUIRED_CLAIMS, "verify_exp": verify_exp},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError(f"Token expired: {e}")
        except jwt.InvalidSignatureError as e:
            raise InvalidTokenError(f"Invalid signature: {e}")
        except jwt.DecodeError as e:
            raise InvalidTokenError(f"Decode error: {e}")
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")
