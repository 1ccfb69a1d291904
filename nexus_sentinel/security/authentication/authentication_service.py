"""
Authentication Service - Token issuance and refresh for users and clients

Module: security.authentication.authentication_service
Date: 2026-10-08
Version: 0.1.0

CHANGELOG:
[2026-10-08 v0.1.0] Initial implementation
  - Credential authentication for users and clients
  - Access + refresh token issuance with kind-specific claims
  - Access token refresh (no refresh token rotation)
  - Ledger recording of every issued token

ARCHITECTURE:
AuthenticationService coordinates:
  1. PrincipalStore lookup (username / client_id)
  2. CredentialVerifier check (bcrypt)
  3. Claim assembly (UserClaims / ClientClaims)
  4. TokenCodec signing
  5. TokenLedger recording

Refresh takes identity from the refresh token itself, never from the
caller. The new access token carries the claims of the token's subject
kind, rebuilt through the typed claim schema: keys outside the schema
and system claims are dropped, for users and clients alike.

SECURITY NOTES:
- Unknown principals still cost one bcrypt comparison
- Lookup misses and bad secrets raise distinct errors for internal use;
  the HTTP layer reports both the same way
- Ledger failures never block returning already-signed tokens
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Union

from ...model.claims import ClientClaims, PrincipalClaims, UserClaims, claims_for_kind
from ...model.kinds import PrincipalKind, TokenKind
from ...model.messages import TokenPair
from ...model.principal import Client, Principal, User
from ...persistence.principal_store import PrincipalStore
from ...persistence.token_ledger import IssuedToken, TokenLedger
from .credential_verifier import CredentialVerifier
from .token_codec import InvalidTokenError, TokenCodec, utc_now


class AuthenticationError(Exception):
    """Base authentication error"""
    pass


class PrincipalNotFoundError(AuthenticationError):
    """No user / client with this identifier"""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Secret mismatch or inactive principal"""
    pass


class InvalidRefreshTokenError(AuthenticationError):
    """Refresh token invalid, expired, of the wrong kind or wrong subject kind"""
    pass


class UnknownPrincipalKindError(AuthenticationError):
    """Kind is not a PrincipalKind (or its value)"""
    pass


class AuthenticationService:
    """
    Authenticates principals and issues / refreshes their tokens.

    Stateless between calls; every dependency is injected.
    """

    def __init__(
        self,
        principal_store: PrincipalStore,
        token_ledger: TokenLedger,
        token_codec: TokenCodec,
        credential_verifier: CredentialVerifier,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=30),
    ):
        self.logger = logging.getLogger("security.authentication_service")
        self.principal_store = principal_store
        self.token_ledger = token_ledger
        self.token_codec = token_codec
        self.credential_verifier = credential_verifier
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

        self._lookups: Dict[PrincipalKind, Callable[[str], Optional[Principal]]] = {
            PrincipalKind.USER: principal_store.find_user_by_username,
            PrincipalKind.CLIENT: principal_store.find_client_by_client_id,
        }

    # ========================================================================
    # Authentication
    # ========================================================================

    def authenticate(
        self, kind: Union[PrincipalKind, str], identifier: str, secret: str
    ) -> TokenPair:
        """
        Verify credentials and issue an access/refresh token pair

        Args:
            kind: Principal kind the credentials belong to
            identifier: username or client_id
            secret: Plaintext password or client secret

        Returns:
            TokenPair

        Raises:
            PrincipalNotFoundError: No principal with this identifier
            InvalidCredentialsError: Wrong secret or inactive user
            UnknownPrincipalKindError: kind is not a PrincipalKind
        """
        kind = self._principal_kind(kind)
        principal = self._lookups[kind](identifier)
        if principal is None:
            self.credential_verifier.burn(secret)
            self.logger.warning(f"Authentication failed: unknown {kind.value} {identifier}")
            raise PrincipalNotFoundError(f"{kind.value.title()} not found")

        if not self.credential_verifier.matches(secret, self._secret_hash(principal)):
            self.logger.warning(f"Authentication failed: bad secret for {kind.value} {identifier}")
            raise InvalidCredentialsError("Invalid credentials")

        if isinstance(principal, User) and not principal.active:
            self.logger.warning(f"Authentication failed: user {identifier} is inactive")
            raise InvalidCredentialsError("Invalid credentials")

        claims = self._claims_for(principal)
        issued_at = utc_now()
        subject = principal.identifier

        access_token = self.token_codec.issue(
            subject, TokenKind.BEARER_JWT, claims.to_claims(), kind,
            self.access_ttl, issued_at=issued_at,
        )
        refresh_token = self.token_codec.issue(
            subject, TokenKind.REFRESH_TOKEN, claims.to_claims(), kind,
            self.refresh_ttl, issued_at=issued_at,
        )

        self._record(access_token, TokenKind.BEARER_JWT, subject, kind, issued_at, self.access_ttl)
        self._record(refresh_token, TokenKind.REFRESH_TOKEN, subject, kind, issued_at, self.refresh_ttl)

        self.logger.info(f"Tokens issued for {kind.value} {subject}")

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            subject=subject,
            scopes=self._scopes(claims),
            token_type=TokenKind.BEARER_JWT,
            expires_at=issued_at + self.access_ttl,
            issuer=self.token_codec.issuer,
        )

    def authenticate_user(self, username: str, password: str) -> TokenPair:
        return self.authenticate(PrincipalKind.USER, username, password)

    def authenticate_client(self, client_id: str, client_secret: str) -> TokenPair:
        return self.authenticate(PrincipalKind.CLIENT, client_id, client_secret)

    # ========================================================================
    # Refresh
    # ========================================================================

    def refresh(self, kind: Union[PrincipalKind, str], refresh_token: str) -> TokenPair:
        """
        Issue a new access token from a refresh token

        The refresh token itself is returned unchanged.

        Args:
            kind: Principal kind expected by the caller
            refresh_token: Refresh token from a previous authentication

        Returns:
            TokenPair with the new access token

        Raises:
            InvalidRefreshTokenError: Token invalid, expired, not a refresh
                token, or issued to another principal kind
            UnknownPrincipalKindError: kind is not a PrincipalKind
        """
        kind = self._principal_kind(kind)
        if not self.token_codec.validate(refresh_token) or \
                not self.token_codec.is_refresh_kind(refresh_token):
            raise InvalidRefreshTokenError("Invalid or expired refresh token")

        try:
            parsed = self.token_codec.parse(refresh_token)
            subject_kind = self.token_codec.subject_kind_of(refresh_token)
        except InvalidTokenError as e:
            raise InvalidRefreshTokenError("Invalid or expired refresh token") from e

        if subject_kind is not kind:
            self.logger.warning(
                f"Refresh rejected: {subject_kind.value} token presented as {kind.value}"
            )
            raise InvalidRefreshTokenError("Invalid or expired refresh token")

        subject = parsed["sub"]
        claims = claims_for_kind(subject_kind, parsed)
        issued_at = utc_now()

        access_token = self.token_codec.issue(
            subject, TokenKind.BEARER_JWT, claims.to_claims(), subject_kind,
            self.access_ttl, issued_at=issued_at,
        )
        self._record(access_token, TokenKind.BEARER_JWT, subject, subject_kind, issued_at, self.access_ttl)

        self.logger.info(f"Access token refreshed for {subject_kind.value} {subject}")

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            subject=subject,
            scopes=self._scopes(claims),
            token_type=TokenKind.BEARER_JWT,
            expires_at=issued_at + self.access_ttl,
            issuer=self.token_codec.issuer,
        )

    def refresh_user(self, refresh_token: str) -> TokenPair:
        return self.refresh(PrincipalKind.USER, refresh_token)

    def refresh_client(self, refresh_token: str) -> TokenPair:
        return self.refresh(PrincipalKind.CLIENT, refresh_token)

    # ========================================================================
    # Helpers
    # ========================================================================

    @staticmethod
    def _principal_kind(kind: Union[PrincipalKind, str]) -> PrincipalKind:
        if isinstance(kind, PrincipalKind):
            return kind
        try:
            return PrincipalKind(kind)
        except ValueError:
            raise UnknownPrincipalKindError(f"Unsupported principal kind: {kind!r}")

    @staticmethod
    def _secret_hash(principal: Principal) -> str:
        if isinstance(principal, Client):
            return principal.secret_hash
        return principal.password_hash

    @staticmethod
    def _claims_for(principal: Principal) -> PrincipalClaims:
        if isinstance(principal, Client):
            return ClientClaims.for_client(principal)
        return UserClaims.for_user(principal)

    @staticmethod
    def _scopes(claims: PrincipalClaims) -> List[str]:
        # users expose their roles as scopes
        if isinstance(claims, ClientClaims):
            return list(claims.scopes)
        return list(claims.roles)

    def _record(
        self,
        token: str,
        kind: TokenKind,
        subject: str,
        subject_kind: PrincipalKind,
        issued_at: datetime,
        ttl: timedelta,
    ) -> None:
        """Record an issued token; failures are logged, never raised"""
        record = IssuedToken.for_token(
            token,
            kind=kind,
            subject_id=subject,
            subject_kind=subject_kind,
            issued_at=issued_at,
            expires_at=issued_at + ttl,
        )
        try:
            self.token_ledger.save(record)
        except Exception:
            self.logger.exception(
                f"Failed to record {kind.value} token for {subject_kind.value} {subject}"
            )
