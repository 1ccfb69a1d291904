"""
Registration Handlers - Per-kind principal registration

Module: registration.handlers
Date: 2026-10-09
Version: 0.1.0

CHANGELOG:
[2026-10-09 v0.1.0] Initial implementation
  - RegistrationHandler base with declared principal kind
  - UserRegistrationHandler (active by default, store-assigned id)
  - ClientRegistrationHandler (random id, optional generated client_id)

ARCHITECTURE:
The handler set is closed: exactly one handler per PrincipalKind.
RegistrationResolver maps kinds to handlers; each handler re-checks the
request type it receives before hashing the secret and persisting.
"""

import logging
import secrets
import uuid
from abc import ABC, abstractmethod
from typing import Any, Iterable

from ..model.kinds import PrincipalKind
from ..model.messages import (
    ClientRegistrationRequest,
    RegisteredPrincipal,
    UserRegistrationRequest,
)
from ..model.principal import Client, User
from ..persistence.principal_store import PrincipalStore
from ..security.authentication.credential_verifier import CredentialVerifier


class RegistrationError(Exception):
    """Base registration error"""
    pass


class InvalidRegistrationRequestError(RegistrationError):
    """Request of the wrong type or with missing / invalid fields"""
    pass


def _require_strings(request: Any, names: Iterable[str]) -> None:
    for name in names:
        value = getattr(request, name)
        if not isinstance(value, str) or not value.strip():
            raise InvalidRegistrationRequestError(f"'{name}' is required")


def _require_string_lists(request: Any, names: Iterable[str]) -> None:
    for name in names:
        value = getattr(request, name)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise InvalidRegistrationRequestError(f"'{name}' must be a list of strings")


class RegistrationHandler(ABC):
    """Registers principals of one kind"""

    def __init__(self, principal_store: PrincipalStore, credential_verifier: CredentialVerifier):
        self.logger = logging.getLogger(f"registration.{self.__class__.__name__}")
        self.principal_store = principal_store
        self.credential_verifier = credential_verifier

    @property
    @abstractmethod
    def principal_kind(self) -> PrincipalKind:
        """Kind handled by this handler"""

    @abstractmethod
    def register(self, request: Any) -> RegisteredPrincipal:
        """
        Register a principal

        Raises:
            InvalidRegistrationRequestError: Wrong request type or fields
            PrincipalExistsError: Identifier already registered
        """

    def _hash_secret(self, secret: str) -> str:
        try:
            return self.credential_verifier.hash(secret)
        except ValueError as e:
            raise InvalidRegistrationRequestError(str(e)) from e


class UserRegistrationHandler(RegistrationHandler):
    """Registers human users"""

    @property
    def principal_kind(self) -> PrincipalKind:
        return PrincipalKind.USER

    def register(self, request: Any) -> RegisteredPrincipal:
        if not isinstance(request, UserRegistrationRequest):
            raise InvalidRegistrationRequestError("Invalid user registration request type.")
        _require_strings(request, ("username", "password"))
        _require_string_lists(request, ("roles",))

        user = User(
            username=request.username,
            password_hash=self._hash_secret(request.password),
            roles=list(request.roles),
            allowed_token_kinds=list(request.allowed_token_kinds),
            active=True,
            department=request.department,
            region=request.region,
            email=request.email,
        )
        saved = self.principal_store.save(user)

        self.logger.info(f"User registered: {saved.username} ({saved.id})")
        return RegisteredPrincipal(registered_entity=saved, entity_kind=PrincipalKind.USER)


class ClientRegistrationHandler(RegistrationHandler):
    """Registers machine clients"""

    @property
    def principal_kind(self) -> PrincipalKind:
        return PrincipalKind.CLIENT

    def register(self, request: Any) -> RegisteredPrincipal:
        if not isinstance(request, ClientRegistrationRequest):
            raise InvalidRegistrationRequestError("Invalid client registration request type.")
        _require_strings(request, ("client_secret",))
        _require_string_lists(request, ("roles", "scopes", "grant_types"))
        if request.client_id is not None:
            _require_strings(request, ("client_id",))

        client = Client(
            id=str(uuid.uuid4()),
            client_id=request.client_id or secrets.token_urlsafe(16),
            secret_hash=self._hash_secret(request.client_secret),
            roles=list(request.roles),
            allowed_token_kinds=list(request.allowed_token_kinds),
            scopes=list(request.scopes),
            grant_types=list(request.grant_types),
            team=request.team,
            service_tier=request.service_tier,
        )
        saved = self.principal_store.save(client)

        self.logger.info(f"Client registered: {saved.client_id} ({saved.id})")
        return RegisteredPrincipal(registered_entity=saved, entity_kind=PrincipalKind.CLIENT)
