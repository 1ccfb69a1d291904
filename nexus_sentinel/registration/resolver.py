"""
Registration Resolver - PrincipalKind to handler dispatch

Module: registration.resolver
Date: 2026-10-09
Version: 0.1.0

CHANGELOG:
[2026-10-09 v0.1.0] Initial implementation
  - Kind -> handler map built once at startup
  - Fails fast on duplicate or missing handlers
  - Explicit error for unknown kinds (no default handler)
"""

import logging
from typing import Dict, Iterable, Union

from ..model.kinds import PrincipalKind
from .handlers import RegistrationError, RegistrationHandler


class UnsupportedPrincipalKindError(RegistrationError):
    """No handler for the requested kind"""
    pass


class DuplicateRegistrationHandlerError(RegistrationError):
    """Two handlers declare the same kind"""
    pass


class MissingRegistrationHandlerError(RegistrationError):
    """A PrincipalKind has no handler"""
    pass


class RegistrationResolver:
    """
    Resolves the registration handler for a principal kind.
    """

    def __init__(self, handlers: Iterable[RegistrationHandler]):
        """
        Build the kind -> handler map

        Args:
            handlers: Exactly one handler per PrincipalKind

        Raises:
            DuplicateRegistrationHandlerError: Kind declared twice
            MissingRegistrationHandlerError: Kind without handler
        """
        self.logger = logging.getLogger("registration.resolver")
        self._handlers: Dict[PrincipalKind, RegistrationHandler] = {}

        for handler in handlers:
            kind = handler.principal_kind
            if kind in self._handlers:
                raise DuplicateRegistrationHandlerError(
                    f"Duplicate registration handler for {kind.value}: "
                    f"{type(self._handlers[kind]).__name__} and {type(handler).__name__}"
                )
            self._handlers[kind] = handler

        missing = [k.value for k in PrincipalKind if k not in self._handlers]
        if missing:
            raise MissingRegistrationHandlerError(
                f"No registration handler for: {', '.join(missing)}"
            )

        self.logger.info(
            f"Registration handlers: {', '.join(k.value for k in self._handlers)}"
        )

    def resolve(self, kind: Union[PrincipalKind, str]) -> RegistrationHandler:
        """
        Get the handler for a kind

        Args:
            kind: PrincipalKind or its value ("USER", "CLIENT")

        Raises:
            UnsupportedPrincipalKindError: Unknown kind
        """
        if not isinstance(kind, PrincipalKind):
            try:
                kind = PrincipalKind(kind)
            except ValueError:
                raise UnsupportedPrincipalKindError(f"Unsupported principal kind: {kind!r}")

        return self._handlers[kind]
