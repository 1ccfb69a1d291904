"""
Registration module - Principal registration by kind

Provides:
- RegistrationHandler: base class (one per PrincipalKind)
- UserRegistrationHandler / ClientRegistrationHandler
- RegistrationResolver: kind -> handler dispatch
"""

from .handlers import (
    RegistrationHandler,
    UserRegistrationHandler,
    ClientRegistrationHandler,
    RegistrationError,
    InvalidRegistrationRequestError,
)
from .resolver import (
    RegistrationResolver,
    UnsupportedPrincipalKindError,
    DuplicateRegistrationHandlerError,
    MissingRegistrationHandlerError,
)

__all__ = [
    "RegistrationHandler",
    "UserRegistrationHandler",
    "ClientRegistrationHandler",
    "RegistrationError",
    "InvalidRegistrationRequestError",
    "RegistrationResolver",
    "UnsupportedPrincipalKindError",
    "DuplicateRegistrationHandlerError",
    "MissingRegistrationHandlerError",
]
