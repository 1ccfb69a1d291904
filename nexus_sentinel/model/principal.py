"""
Principals - Users and machine clients

Module: model.principal
Date: 2026-10-05
Version: 0.1.0

CHANGELOG:
[2026-10-05 v0.1.0] Initial implementation
  - Principal base (id, roles, allowed_token_kinds)
  - User record (username, password hash, profile fields, active flag)
  - Client record (client_id, secret hash, scopes, grant types, team, tier)
  - dict conversion for JSON storage and public (hash-free) views

ARCHITECTURE:
Principals are created once by registration and never updated by the
authentication flows. The store assigns `id` when it is missing.

SECURITY NOTES:
- Secret hashes never appear in to_public_dict()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .kinds import PrincipalKind, TokenKind


def token_kinds_from(values: Optional[List[Any]]) -> List[TokenKind]:
    """Convert stored token kind names back into TokenKind values"""
    return [
        value if isinstance(value, TokenKind) else TokenKind(value)
        for value in (values or [])
    ]


class Principal(ABC):
    """
    Authenticated entity (user or client)

    Subclasses expose `id`, `roles` and `allowed_token_kinds` as fields.
    """

    id: Optional[str]
    roles: List[str]
    allowed_token_kinds: List[TokenKind]

    @property
    @abstractmethod
    def kind(self) -> PrincipalKind:
        """Principal kind"""

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Unique login identifier (username or client_id)"""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""

    def to_public_dict(self) -> Dict[str, Any]:
        """Dictionary without secret material"""
        data = self.to_dict()
        data.pop("password_hash", None)
        data.pop("secret_hash", None)
        return data


@dataclass
class User(Principal):
    """Human user"""
    username: str
    password_hash: str
    id: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    allowed_token_kinds: List[TokenKind] = field(default_factory=list)
    active: bool = True
    department: Optional[str] = None
    region: Optional[str] = None
    email: Optional[str] = None

    @property
    def kind(self) -> PrincipalKind:
        return PrincipalKind.USER

    @property
    def identifier(self) -> str:
        return self.username

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password_hash": self.password_hash,
            "roles": list(self.roles),
            "allowed_token_kinds": [k.value for k in self.allowed_token_kinds],
            "active": self.active,
            "department": self.department,
            "region": self.region,
            "email": self.email,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary (from JSON)"""
        return cls(
            id=data.get("id"),
            username=data["username"],
            password_hash=data["password_hash"],
            roles=data.get("roles") or [],
            allowed_token_kinds=token_kinds_from(data.get("allowed_token_kinds")),
            active=data.get("active", True),
            department=data.get("department"),
            region=data.get("region"),
            email=data.get("email"),
        )


@dataclass
class Client(Principal):
    """Machine client (service account)"""
    client_id: str
    secret_hash: str
    id: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    allowed_token_kinds: List[TokenKind] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    grant_types: List[str] = field(default_factory=list)
    team: Optional[str] = None
    service_tier: Optional[str] = None

    @property
    def kind(self) -> PrincipalKind:
        return PrincipalKind.CLIENT

    @property
    def identifier(self) -> str:
        return self.client_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "secret_hash": self.secret_hash,
            "roles": list(self.roles),
            "allowed_token_kinds": [k.value for k in self.allowed_token_kinds],
            "scopes": list(self.scopes),
            "grant_types": list(self.grant_types),
            "team": self.team,
            "service_tier": self.service_tier,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        """Create from dictionary (from JSON)"""
        return cls(
            id=data.get("id"),
            client_id=data["client_id"],
            secret_hash=data["secret_hash"],
            roles=data.get("roles") or [],
            allowed_token_kinds=token_kinds_from(data.get("allowed_token_kinds")),
            scopes=data.get("scopes") or [],
            grant_types=data.get("grant_types") or [],
            team=data.get("team"),
            service_tier=data.get("service_tier"),
        )
