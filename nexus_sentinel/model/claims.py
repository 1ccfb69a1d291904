"""
Claims - Kind-specific custom claims carried in tokens

Module: model.claims
Date: 2026-10-05
Version: 0.1.0

CHANGELOG:
[2026-10-05 v0.1.0] Initial implementation
  - UserClaims (roles, department, region, email)
  - ClientClaims (roles, scopes, grant_types, team, tier)
  - Flattening to a claims bag and rebuilding from parsed claims

ARCHITECTURE:
The orchestrator works with the typed structures; only the token codec
sees the flattened Dict[str, Any]. The two schemas are never merged:
from_claims() keeps the keys of one schema and drops everything else.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

from .kinds import PrincipalKind
from .principal import Client, User

# Claims owned by the token codec. Custom claims never override them.
RESERVED_CLAIMS = frozenset({"exp", "iat", "jti", "type", "subject_type", "sub", "iss"})


@dataclass(frozen=True)
class UserClaims:
    """Custom claims of a user token"""
    roles: List[str] = field(default_factory=list)
    department: Optional[str] = None
    region: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def for_user(cls, user: User) -> "UserClaims":
        return cls(
            roles=list(user.roles),
            department=user.department,
            region=user.region,
            email=user.email,
        )

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "UserClaims":
        """Rebuild from a parsed claim set, ignoring foreign keys"""
        return cls(
            roles=list(claims.get("roles") or []),
            department=claims.get("department"),
            region=claims.get("region"),
            email=claims.get("email"),
        )

    def to_claims(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClientClaims:
    """Custom claims of a client token"""
    roles: List[str] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    grant_types: List[str] = field(default_factory=list)
    team: Optional[str] = None
    tier: Optional[str] = None

    @classmethod
    def for_client(cls, client: Client) -> "ClientClaims":
        return cls(
            roles=list(client.roles),
            scopes=list(client.scopes),
            grant_types=list(client.grant_types),
            team=client.team,
            tier=client.service_tier,
        )

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "ClientClaims":
        """Rebuild from a parsed claim set, ignoring foreign keys"""
        return cls(
            roles=list(claims.get("roles") or []),
            scopes=list(claims.get("scopes") or []),
            grant_types=list(claims.get("grant_types") or []),
            team=claims.get("team"),
            tier=claims.get("tier"),
        )

    def to_claims(self) -> Dict[str, Any]:
        return asdict(self)


PrincipalClaims = Union[UserClaims, ClientClaims]

_CLAIMS_BY_KIND = {
    PrincipalKind.USER: UserClaims,
    PrincipalKind.CLIENT: ClientClaims,
}


def claims_for_kind(kind: PrincipalKind, claims: Dict[str, Any]) -> PrincipalClaims:
    """Rebuild the typed claims of `kind` from a parsed claim set"""
    return _CLAIMS_BY_KIND[kind].from_claims(claims)


def claim_names(kind: PrincipalKind) -> List[str]:
    """Custom claim names allowed for `kind`"""
    return [f.name for f in fields(_CLAIMS_BY_KIND[kind])]
