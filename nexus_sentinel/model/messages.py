"""
Messages - Registration requests and authentication results

Module: model.messages
Date: 2026-10-06
Version: 0.1.0

CHANGELOG:
[2026-10-06 v0.1.0] Initial implementation
  - UserRegistrationRequest / ClientRegistrationRequest
  - RegisteredPrincipal (registration result)
  - TokenPair (authentication / refresh result)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .kinds import PrincipalKind, TokenKind
from .principal import Principal, token_kinds_from


@dataclass
class UserRegistrationRequest:
    """Request to register a human user"""
    username: str
    password: str
    roles: List[str] = field(default_factory=list)
    allowed_token_kinds: List[TokenKind] = field(default_factory=list)
    department: Optional[str] = None
    region: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRegistrationRequest":
        """
        Build from a decoded JSON body

        Raises:
            KeyError: If username or password is missing
            ValueError: If a token kind name is unknown
        """
        return cls(
            username=data["username"],
            password=data["password"],
            roles=data.get("roles") or [],
            allowed_token_kinds=token_kinds_from(data.get("allowed_token_kinds")),
            department=data.get("department"),
            region=data.get("region"),
            email=data.get("email"),
        )


@dataclass
class ClientRegistrationRequest:
    """Request to register a machine client (client_id is optional)"""
    client_secret: str
    client_id: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    allowed_token_kinds: List[TokenKind] = field(default_factory=list)
    scopes: List[str] = field(default_factory=list)
    grant_types: List[str] = field(default_factory=list)
    team: Optional[str] = None
    service_tier: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientRegistrationRequest":
        """
        Build from a decoded JSON body

        Raises:
            KeyError: If client_secret is missing
            ValueError: If a token kind name is unknown
        """
        return cls(
            client_secret=data["client_secret"],
            client_id=data.get("client_id"),
            roles=data.get("roles") or [],
            allowed_token_kinds=token_kinds_from(data.get("allowed_token_kinds")),
            scopes=data.get("scopes") or [],
            grant_types=data.get("grant_types") or [],
            team=data.get("team"),
            service_tier=data.get("service_tier"),
        )


@dataclass
class RegisteredPrincipal:
    """Result of a successful registration"""
    registered_entity: Principal
    entity_kind: PrincipalKind

    def to_dict(self) -> Dict[str, Any]:
        return {
            "registered_entity": self.registered_entity.to_public_dict(),
            "entity_type": self.entity_kind.value,
        }


@dataclass
class TokenPair:
    """Access token, refresh token and their metadata"""
    access_token: str
    refresh_token: str
    subject: str
    expires_at: datetime
    issuer: str
    scopes: List[str] = field(default_factory=list)
    token_type: TokenKind = TokenKind.BEARER_JWT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type.value,
            "expires_at": self.expires_at.isoformat(),
            "scopes": list(self.scopes),
            "subject": self.subject,
            "issuer": self.issuer,
        }
