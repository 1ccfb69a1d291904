"""
Token Ledger - Append-only record of issued tokens

Module: persistence.token_ledger
Date: 2026-10-06
Version: 0.1.0

CHANGELOG:
[2026-10-06 v0.1.0] Initial implementation
  - IssuedToken records in tokens.json
  - Token digests instead of raw tokens
  - Lookup by raw token and by subject

ARCHITECTURE:
TokenLedger provides:
  - save(IssuedToken): append one record per issued token
  - find_by_token(raw): digest lookup for audit tooling
  - list_subject_tokens(subject_id)

The ledger is never consulted when validating a token. Records are
immutable; retention/cleanup belongs to external tooling.

LIMITS:
Every save() rewrites and fsyncs the whole tokens.json under the store
lock, so issuance cost grows with ledger size and concurrent logins in
one process are serialized on the write. Prune the file externally.

SECURITY NOTES:
- Raw tokens are never written; only their SHA-256 digest
"""

import hashlib
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..model.kinds import PrincipalKind, TokenKind
from .json_store import JSONStore, JSONStoreError


class TokenLedgerError(Exception):
    """Ledger write/read failure"""
    pass


def digest_token(token: str) -> str:
    """SHA-256 hex digest of a raw token"""
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass(frozen=True)
class IssuedToken:
    """Ledger record of one issued token"""
    token_digest: str
    kind: TokenKind
    subject_id: str
    subject_kind: PrincipalKind
    issued_at: datetime
    expires_at: datetime
    id: Optional[str] = None

    @classmethod
    def for_token(
        cls,
        raw_token: str,
        kind: TokenKind,
        subject_id: str,
        subject_kind: PrincipalKind,
        issued_at: datetime,
        expires_at: datetime,
    ) -> "IssuedToken":
        """Build a record for a freshly signed token"""
        return cls(
            id=uuid.uuid4().hex,
            token_digest=digest_token(raw_token),
            kind=kind,
            subject_id=subject_id,
            subject_kind=subject_kind,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""
        return {
            "id": self.id,
            "token_digest": self.token_digest,
            "kind": self.kind.value,
            "subject_id": self.subject_id,
            "subject_kind": self.subject_kind.value,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IssuedToken":
        """Create from dictionary (from JSON)"""
        return cls(
            id=data.get("id"),
            token_digest=data["token_digest"],
            kind=TokenKind(data["kind"]),
            subject_id=data["subject_id"],
            subject_kind=PrincipalKind(data["subject_kind"]),
            issued_at=datetime.fromisoformat(data["issued_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )


class TokenLedger:
    """
    Append-only token ledger stored in tokens.json.
    """

    def __init__(self, data_dir: str = "./data"):
        """
        Initialize token ledger

        Args:
            data_dir: Directory for data files
        """
        self.logger = logging.getLogger("persistence.token_ledger")
        self.data_dir = Path(data_dir)
        self.tokens_file = self.data_dir / "tokens.json"

        default_data = {
            "tokens": [],
        }
        self.store = JSONStore(str(self.tokens_file), default_data)
        self.logger.info(f"TokenLedger initialized (file={self.tokens_file})")

    def save(self, record: IssuedToken) -> None:
        """
        Append an issued token record

        Raises:
            TokenLedgerError: If the record cannot be written
        """
        try:
            self.store.append_entry("tokens", record.to_dict())
        except JSONStoreError as e:
            raise TokenLedgerError(f"Failed to record token {record.id}: {e}") from e

        self.logger.debug(
            f"Token recorded: {record.kind.value} for "
            f"{record.subject_kind.value} {record.subject_id}"
        )

    def find_by_token(self, token: str) -> Optional[IssuedToken]:
        """
        Find the record of a raw token

        Returns:
            IssuedToken if recorded, None otherwise
        """
        token_digest = digest_token(token)
        for record in self._records():
            if record["token_digest"] == token_digest:
                return IssuedToken.from_dict(record)
        return None

    def list_subject_tokens(self, subject_id: str) -> List[IssuedToken]:
        """List every token recorded for a subject"""
        return [
            IssuedToken.from_dict(r)
            for r in self._records()
            if r["subject_id"] == subject_id
        ]

    def _records(self) -> List[Dict[str, Any]]:
        try:
            return self.store.load().get("tokens", [])
        except JSONStoreError as e:
            raise TokenLedgerError(f"Failed to read ledger: {e}") from e
