"""
Principal Store - User and client persistence

Module: persistence.principal_store
Date: 2026-10-06
Version: 0.1.0

CHANGELOG:
[2026-10-06 v0.1.0] Initial implementation
  - Users and clients stored in principals.json
  - Lookup by username / client_id
  - save() assigns the document id and enforces unique identifiers

ARCHITECTURE:
PrincipalStore provides:
  - find_user_by_username(username) -> Optional[User]
  - find_client_by_client_id(client_id) -> Optional[Client]
  - save(principal) -> principal with id assigned

Each save writes exactly one principal document inside one locked
transaction; there are no multi-document updates.
"""

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..model.principal import Client, Principal, User
from ..model.kinds import PrincipalKind
from .json_store import JSONStore


class PrincipalStoreError(Exception):
    """Base principal store error"""
    pass


class PrincipalExistsError(PrincipalStoreError):
    """Username or client_id already registered"""
    pass


# collection key and identifier field per principal kind
_COLLECTIONS = {
    PrincipalKind.USER: ("users", "username"),
    PrincipalKind.CLIENT: ("clients", "client_id"),
}


class PrincipalStore:
    """
    Persists users and clients in principals.json.
    """

    def __init__(self, data_dir: str = "./data"):
        """
        Initialize principal store

        Args:
            data_dir: Directory for data files
        """
        self.logger = logging.getLogger("persistence.principal_store")
        self.data_dir = Path(data_dir)
        self.principals_file = self.data_dir / "principals.json"

        default_data = {
            "users": [],
            "clients": [],
        }
        self.store = JSONStore(str(self.principals_file), default_data)
        self.logger.info(f"PrincipalStore initialized (file={self.principals_file})")

    def find_user_by_username(self, username: str) -> Optional[User]:
        """Find user by username"""
        record = self._find(PrincipalKind.USER, username)
        return User.from_dict(record) if record is not None else None

    def find_client_by_client_id(self, client_id: str) -> Optional[Client]:
        """Find client by client_id"""
        record = self._find(PrincipalKind.CLIENT, client_id)
        return Client.from_dict(record) if record is not None else None

    def save(self, principal: Principal) -> Principal:
        """
        Persist a new principal

        Args:
            principal: User or Client (id assigned if missing)

        Returns:
            The principal with its id set

        Raises:
            PrincipalExistsError: If the identifier is already registered
        """
        collection, id_field = _COLLECTIONS[principal.kind]

        with self.store.transaction() as data:
            records: List[Dict[str, Any]] = data.setdefault(collection, [])
            if any(r.get(id_field) == principal.identifier for r in records):
                raise PrincipalExistsError(
                    f"{principal.kind.value.lower()} '{principal.identifier}' already exists"
                )

            if not principal.id:
                principal.id = uuid.uuid4().hex
            records.append(principal.to_dict())

        self.logger.info(
            f"Principal saved: {principal.kind.value} {principal.identifier} ({principal.id})"
        )
        return principal

    def _find(self, kind: PrincipalKind, identifier: str) -> Optional[Dict[str, Any]]:
        collection, id_field = _COLLECTIONS[kind]
        data = self.store.load()
        for record in data.get(collection, []):
            if record.get(id_field) == identifier:
                return record
        return None
