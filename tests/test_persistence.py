#!/usr/bin/env python3
"""
Persistence Tests - JSONStore, PrincipalStore, TokenLedger
"""

import json
import logging
import os
import shutil
import sys
import tempfile
import unittest
from datetime import timedelta
from pathlib import Path

# Add nexus_sentinel to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nexus_sentinel.model.kinds import PrincipalKind, TokenKind
from nexus_sentinel.model.principal import Client, User
from nexus_sentinel.persistence.json_store import JSONStore, JSONStoreFormatError
from nexus_sentinel.persistence.principal_store import PrincipalExistsError, PrincipalStore
from nexus_sentinel.persistence.token_ledger import (
    IssuedToken,
    TokenLedger,
    TokenLedgerError,
    digest_token,
)
from nexus_sentinel.security.authentication.token_codec import utc_now

logging.basicConfig(level=logging.WARNING)


class TestJSONStore(unittest.TestCase):
    """Test suite for JSONStore"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.store_path = os.path.join(self.test_dir, "nested", "store.json")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_creates_directory_and_defaults(self):
        """Test missing directories are created with default content"""
        store = JSONStore(self.store_path, {"tokens": []})

        self.assertTrue(os.path.exists(self.store_path))
        self.assertEqual(store.load(), {"tokens": []})

    def test_existing_file_kept(self):
        """Test existing data is not overwritten by defaults"""
        JSONStore(self.store_path, {"tokens": []}).append_entry("tokens", {"id": "1"})

        store = JSONStore(self.store_path, {"tokens": []})

        self.assertEqual(store.load(), {"tokens": [{"id": "1"}]})

    def test_transaction_commits(self):
        """Test mutations inside a transaction are saved"""
        store = JSONStore(self.store_path, {"users": []})

        with store.transaction() as data:
            data["users"].append({"username": "alice"})

        self.assertEqual(store.load()["users"], [{"username": "alice"}])

    def test_transaction_rolls_back_on_error(self):
        """Test failed transaction leaves file untouched"""
        store = JSONStore(self.store_path, {"users": []})

        with self.assertRaises(RuntimeError):
            with store.transaction() as data:
                data["users"].append({"username": "alice"})
                raise RuntimeError("boom")

        self.assertEqual(store.load(), {"users": []})

    def test_invalid_json(self):
        """Test corrupted file raises JSONStoreFormatError"""
        store = JSONStore(self.store_path, {})
        with open(self.store_path, "w") as f:
            f.write("{not json")

        with self.assertRaises(JSONStoreFormatError):
            store.load()

    def test_file_permissions(self):
        """Test file has restrictive permissions"""
        store = JSONStore(self.store_path)
        store.save({"data": "test"})

        mode = os.stat(self.store_path).st_mode & 0o777
        self.assertEqual(mode, 0o600)


class TestPrincipalStore(unittest.TestCase):
    """Test suite for PrincipalStore"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.store = PrincipalStore(self.test_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_save_assigns_id(self):
        """Test store assigns an id when missing"""
        user = self.store.save(User(username="alice", password_hash="$2b$hash"))

        self.assertTrue(user.id)
        self.assertEqual(self.store.find_user_by_username("alice").id, user.id)

    def test_save_keeps_given_id(self):
        """Test an explicit id is preserved"""
        self.store.save(Client(client_id="svc", secret_hash="$2b$hash", id="fixed-id"))

        self.assertEqual(self.store.find_client_by_client_id("svc").id, "fixed-id")

    def test_round_trip_fields(self):
        """Test every stored field survives a reload"""
        self.store.save(Client(
            client_id="svc",
            secret_hash="$2b$hash",
            roles=["ROLE_SERVICE"],
            allowed_token_kinds=[TokenKind.BEARER_JWT, TokenKind.API_KEY],
            scopes=["a:read"],
            grant_types=["client_credentials"],
            team="core",
            service_tier="silver",
        ))

        reloaded = PrincipalStore(self.test_dir).find_client_by_client_id("svc")

        self.assertEqual(reloaded.roles, ["ROLE_SERVICE"])
        self.assertEqual(reloaded.allowed_token_kinds, [TokenKind.BEARER_JWT, TokenKind.API_KEY])
        self.assertEqual(reloaded.scopes, ["a:read"])
        self.assertEqual(reloaded.grant_types, ["client_credentials"])
        self.assertEqual(reloaded.team, "core")
        self.assertEqual(reloaded.service_tier, "silver")

    def test_lookup_miss(self):
        """Test unknown identifiers return None"""
        self.assertIsNone(self.store.find_user_by_username("ghost"))
        self.assertIsNone(self.store.find_client_by_client_id("ghost"))

    def test_duplicate_identifier(self):
        """Test duplicate usernames are refused and nothing is written"""
        self.store.save(User(username="alice", password_hash="h1"))

        with self.assertRaises(PrincipalExistsError):
            self.store.save(User(username="alice", password_hash="h2"))

        with open(self.store.principals_file) as f:
            self.assertEqual(len(json.load(f)["users"]), 1)

    def test_public_dict_hides_hashes(self):
        """Test public views drop secret hashes"""
        user = User(username="alice", password_hash="h1")
        client = Client(client_id="svc", secret_hash="h2")

        self.assertNotIn("password_hash", user.to_public_dict())
        self.assertNotIn("secret_hash", client.to_public_dict())
        self.assertIn("password_hash", user.to_dict())


class TestTokenLedger(unittest.TestCase):
    """Test suite for TokenLedger"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.ledger = TokenLedger(self.test_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _record(self, token, subject="alice", kind=TokenKind.BEARER_JWT):
        issued_at = utc_now()
        record = IssuedToken.for_token(
            token,
            kind=kind,
            subject_id=subject,
            subject_kind=PrincipalKind.USER,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(minutes=15),
        )
        self.ledger.save(record)
        return record

    def test_find_by_token(self):
        """Test a recorded token can be found from its raw value"""
        record = self._record("token-one")

        found = self.ledger.find_by_token("token-one")

        self.assertEqual(found, record)
        self.assertIsNone(self.ledger.find_by_token("token-two"))

    def test_raw_token_not_stored(self):
        """Test only the digest reaches the file"""
        self._record("super-secret-token")

        content = self.ledger.tokens_file.read_text()

        self.assertNotIn("super-secret-token", content)
        self.assertIn(digest_token("super-secret-token"), content)

    def test_list_subject_tokens(self):
        """Test records are listed per subject"""
        self._record("a1")
        self._record("a2", kind=TokenKind.REFRESH_TOKEN)
        self._record("b1", subject="bob")

        self.assertEqual(len(self.ledger.list_subject_tokens("alice")), 2)
        self.assertEqual(len(self.ledger.list_subject_tokens("bob")), 1)
        self.assertEqual(self.ledger.list_subject_tokens("carol"), [])

    def test_append_only(self):
        """Test the same token recorded twice yields two records"""
        self._record("dup")
        self._record("dup")

        self.assertEqual(len(self.ledger.list_subject_tokens("alice")), 2)

    def test_corrupted_ledger(self):
        """Test read failures surface as TokenLedgerError"""
        self.ledger.tokens_file.write_text("[broken")

        with self.assertRaises(TokenLedgerError):
            self.ledger.find_by_token("anything")


if __name__ == "__main__":
    unittest.main(verbosity=2)
