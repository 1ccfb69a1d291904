#!/usr/bin/env python3
"""
HTTP API Tests - Routes, status codes and error bodies

Runs the aiohttp application in-process (aiohttp.test_utils) over a
temporary data directory.
"""

import base64
import logging
import shutil
import sys
import tempfile
import unittest
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

# Add nexus_sentinel to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nexus_sentinel.persistence.principal_store import PrincipalStore
from nexus_sentinel.persistence.token_ledger import TokenLedger
from nexus_sentinel.registration import (
    ClientRegistrationHandler,
    RegistrationResolver,
    UserRegistrationHandler,
)
from nexus_sentinel.security.authentication import (
    AuthenticationService,
    CredentialVerifier,
    SigningKey,
    TokenCodec,
)
from nexus_sentinel.transport.http_api import HttpApi

logging.basicConfig(level=logging.WARNING)

SECRET = base64.b64encode(b"unit-test-signing-key-0123456789abcdef").decode()
ERROR_FIELDS = {"timestamp", "status_code", "status_text", "message", "path"}


class TestHttpApi(AioHTTPTestCase):
    """End-to-end HTTP behaviour"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        super().setUp()

    def tearDown(self):
        super().tearDown()
        shutil.rmtree(self.test_dir, ignore_errors=True)

    async def get_application(self) -> web.Application:
        store = PrincipalStore(self.test_dir)
        verifier = CredentialVerifier(rounds=4)
        self.codec = TokenCodec(SigningKey.from_base64(SECRET), issuer="nexus-auth")
        self.auth_service = AuthenticationService(
            store,
            TokenLedger(self.test_dir),
            self.codec,
            verifier,
            access_ttl=timedelta(minutes=15),
            refresh_ttl=timedelta(days=30),
        )
        resolver = RegistrationResolver([
            UserRegistrationHandler(store, verifier),
            ClientRegistrationHandler(store, verifier),
        ])
        return HttpApi(self.auth_service, resolver).build_app()

    async def register_alice(self):
        resp = await self.client.post(
            "/api/register/user",
            json={"username": "alice", "password": "p1", "roles": ["ROLE_USER"]},
        )
        self.assertEqual(resp.status, 201)
        return resp

    async def login_alice(self):
        await self.register_alice()
        resp = await self.client.post("/auth/login", json={"username": "alice", "password": "p1"})
        self.assertEqual(resp.status, 200)
        return await resp.json()

    def assertErrorBody(self, body, status, path):
        self.assertEqual(set(body), ERROR_FIELDS)
        self.assertEqual(body["status_code"], status)
        self.assertEqual(body["path"], path)

    # ------------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------------

    async def test_index(self):
        resp = await self.client.get("/")
        self.assertEqual(resp.status, 200)
        self.assertEqual((await resp.json())["service"], "NexusSentinel")

    async def test_register_user(self):
        """Test 201 with Location header and no password hash"""
        resp = await self.register_alice()
        body = await resp.json()

        entity = body["registered_entity"]
        self.assertEqual(body["entity_type"], "USER")
        self.assertEqual(entity["username"], "alice")
        self.assertNotIn("password_hash", entity)
        self.assertEqual(resp.headers["Location"], f"/api/resource/user/{entity['id']}")

    async def test_register_client(self):
        """Test client registration generates a client_id when absent"""
        resp = await self.client.post(
            "/api/register/client",
            json={"client_secret": "s3cret", "scopes": ["invoices:read"]},
        )
        self.assertEqual(resp.status, 201)
        body = await resp.json()

        entity = body["registered_entity"]
        self.assertEqual(body["entity_type"], "CLIENT")
        self.assertTrue(entity["client_id"])
        self.assertNotIn("secret_hash", entity)
        self.assertEqual(
            resp.headers["Location"],
            f"/api/resource/client/{entity['client_id']}",
        )

    async def test_duplicate_registration(self):
        """Test duplicate username yields 409"""
        await self.register_alice()
        resp = await self.client.post(
            "/api/register/user", json={"username": "alice", "password": "other"}
        )
        self.assertEqual(resp.status, 409)
        self.assertErrorBody(await resp.json(), 409, "/api/register/user")

    async def test_registration_missing_field(self):
        """Test missing password yields 400"""
        resp = await self.client.post("/api/register/user", json={"username": "alice"})
        self.assertEqual(resp.status, 400)
        body = await resp.json()
        self.assertErrorBody(body, 400, "/api/register/user")
        self.assertIn("password", body["message"])

    async def test_registration_unknown_token_kind(self):
        """Test unknown token kind names yield 400"""
        resp = await self.client.post(
            "/api/register/user",
            json={"username": "alice", "password": "p1", "allowed_token_kinds": ["MAGIC"]},
        )
        self.assertEqual(resp.status, 400)

    async def test_registration_oversized_password(self):
        """Test passwords over the bcrypt limit yield 400"""
        resp = await self.client.post(
            "/api/register/user", json={"username": "alice", "password": "x" * 100}
        )
        self.assertEqual(resp.status, 400)

    # ------------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------------

    async def test_login(self):
        """Test successful login returns a token pair"""
        body = await self.login_alice()

        self.assertEqual(body["subject"], "alice")
        self.assertEqual(body["issuer"], "nexus-auth")
        self.assertEqual(body["token_type"], "BEARER_JWT")
        self.assertEqual(body["scopes"], ["ROLE_USER"])
        self.assertIn("expires_at", body)
        self.assertTrue(self.codec.validate(body["access_token"]))
        self.assertTrue(self.codec.is_refresh_kind(body["refresh_token"]))

    async def test_login_failures_are_uniform(self):
        """Test wrong password and unknown user give the same 401"""
        await self.register_alice()

        wrong = await self.client.post("/auth/login", json={"username": "alice", "password": "bad"})
        ghost = await self.client.post("/auth/login", json={"username": "ghost", "password": "x"})

        self.assertEqual(wrong.status, 401)
        self.assertEqual(ghost.status, 401)
        wrong_body = await wrong.json()
        ghost_body = await ghost.json()
        self.assertErrorBody(wrong_body, 401, "/auth/login")
        self.assertEqual(wrong_body["message"], "Invalid credentials")
        wrong_body.pop("timestamp")
        ghost_body.pop("timestamp")
        self.assertEqual(wrong_body, ghost_body)

    async def test_unencodable_password_is_uniform(self):
        """Test a lone surrogate password gives the same 401 for any username"""
        await self.register_alice()

        known = await self.client.post(
            "/auth/login", json={"username": "alice", "password": "\ud800"}
        )
        unknown = await self.client.post(
            "/auth/login", json={"username": "ghost", "password": "\ud800"}
        )

        self.assertEqual(known.status, 401)
        self.assertEqual(unknown.status, 401)
        known_body = await known.json()
        unknown_body = await unknown.json()
        self.assertEqual(known_body["message"], "Invalid credentials")
        self.assertEqual(unknown_body["message"], "Invalid credentials")

    async def test_login_invalid_json(self):
        """Test malformed JSON yields 400"""
        resp = await self.client.post(
            "/auth/login", data="{not json", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(resp.status, 400)
        self.assertErrorBody(await resp.json(), 400, "/auth/login")

    async def test_login_body_not_object(self):
        resp = await self.client.post("/auth/login", json=["alice", "p1"])
        self.assertEqual(resp.status, 400)

    async def test_login_missing_field(self):
        resp = await self.client.post("/auth/login", json={"username": "alice"})
        self.assertEqual(resp.status, 400)

    async def test_client_auth(self):
        """Test client credentials flow"""
        await self.client.post(
            "/api/register/client",
            json={"client_id": "svc", "client_secret": "s3cret", "scopes": ["a:read"]},
        )

        resp = await self.client.post(
            "/auth/client", json={"client_id": "svc", "client_secret": "s3cret"}
        )

        self.assertEqual(resp.status, 200)
        body = await resp.json()
        self.assertEqual(body["subject"], "svc")
        self.assertEqual(body["scopes"], ["a:read"])

    async def test_client_auth_failure(self):
        resp = await self.client.post(
            "/auth/client", json={"client_id": "svc", "client_secret": "nope"}
        )
        self.assertEqual(resp.status, 401)
        self.assertEqual((await resp.json())["message"], "Invalid credentials")

    # ------------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------------

    async def test_refresh(self):
        """Test refresh returns a new access token and the same refresh token"""
        tokens = await self.login_alice()

        resp = await self.client.post(
            "/auth/login/refresh", json={"refresh_token": tokens["refresh_token"]}
        )

        self.assertEqual(resp.status, 200)
        body = await resp.json()
        self.assertEqual(body["refresh_token"], tokens["refresh_token"])
        self.assertNotEqual(body["access_token"], tokens["access_token"])

    async def test_refresh_with_access_token(self):
        """Test an access token is refused by the refresh endpoint"""
        tokens = await self.login_alice()

        resp = await self.client.post(
            "/auth/login/refresh", json={"refresh_token": tokens["access_token"]}
        )

        self.assertEqual(resp.status, 401)
        body = await resp.json()
        self.assertErrorBody(body, 401, "/auth/login/refresh")
        self.assertEqual(body["message"], "Invalid or expired refresh token")

    async def test_refresh_user_token_on_client_endpoint(self):
        tokens = await self.login_alice()

        resp = await self.client.post(
            "/auth/client/refresh", json={"refresh_token": tokens["refresh_token"]}
        )

        self.assertEqual(resp.status, 401)

    async def test_refresh_missing_token(self):
        resp = await self.client.post("/auth/login/refresh", json={})
        self.assertEqual(resp.status, 400)

    # ------------------------------------------------------------------------
    # Error translation
    # ------------------------------------------------------------------------

    async def test_unknown_route(self):
        resp = await self.client.get("/nowhere")
        self.assertEqual(resp.status, 404)
        self.assertErrorBody(await resp.json(), 404, "/nowhere")

    async def test_unexpected_error(self):
        """Test unhandled errors become a generic 500"""
        with patch.object(self.auth_service, "authenticate_user", side_effect=RuntimeError("boom")):
            with self.assertLogs("transport.http_api", level="ERROR"):
                resp = await self.client.post(
                    "/auth/login", json={"username": "alice", "password": "p1"}
                )

        self.assertEqual(resp.status, 500)
        body = await resp.json()
        self.assertErrorBody(body, 500, "/auth/login")
        self.assertEqual(body["message"], "An unexpected error occurred")
        self.assertNotIn("boom", body["message"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
