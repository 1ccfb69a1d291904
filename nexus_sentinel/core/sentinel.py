"""
Nexus Sentinel - Service wiring and lifecycle

Module: core.sentinel
Date: 2026-10-11
Version: 0.1.0

CHANGELOG:
[2026-10-11 v0.1.0] Initial implementation
  - Signing key built before anything else (fatal on bad secret)
  - Stores, codec, verifier, authentication service, registration resolver
  - HTTP server start/stop/run

ARCHITECTURE:
NexusSentinel is the entry point applications use:
1. Builds the process-wide SigningKey from configuration
2. Creates the JSON stores under data_dir
3. Wires AuthenticationService and RegistrationResolver
4. Serves them through HttpApiServer

The signing key exists before the first request and is never replaced.
"""

import asyncio
import logging
from typing import Optional

from .config import AuthConfig
from .constants import SERVICE_NAME, SERVICE_VERSION
from ..persistence import PrincipalStore, TokenLedger
from ..registration import (
    ClientRegistrationHandler,
    RegistrationResolver,
    UserRegistrationHandler,
)
from ..security.authentication import (
    AuthenticationService,
    CredentialVerifier,
    SigningKey,
    TokenCodec,
)
from ..transport.http_api import HttpApi, HttpApiServer


class NexusSentinel:
    """
    Token service: authentication, refresh and registration over HTTP.

    Typical usage:
        sentinel = NexusSentinel(AuthConfig.from_env())
        await sentinel.run()
    """

    def __init__(self, config: AuthConfig):
        """
        Wire every component

        Args:
            config: Service configuration

        Raises:
            SigningConfigurationError: If the signing secret is unusable
        """
        self.logger = logging.getLogger("core.sentinel")
        self.config = config

        self.signing_key = SigningKey.from_base64(config.jwt_secret)
        self.token_codec = TokenCodec(self.signing_key, config.issuer)
        self.credential_verifier = CredentialVerifier(rounds=config.bcrypt_rounds)

        self.principal_store = PrincipalStore(config.data_dir)
        self.token_ledger = TokenLedger(config.data_dir)

        self.auth_service = AuthenticationService(
            principal_store=self.principal_store,
            token_ledger=self.token_ledger,
            token_codec=self.token_codec,
            credential_verifier=self.credential_verifier,
            access_ttl=config.access_ttl,
            refresh_ttl=config.refresh_ttl,
        )
        self.registration_resolver = RegistrationResolver([
            UserRegistrationHandler(self.principal_store, self.credential_verifier),
            ClientRegistrationHandler(self.principal_store, self.credential_verifier),
        ])

        self.api = HttpApi(self.auth_service, self.registration_resolver)
        self.server: Optional[HttpApiServer] = None

        self.logger.info(f"Service initialized: {SERVICE_NAME} v{SERVICE_VERSION}")
        self.logger.info(
            f"Issuer: {config.issuer} (access_ttl={config.access_ttl}, "
            f"refresh_ttl={config.refresh_ttl})"
        )
        self.logger.info(f"Data directory: {config.data_dir}")

    @property
    def is_running(self) -> bool:
        return self.server is not None and self.server.is_running

    async def start(self) -> None:
        """Start the HTTP server"""
        if self.is_running:
            self.logger.warning("Service already running")
            return

        self.server = HttpApiServer(self.api, self.config.host, self.config.port)
        await self.server.start()
        self.logger.info(f"Service started: {SERVICE_NAME} v{SERVICE_VERSION}")

    async def stop(self) -> None:
        """Stop the HTTP server"""
        if self.server is None:
            return
        await self.server.stop()
        self.server = None
        self.logger.info("Service stopped")

    async def run(self) -> None:
        """Run until cancelled"""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
