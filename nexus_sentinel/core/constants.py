"""
Constants for Nexus Sentinel

Module: core.constants
Date: 2026-10-10
Version: 0.1.0

CHANGELOG:
[2026-10-10 v0.1.0] Initial constants definition
  - Service identity
  - Token lifetime defaults
  - Configuration environment variables
  - HTTP routes and error messages

SECURITY NOTES:
- Access tokens are short-lived; refresh tokens are not rotated
- Credential failures share one external message
"""

from typing import Final

# ============================================================================
# Service
# ============================================================================

SERVICE_NAME: Final[str] = "NexusSentinel"
SERVICE_VERSION: Final[str] = "0.1.0"
SERVICE_DESCRIPTION: Final[str] = (
    "Token issuance, refresh and principal registration for users and clients"
)

# ============================================================================
# Tokens
# ============================================================================

DEFAULT_ISSUER: Final[str] = "nexus-auth"
DEFAULT_ACCESS_TTL_MINUTES: Final[int] = 15
DEFAULT_REFRESH_TTL_MINUTES: Final[int] = 30 * 24 * 60

DEFAULT_BCRYPT_ROUNDS: Final[int] = 12

# ============================================================================
# Configuration (environment variables)
# ============================================================================

ENV_JWT_SECRET: Final[str] = "JWT_SECRET"
ENV_JWT_ISSUER: Final[str] = "JWT_ISSUER"
ENV_ACCESS_TTL: Final[str] = "JWT_ACCESS_TOKEN_TTL_MINUTES"
ENV_REFRESH_TTL: Final[str] = "JWT_REFRESH_TOKEN_TTL_MINUTES"
ENV_DATA_DIR: Final[str] = "SENTINEL_DATA_DIR"
ENV_HTTP_HOST: Final[str] = "SENTINEL_HTTP_HOST"
ENV_HTTP_PORT: Final[str] = "SENTINEL_HTTP_PORT"
ENV_BCRYPT_ROUNDS: Final[str] = "SENTINEL_BCRYPT_ROUNDS"
ENV_LOG_LEVEL: Final[str] = "SENTINEL_LOG_LEVEL"

DEFAULT_DATA_DIR: Final[str] = "./data"
DEFAULT_HTTP_HOST: Final[str] = "127.0.0.1"
DEFAULT_HTTP_PORT: Final[int] = 8080
DEFAULT_LOG_LEVEL: Final[str] = "INFO"

# ============================================================================
# HTTP API
# ============================================================================

ROUTE_USER_LOGIN: Final[str] = "/auth/login"
ROUTE_CLIENT_AUTH: Final[str] = "/auth/client"
ROUTE_USER_REFRESH: Final[str] = "/auth/login/refresh"
ROUTE_CLIENT_REFRESH: Final[str] = "/auth/client/refresh"
ROUTE_REGISTER_USER: Final[str] = "/api/register/user"
ROUTE_REGISTER_CLIENT: Final[str] = "/api/register/client"

RESOURCE_USER_LOCATION: Final[str] = "/api/resource/user/{id}"
RESOURCE_CLIENT_LOCATION: Final[str] = "/api/resource/client/{client_id}"

MAX_REQUEST_SIZE: Final[int] = 64 * 1024  # 64 KB

MESSAGE_INVALID_CREDENTIALS: Final[str] = "Invalid credentials"
MESSAGE_INVALID_REFRESH_TOKEN: Final[str] = "Invalid or expired refresh token"
MESSAGE_UNEXPECTED_ERROR: Final[str] = "An unexpected error occurred"
