"""
Signing Key - HMAC key derived from the configured secret

Module: security.authentication.signing_key
Date: 2026-10-07
Version: 0.1.0

CHANGELOG:
[2026-10-07 v0.1.0] Initial implementation
  - Base64 secret decoding at startup
  - HS256 minimum key size (256 bits) enforced

SECURITY NOTES:
- Built once before any request is served, never mutated afterwards
- A malformed secret is fatal: tokens signed with it could never be
  validated by other services
- repr() never shows key material
"""

import base64
import binascii

# HS256 requires a key of at least the hash output size
MIN_KEY_BYTES = 32


class SigningConfigurationError(Exception):
    """Signing secret missing or malformed (fatal at startup)"""
    pass


class SigningKey:
    """Immutable HMAC-SHA256 signing key"""

    __slots__ = ("_key",)

    def __init__(self, key: bytes):
        """
        Args:
            key: Raw key bytes (32+ bytes)

        Raises:
            SigningConfigurationError: If the key is too short
        """
        if len(key) < MIN_KEY_BYTES:
            raise SigningConfigurationError(
                f"Signing key must be at least {MIN_KEY_BYTES} bytes "
                f"(got {len(key)})"
            )
        object.__setattr__(self, "_key", bytes(key))

    def __setattr__(self, name, value):
        raise AttributeError("SigningKey is immutable")

    def __repr__(self) -> str:
        return f"SigningKey(<{len(self._key)} bytes>)"

    @property
    def material(self) -> bytes:
        return self._key

    @classmethod
    def from_base64(cls, secret: str) -> "SigningKey":
        """
        Decode a base64-encoded secret

        Raises:
            SigningConfigurationError: If the secret is missing, not valid
                base64 or too short
        """
        if not secret:
            raise SigningConfigurationError("Signing secret is not configured")

        try:
            key = base64.b64decode(secret.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise SigningConfigurationError(f"Signing secret is not valid base64: {e}")

        return cls(key)
