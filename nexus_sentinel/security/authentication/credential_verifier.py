"""
Credential Verifier - bcrypt secret hashing

Module: security.authentication.credential_verifier
Date: 2026-10-07
Version: 0.1.0

CHANGELOG:
[2026-10-07 v0.1.0] Initial implementation
  - bcrypt hashing of user passwords and client secrets
  - Constant-time verification (bcrypt.checkpw)
  - Dummy verification for unknown principals

SECURITY NOTES:
- bcrypt only considers the first 72 bytes; longer secrets are rejected
  at hashing time instead of being silently truncated
- matches() never raises on a malformed hash, it returns False
"""

import logging

import bcrypt

# bcrypt input limit in bytes
MAX_SECRET_BYTES = 72


class CredentialVerifier:
    """
    Hashes and verifies secrets with bcrypt.
    """

    def __init__(self, rounds: int = 12):
        """
        Initialize verifier

        Args:
            rounds: bcrypt cost factor (4-31, 10-12 recommended)

        Raises:
            ValueError: If rounds is out of range
        """
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")

        self.logger = logging.getLogger("security.credential_verifier")
        self.rounds = rounds
        # compared against when the principal does not exist
        self._dummy_hash = bcrypt.hashpw(b"nexus-sentinel", bcrypt.gensalt(rounds=rounds))

    def hash(self, plaintext: str) -> str:
        """
        Hash a secret

        Args:
            plaintext: Plaintext secret

        Returns:
            bcrypt hash (bytes decoded to string)

        Raises:
            ValueError: If the secret is empty or longer than 72 bytes
        """
        encoded = plaintext.encode()
        if not encoded:
            raise ValueError("Secret must not be empty")
        if len(encoded) > MAX_SECRET_BYTES:
            raise ValueError(f"Secret must be at most {MAX_SECRET_BYTES} bytes")

        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(encoded, salt).decode()

    def matches(self, plaintext: str, hashed: str) -> bool:
        """
        Verify a secret against its hash

        Returns:
            True if the secret matches, False otherwise
        """
        try:
            return bcrypt.checkpw(plaintext.encode(), hashed.encode())
        except ValueError as e:
            self.logger.warning(f"Secret verification failed: {e}")
            return False

    def burn(self, plaintext: str) -> None:
        """
        Run one verification against a dummy hash (unknown principal)

        Accepts any str, including lone surrogates that matches() rejects,
        so an unknown principal fails the same way as a wrong secret.
        """
        encoded = plaintext.encode("utf-8", "surrogatepass")[:MAX_SECRET_BYTES]
        bcrypt.checkpw(encoded, self._dummy_hash)
