"""
Configuration - Service settings from the environment

Module: core.config
Date: 2026-10-10
Version: 0.1.0

CHANGELOG:
[2026-10-10 v0.1.0] Initial implementation
  - AuthConfig dataclass
  - from_env() loader with safe TTL fallbacks

NOTES:
TTL values that are not a positive whole number of minutes fall back to
their default (with a warning) instead of failing startup or requests.
The signing secret is kept as given; SigningKey decides if it is usable.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Mapping, Optional

from .constants import (
    DEFAULT_ACCESS_TTL_MINUTES,
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_DATA_DIR,
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    DEFAULT_ISSUER,
    DEFAULT_LOG_LEVEL,
    DEFAULT_REFRESH_TTL_MINUTES,
    ENV_ACCESS_TTL,
    ENV_BCRYPT_ROUNDS,
    ENV_DATA_DIR,
    ENV_HTTP_HOST,
    ENV_HTTP_PORT,
    ENV_JWT_ISSUER,
    ENV_JWT_SECRET,
    ENV_LOG_LEVEL,
    ENV_REFRESH_TTL,
)

logger = logging.getLogger("core.config")


def parse_minutes(value: Optional[str], default_minutes: int, name: str = "ttl") -> timedelta:
    """
    Parse a TTL given in minutes

    Args:
        value: Raw value (None means unset)
        default_minutes: Fallback when unset or malformed
        name: Setting name for the warning

    Returns:
        timedelta
    """
    if value is None or not str(value).strip():
        return timedelta(minutes=default_minutes)

    try:
        minutes = int(str(value).strip())
    except ValueError:
        logger.warning(f"{name}={value!r} is not a number of minutes, using {default_minutes}")
        return timedelta(minutes=default_minutes)

    if minutes <= 0:
        logger.warning(f"{name}={minutes} must be positive, using {default_minutes}")
        return timedelta(minutes=default_minutes)

    return timedelta(minutes=minutes)


def _parse_int(value: Optional[str], default: int, name: str) -> int:
    if value is None or not str(value).strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{name}={value!r} is not an integer, using {default}")
        return default


@dataclass
class AuthConfig:
    """Nexus Sentinel configuration"""
    jwt_secret: Optional[str] = field(default=None, repr=False)
    issuer: str = DEFAULT_ISSUER
    access_ttl: timedelta = timedelta(minutes=DEFAULT_ACCESS_TTL_MINUTES)
    refresh_ttl: timedelta = timedelta(minutes=DEFAULT_REFRESH_TTL_MINUTES)
    data_dir: str = DEFAULT_DATA_DIR
    host: str = DEFAULT_HTTP_HOST
    port: int = DEFAULT_HTTP_PORT
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuthConfig":
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)
        """
        env = os.environ if environ is None else environ

        return cls(
            jwt_secret=env.get(ENV_JWT_SECRET),
            issuer=env.get(ENV_JWT_ISSUER) or DEFAULT_ISSUER,
            access_ttl=parse_minutes(
                env.get(ENV_ACCESS_TTL), DEFAULT_ACCESS_TTL_MINUTES, ENV_ACCESS_TTL
            ),
            refresh_ttl=parse_minutes(
                env.get(ENV_REFRESH_TTL), DEFAULT_REFRESH_TTL_MINUTES, ENV_REFRESH_TTL
            ),
            data_dir=env.get(ENV_DATA_DIR) or DEFAULT_DATA_DIR,
            host=env.get(ENV_HTTP_HOST) or DEFAULT_HTTP_HOST,
            port=_parse_int(env.get(ENV_HTTP_PORT), DEFAULT_HTTP_PORT, ENV_HTTP_PORT),
            bcrypt_rounds=_parse_int(
                env.get(ENV_BCRYPT_ROUNDS), DEFAULT_BCRYPT_ROUNDS, ENV_BCRYPT_ROUNDS
            ),
            log_level=(env.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
        )
