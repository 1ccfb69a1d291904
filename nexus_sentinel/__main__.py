"""
Nexus Sentinel Entry Point

Allows running the service directly via `python -m nexus_sentinel`.
Configures logging to stderr, loads configuration from the environment
and serves the HTTP API until interrupted.
"""

import asyncio
import logging
import sys

from .core.config import AuthConfig
from .core.sentinel import NexusSentinel
from .security.authentication import SigningConfigurationError


def setup_logging(level: str = "INFO"):
    """Configure logging to stderr"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


async def main():
    """Main entry point"""
    config = AuthConfig.from_env()
    setup_logging(config.log_level)
    logger = logging.getLogger("main")

    try:
        sentinel = NexusSentinel(config)
    except SigningConfigurationError as e:
        logger.critical(f"Invalid signing configuration: {e}")
        sys.exit(1)

    logger.info(f"Starting Nexus Sentinel on {config.host}:{config.port}...")
    await sentinel.run()


def run():
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
