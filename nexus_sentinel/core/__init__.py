"""
Core module - Configuration and service wiring
"""

from .config import AuthConfig, parse_minutes
from .sentinel import NexusSentinel

__all__ = [
    "AuthConfig",
    "parse_minutes",
    "NexusSentinel",
]
