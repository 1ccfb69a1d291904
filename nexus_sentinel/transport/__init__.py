"""
Transport module - HTTP boundary

Provides:
- HttpApi: aiohttp routes and error translation
- HttpApiServer: listening lifecycle
"""

from .http_api import HttpApi, HttpApiServer, error_middleware, InvalidRequestBodyError

__all__ = [
    "HttpApi",
    "HttpApiServer",
    "error_middleware",
    "InvalidRequestBodyError",
]
