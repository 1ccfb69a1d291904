"""
HTTP API - aiohttp boundary for authentication and registration

Module: transport.http_api
Date: 2026-10-11
Version: 0.1.0

CHANGELOG:
[2026-10-11 v0.1.0] Initial implementation
  - /auth/login, /auth/client and their /refresh variants
  - /api/register/user and /api/register/client
  - Error translation middleware (structured JSON errors)
  - HttpApiServer (AppRunner + TCPSite lifecycle)

ARCHITECTURE:
Handlers only decode JSON bodies, call the core services and encode
their results. Core calls hash with bcrypt and touch JSON files, so
they run in worker threads to keep the event loop responsive.

Every failure is answered with:
    {"timestamp", "status_code", "status_text", "message", "path"}

SECURITY NOTES:
- Unknown principal and wrong secret produce the same 401 response
- Secret hashes are never serialized
- No TLS here (terminate TLS in front of the service)
"""

import asyncio
import http
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from aiohttp import web

from ..core.constants import (
    MAX_REQUEST_SIZE,
    MESSAGE_INVALID_CREDENTIALS,
    MESSAGE_INVALID_REFRESH_TOKEN,
    MESSAGE_UNEXPECTED_ERROR,
    RESOURCE_CLIENT_LOCATION,
    RESOURCE_USER_LOCATION,
    ROUTE_CLIENT_AUTH,
    ROUTE_CLIENT_REFRESH,
    ROUTE_REGISTER_CLIENT,
    ROUTE_REGISTER_USER,
    ROUTE_USER_LOGIN,
    ROUTE_USER_REFRESH,
    SERVICE_NAME,
    SERVICE_VERSION,
)
from ..model.kinds import PrincipalKind
from ..model.messages import ClientRegistrationRequest, UserRegistrationRequest
from ..persistence.principal_store import PrincipalExistsError
from ..registration import (
    InvalidRegistrationRequestError,
    RegistrationResolver,
    UnsupportedPrincipalKindError,
)
from ..security.authentication import (
    AuthenticationService,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    PrincipalNotFoundError,
    UnknownPrincipalKindError,
)

logger = logging.getLogger("transport.http_api")


class InvalidRequestBodyError(Exception):
    """Body is not a JSON object or lacks a required field"""
    pass


def error_response(request: web.Request, status: int, message: str) -> web.Response:
    """Structured JSON error body"""
    body = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status_code": status,
        "status_text": http.HTTPStatus(status).phrase,
        "message": message,
        "path": request.path,
    }
    return web.json_response(body, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Translate core errors into structured HTTP errors"""
    try:
        return await handler(request)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        return error_response(request, e.status, e.reason)
    except (PrincipalNotFoundError, InvalidCredentialsError):
        return error_response(request, 401, MESSAGE_INVALID_CREDENTIALS)
    except InvalidRefreshTokenError:
        return error_response(request, 401, MESSAGE_INVALID_REFRESH_TOKEN)
    except (
        InvalidRequestBodyError,
        InvalidRegistrationRequestError,
        UnsupportedPrincipalKindError,
        UnknownPrincipalKindError,
    ) as e:
        return error_response(request, 400, str(e))
    except PrincipalExistsError as e:
        return error_response(request, 409, str(e))
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return error_response(request, 500, MESSAGE_UNEXPECTED_ERROR)


async def _read_json(request: web.Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidRequestBodyError("Request body must be valid JSON")

    if not isinstance(body, dict):
        raise InvalidRequestBodyError("Request body must be a JSON object")
    return body


def _required_string(body: Dict[str, Any], name: str) -> str:
    value = body.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidRequestBodyError(f"'{name}' is required")
    return value


class HttpApi:
    """
    Routes HTTP requests to AuthenticationService and RegistrationResolver.
    """

    def __init__(
        self,
        auth_service: AuthenticationService,
        registration_resolver: RegistrationResolver,
    ):
        self.auth_service = auth_service
        self.registration_resolver = registration_resolver

    def build_app(self) -> web.Application:
        """Create the aiohttp application"""
        app = web.Application(
            middlewares=[error_middleware],
            client_max_size=MAX_REQUEST_SIZE,
        )
        app.router.add_get("/", self._index)
        app.router.add_post(ROUTE_USER_LOGIN, self._login)
        app.router.add_post(ROUTE_CLIENT_AUTH, self._client_auth)
        app.router.add_post(ROUTE_USER_REFRESH, self._login_refresh)
        app.router.add_post(ROUTE_CLIENT_REFRESH, self._client_refresh)
        app.router.add_post(ROUTE_REGISTER_USER, self._register_user)
        app.router.add_post(ROUTE_REGISTER_CLIENT, self._register_client)
        return app

    async def _index(self, request: web.Request) -> web.Response:
        return web.json_response({"service": SERVICE_NAME, "version": SERVICE_VERSION})

    # ========================================================================
    # Authentication
    # ========================================================================

    async def _login(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        token_pair = await asyncio.to_thread(
            self.auth_service.authenticate_user,
            _required_string(body, "username"),
            _required_string(body, "password"),
        )
        return web.json_response(token_pair.to_dict())

    async def _client_auth(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        token_pair = await asyncio.to_thread(
            self.auth_service.authenticate_client,
            _required_string(body, "client_id"),
            _required_string(body, "client_secret"),
        )
        return web.json_response(token_pair.to_dict())

    async def _login_refresh(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        token_pair = await asyncio.to_thread(
            self.auth_service.refresh_user, _required_string(body, "refresh_token")
        )
        return web.json_response(token_pair.to_dict())

    async def _client_refresh(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        token_pair = await asyncio.to_thread(
            self.auth_service.refresh_client, _required_string(body, "refresh_token")
        )
        return web.json_response(token_pair.to_dict())

    # ========================================================================
    # Registration
    # ========================================================================

    async def _register_user(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        registration = self._decode(UserRegistrationRequest.from_dict, body)

        handler = self.registration_resolver.resolve(PrincipalKind.USER)
        result = await asyncio.to_thread(handler.register, registration)

        location = RESOURCE_USER_LOCATION.format(id=result.registered_entity.id)
        return web.json_response(result.to_dict(), status=201, headers={"Location": location})

    async def _register_client(self, request: web.Request) -> web.Response:
        body = await _read_json(request)
        registration = self._decode(ClientRegistrationRequest.from_dict, body)

        handler = self.registration_resolver.resolve(PrincipalKind.CLIENT)
        result = await asyncio.to_thread(handler.register, registration)

        location = RESOURCE_CLIENT_LOCATION.format(client_id=result.registered_entity.client_id)
        return web.json_response(result.to_dict(), status=201, headers={"Location": location})

    @staticmethod
    def _decode(factory: Callable[[Dict[str, Any]], Any], body: Dict[str, Any]) -> Any:
        try:
            return factory(body)
        except KeyError as e:
            raise InvalidRequestBodyError(f"'{e.args[0]}' is required")
        except ValueError as e:
            raise InvalidRequestBodyError(str(e))


class HttpApiServer:
    """
    Serves an HttpApi application on host:port.
    """

    def __init__(self, api: HttpApi, host: str = "127.0.0.1", port: int = 8080):
        self.api = api
        self.host = host
        self.port = port
        self.runner: Optional[web.AppRunner] = None
        self.logger = logging.getLogger("transport.http_server")

    @property
    def is_running(self) -> bool:
        return self.runner is not None

    async def start(self) -> None:
        """Start listening (returns once the socket is bound)"""
        if self.runner is not None:
            self.logger.warning("HTTP server already running")
            return

        runner = web.AppRunner(self.api.build_app())
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        try:
            await site.start()
        except OSError:
            await runner.cleanup()
            raise

        self.runner = runner
        self.logger.info(f"HTTP server started on {self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop listening and release the socket"""
        if self.runner is None:
            return
        await self.runner.cleanup()
        self.runner = None
        self.logger.info("HTTP server stopped")
