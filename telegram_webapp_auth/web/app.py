"""FastAPI integration for the Telegram validators.

Provides the Login Widget ``/auth`` endpoints and a dependency that
authenticates Mini App requests carrying ``Authorization: tma <init_data>``.
"""

from __future__ import annotations

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from telegram_webapp_auth.config import Config
from telegram_webapp_auth.errors import TelegramAuthError
from telegram_webapp_auth.models import OAuthUser, WebAppInitData
from telegram_webapp_auth.utils.logger_setup import get_logger
from telegram_webapp_auth.validators import TelegramAuth


class MissingInitDataError(TelegramAuthError):
    """Raised when a request has no usable init data header."""

    kind = "MissingInitData"


def _auth(request: Request) -> TelegramAuth:
    return request.app.state.auth


def extract_init_data(header_value: str | None, scheme: str) -> str:
    """Return the raw ``init_data`` from an ``<scheme> <init_data>`` header."""
    if not header_value:
        raise MissingInitDataError("init data header is missing")
    prefix, _, raw = header_value.strip().partition(" ")
    if prefix.lower() != scheme.lower() or not raw.strip():
        raise MissingInitDataError(f"expected '{scheme} <init_data>' header")
    return raw.strip()


async def require_init_data(request: Request) -> WebAppInitData:
    """FastAPI dependency returning verified Mini App ``init_data``."""
    web = request.app.state.config.web
    raw = extract_init_data(
        request.headers.get(web.init_data_header), web.init_data_scheme
    )
    return await _auth(request).init_data.parse(raw)


async def _login(request: Request, data: object) -> JSONResponse:
    user: OAuthUser = await _auth(request).oauth.parse(data)
    get_logger(flow="oauth", user_id=user.id).info("Login widget auth succeeded")
    return JSONResponse(
        {"status": "ok", "user": user.model_dump(exclude={"hash"})}
    )


def create_app(config: Config, auth: TelegramAuth | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Loaded configuration.
        auth: Validators to use; built from ``config`` when omitted.

    Returns:
        FastAPI: Application with the auth routes mounted.

    """
    app = FastAPI(title="Telegram WebApp Auth")
    app.state.config = config
    app.state.auth = auth or TelegramAuth.from_config(config)

    @app.exception_handler(TelegramAuthError)
    async def auth_error_handler(
        request: Request, exc: TelegramAuthError
    ) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path}: {exc.kind}: {exc}")
        return JSONResponse(
            {"detail": str(exc), "kind": exc.kind},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    @app.post("/auth")
    async def auth_post(request: Request) -> JSONResponse:
        """Validate a Login Widget payload sent as a JSON body."""
        try:
            data = await request.json()
        except ValueError:
            return JSONResponse(
                {"detail": "Invalid JSON body"},
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        return await _login(request, data)

    @app.get("/auth")
    async def auth_get(request: Request) -> JSONResponse:
        """Validate a Login Widget payload passed as query parameters.

        This is the ``data-auth-url`` redirect flow of the widget.
        """
        return await _login(request, dict(request.query_params))

    @app.get("/webapp/me")
    async def webapp_me(
        init_data: WebAppInitData = Depends(require_init_data),
    ) -> dict:
        """Return the Mini App user behind the request."""
        return {
            "user": init_data.user.model_dump() if init_data.user else None,
            "query_id": init_data.query_id,
            "auth_date": init_data.auth_date,
        }

    return app


__all__ = ["create_app", "extract_init_data", "require_init_data"]
