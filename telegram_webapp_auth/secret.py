"""Per-bot secret keys for the two Telegram signing flows."""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import re
from enum import Enum

from loguru import logger

from telegram_webapp_auth.errors import InvalidBotTokenError

WEB_APP_KEY = b"WebAppData"
BOT_TOKEN_RE = re.compile(r"^[0-9]+:[A-Za-z0-9_-]+$")


class Flow(str, Enum):
    """Signing flow a payload comes from."""

    WEB_APP = "web_app"
    OAUTH = "oauth"


def validate_bot_token(bot_token: str) -> str:
    """Return ``bot_token`` unchanged if it has the ``<id>:<secret>`` shape.

    Raises:
        InvalidBotTokenError: The token is empty or malformed.

    """
    if not isinstance(bot_token, str) or not BOT_TOKEN_RE.match(bot_token):
        raise InvalidBotTokenError("Invalid bot token")
    return bot_token


def derive_secret(bot_token: str, flow: Flow) -> bytes:
    """Return the HMAC key Telegram uses to sign payloads of ``flow``.

    Mini Apps use ``HMAC-SHA256(key="WebAppData", msg=bot_token)``; the Login
    Widget uses the raw ``SHA-256(bot_token)`` digest.
    """
    token = validate_bot_token(bot_token).encode()
    if flow is Flow.WEB_APP:
        return hmac.new(WEB_APP_KEY, token, hashlib.sha256).digest()
    if flow is Flow.OAUTH:
        return hashlib.sha256(token).digest()
    raise ValueError(f"Unknown flow: {flow!r}")


class SecretCell:
    """Compute-once holder of a derived secret.

    The first ``get()`` schedules derivation as a task; callers arriving while
    it is in flight await the same task, so the secret is derived once.
    """

    def __init__(self, bot_token: str, flow: Flow) -> None:
        self._bot_token = validate_bot_token(bot_token)
        self._flow = flow
        self._secret: bytes | None = None
        self._task: asyncio.Task[bytes] | None = None

    @property
    def flow(self) -> Flow:
        return self._flow

    async def _derive(self) -> bytes:
        secret = derive_secret(self._bot_token, self._flow)
        logger.debug(f"Derived {self._flow.value} secret")
        return secret

    def _forget_failed(self, task: asyncio.Task[bytes]) -> None:
        if self._task is not task:
            return
        if task.cancelled() or task.exception() is not None:
            self._task = None

    async def get(self) -> bytes:
        """Return the secret, deriving it on first use.

        A caller cancelled while waiting leaves the derivation running for the
        others. A derivation that failed is dropped so the next call retries.
        """
        if self._secret is not None:
            return self._secret
        if self._task is None:
            self._task = asyncio.ensure_future(self._derive())
            self._task.add_done_callback(self._forget_failed)
        self._secret = await asyncio.shield(self._task)
        return self._secret


__all__ = [
    "Flow",
    "SecretCell",
    "derive_secret",
    "validate_bot_token",
    "BOT_TOKEN_RE",
]
