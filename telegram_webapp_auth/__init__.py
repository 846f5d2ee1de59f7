"""Authenticate Telegram Mini App ``init_data`` and Login Widget payloads."""

from telegram_webapp_auth.canonical import CanonicalPayload, Pair, canonicalize
from telegram_webapp_auth.errors import (
    EmptyHashError,
    EmptyPayloadError,
    ExpiredError,
    HashMismatchError,
    InvalidBotTokenError,
    InvalidHashFormatError,
    InvalidUserShapeError,
    MalformedPairError,
    MissingHashError,
    TelegramAuthError,
)
from telegram_webapp_auth.models import (
    OAuthUser,
    WebAppChat,
    WebAppInitData,
    WebAppUser,
)
from telegram_webapp_auth.secret import Flow, derive_secret
from telegram_webapp_auth.validators import (
    InitDataValidator,
    OAuthValidator,
    TelegramAuth,
)

__all__ = [
    "CanonicalPayload",
    "Pair",
    "canonicalize",
    "Flow",
    "derive_secret",
    "InitDataValidator",
    "OAuthValidator",
    "TelegramAuth",
    "OAuthUser",
    "WebAppChat",
    "WebAppInitData",
    "WebAppUser",
    "TelegramAuthError",
    "EmptyPayloadError",
    "MalformedPairError",
    "MissingHashError",
    "EmptyHashError",
    "InvalidHashFormatError",
    "HashMismatchError",
    "ExpiredError",
    "InvalidBotTokenError",
    "InvalidUserShapeError",
]
