"""Exceptions raised while authenticating Telegram payloads."""

from __future__ import annotations


class TelegramAuthError(Exception):
    """Base class for every rejection of a single payload.

    ``kind`` is a stable, machine-friendly name of the failed check. The
    message is meant for humans and says which contract was violated.
    """

    kind = "TelegramAuthError"


class EmptyPayloadError(TelegramAuthError):
    """Raised when the payload is ``None`` or empty."""

    kind = "EmptyPayload"


class MalformedPairError(TelegramAuthError):
    """Raised when a key/value pair cannot be parsed."""

    kind = "MalformedPair"


class MissingHashError(TelegramAuthError):
    """Raised when the payload carries no ``hash`` field."""

    kind = "MissingHash"


class InvalidHashFormatError(TelegramAuthError):
    """Raised when the supplied hash is not 64 lowercase hex characters."""

    kind = "InvalidHashFormat"


class EmptyHashError(InvalidHashFormatError):
    """Raised when the ``hash`` field is present but empty."""

    kind = "EmptyHash"


class HashMismatchError(TelegramAuthError):
    """Raised when the recomputed signature differs from the supplied one."""

    kind = "HashMismatch"


class ExpiredError(TelegramAuthError):
    """Raised when ``auth_date`` is older than the configured window."""

    kind = "Expired"


class InvalidBotTokenError(TelegramAuthError, ValueError):
    """Raised when a bot token is empty or does not look like one."""

    kind = "InvalidBotToken"


class InvalidUserShapeError(TelegramAuthError):
    """Raised when ``user`` data fails the opt-in structural checks."""

    kind = "InvalidUserShape"


__all__ = [
    "TelegramAuthError",
    "EmptyPayloadError",
    "MalformedPairError",
    "MissingHashError",
    "InvalidHashFormatError",
    "EmptyHashError",
    "HashMismatchError",
    "ExpiredError",
    "InvalidBotTokenError",
    "InvalidUserShapeError",
]
