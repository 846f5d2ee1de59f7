"""Token alphabet and random secret generation."""

from __future__ import annotations

import secrets

# Symbols allowed in a bot token secret and in webhook secret tokens.
TOKEN_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"


def create_secret(length: int = 256) -> str:
    """Return a random string usable as ``X-Telegram-Bot-Api-Secret-Token``.

    Telegram accepts 1-256 characters from :data:`TOKEN_CHARS`.
    """
    if not 1 <= length <= 256:
        raise ValueError("length must be between 1 and 256")
    return "".join(secrets.choice(TOKEN_CHARS) for _ in range(length))


__all__ = ["TOKEN_CHARS", "create_secret"]
