"""Helpers for crafting signed Telegram payloads in tests.

These mirror what Telegram does on its side: they sign data with the bot
token so the result passes :class:`~telegram_webapp_auth.InitDataValidator`
or :class:`~telegram_webapp_auth.OAuthValidator` for the same token.
"""

from __future__ import annotations

import json
import random
import string
import time
from typing import Any, Mapping
from urllib.parse import quote

from telegram_webapp_auth.canonical import (
    Pair,
    build_data_check_string,
    pairs_from_mapping,
)
from telegram_webapp_auth.secret import Flow, derive_secret
from telegram_webapp_auth.signature import compute_signature
from telegram_webapp_auth.utils.tokens import TOKEN_CHARS

# Characters ``encodeURIComponent`` leaves untouched, as the Telegram client does.
_URI_SAFE = "-_.!~*'()"

_FIRST_NAMES = ["John", "Anna", "Ivan", "Maria", "Pedro", "Yuki", "Olga", "Sam"]
_LAST_NAMES = ["Doe", "Smith", "Petrov", "Garcia", "Tanaka", "Novak", "Lee"]
_WORDS = ["tetris", "weather", "quiz", "shop", "notes", "poll", "meme", "todo"]


def random_bot_id() -> int:
    """Return a plausible bot id."""
    return random.randint(10_000_000, 9_999_999_999)


def random_bot_token(bot_id: int | None = None) -> str:
    """Return a random token of the ``<bot_id>:<35 chars>`` shape."""
    bot_id = random_bot_id() if bot_id is None else bot_id
    secret = "".join(random.choice(TOKEN_CHARS) for _ in range(35))
    return f"{bot_id}:{secret}"


def random_bot_username() -> str:
    """Return a bot username in either ``CamelBot`` or ``snake_bot`` form."""
    base = random.choice(_WORDS)
    if random.random() < 0.5:
        return f"{base.capitalize()}Bot"
    return f"{base}_bot"


def _random_user() -> dict[str, Any]:
    first_name = random.choice(_FIRST_NAMES)
    last_name = random.choice(_LAST_NAMES)
    return {
        "id": random.randint(10_000_000, 999_999_999),
        "first_name": first_name,
        "last_name": last_name,
        "username": f"{first_name}{last_name}".lower(),
        "language_code": random.choice(["en", "ru", "es", "de"]),
        "is_premium": random.random() < 0.5,
    }


def sign_init_data(
    bot_token: str,
    *,
    auth_date: int,
    user: Mapping[str, Any] | str | None = None,
    query_id: str | None = None,
    **fields: Any,
) -> str:
    """Return a signed, percent-encoded ``init_data`` query string.

    ``user`` may be a mapping (serialized to compact JSON) or a ready JSON
    string. Extra keyword arguments become additional signed fields.
    """
    data: dict[str, Any] = {"auth_date": auth_date, **fields}
    if query_id is not None:
        data["query_id"] = query_id
    if user is not None:
        data["user"] = user if isinstance(user, str) else dict(user)

    pairs = sorted(pairs_from_mapping(data))
    secret = derive_secret(bot_token, Flow.WEB_APP)
    signature = compute_signature(secret, build_data_check_string(pairs))
    query = "&".join(
        f"{key}={quote(value, safe=_URI_SAFE)}" for key, value in pairs
    )
    return f"{query}&hash={signature}"


def sign_oauth_user(bot_token: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of the Login Widget ``data`` with a valid ``hash``."""
    payload = {k: v for k, v in data.items() if k != "hash"}
    pairs: list[Pair] = pairs_from_mapping(payload)
    secret = derive_secret(bot_token, Flow.OAUTH)
    payload["hash"] = compute_signature(secret, build_data_check_string(pairs))
    return payload


def random_init_data(
    bot_token: str | None = None, *, auth_date: int | None = None
) -> str:
    """Return signed ``init_data`` with a random user and query id."""
    bot_token = bot_token or random_bot_token()
    query_id = "AAF" + "".join(
        random.choice(string.ascii_letters + string.digits) for _ in range(20)
    )
    return sign_init_data(
        bot_token,
        auth_date=int(time.time()) if auth_date is None else auth_date,
        user=json.dumps(_random_user(), separators=(",", ":")),
        query_id=query_id,
    )


def random_oauth_user(
    bot_token: str | None = None, *, auth_date: int | None = None
) -> dict[str, Any]:
    """Return a signed Login Widget payload for a random user."""
    bot_token = bot_token or random_bot_token()
    user = _random_user()
    data = {
        "id": user["id"],
        "first_name": user["first_name"],
        "last_name": user["last_name"],
        "username": user["username"],
        "photo_url": f"https://t.me/i/userpic/320/{user['username']}.jpg",
        "auth_date": int(time.time()) if auth_date is None else auth_date,
    }
    return sign_oauth_user(bot_token, data)


__all__ = [
    "random_bot_id",
    "random_bot_token",
    "random_bot_username",
    "random_init_data",
    "random_oauth_user",
    "sign_init_data",
    "sign_oauth_user",
]
