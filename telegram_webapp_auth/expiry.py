"""Freshness checks for ``auth_date``."""

from __future__ import annotations

import time

from telegram_webapp_auth.errors import ExpiredError


def now() -> int:
    """Return the current Unix time in whole seconds."""
    return int(time.time())


def check_expiry(
    auth_date: int | None, expiry_seconds: int | None, now: float
) -> None:
    """Raise :class:`ExpiredError` if ``auth_date`` is too old.

    The check is disabled when ``expiry_seconds`` is ``None`` or ``0`` or when
    the payload has no ``auth_date``. A payload exactly ``expiry_seconds`` old
    is already expired.
    """
    if not expiry_seconds or auth_date is None:
        return
    age = int(now) - auth_date
    if age >= expiry_seconds:
        raise ExpiredError(
            f"Data has expired: auth_date is {age}s old, limit is {expiry_seconds}s"
        )


__all__ = ["check_expiry", "now"]
