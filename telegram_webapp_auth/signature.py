"""Compute and compare HMAC-SHA256 signatures of a data-check-string."""

from __future__ import annotations

import hashlib
import hmac
import re

from telegram_webapp_auth.errors import EmptyHashError, InvalidHashFormatError

HASH_LENGTH = 64
_HEX_RE = re.compile(r"^[0-9a-f]+$")


def check_hash_format(supplied_hash: str) -> None:
    """Reject hashes that cannot possibly be a SHA-256 hex digest.

    Raises:
        EmptyHashError: ``supplied_hash`` is empty.
        InvalidHashFormatError: It is not lowercase hex or not 64 characters.

    """
    if not supplied_hash:
        raise EmptyHashError("hash is empty")
    if not _HEX_RE.match(supplied_hash):
        raise InvalidHashFormatError(
            "Invalid hash format: hash contains non-hex characters"
        )
    if len(supplied_hash) != HASH_LENGTH:
        raise InvalidHashFormatError(
            f"Invalid hash format: hash length is {len(supplied_hash)}, "
            f"expected {HASH_LENGTH}"
        )


def compute_signature(secret: bytes, data_check_string: str) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``data_check_string``."""
    return hmac.new(secret, data_check_string.encode(), hashlib.sha256).hexdigest()


def verify(data_check_string: str, expected_hash: str, secret: bytes) -> bool:
    """Return ``True`` if ``expected_hash`` signs ``data_check_string``.

    The hash format is checked first, so malformed input never reaches the
    HMAC computation.
    """
    check_hash_format(expected_hash)
    computed = compute_signature(secret, data_check_string)
    return hmac.compare_digest(computed, expected_hash)


__all__ = ["HASH_LENGTH", "check_hash_format", "compute_signature", "verify"]
