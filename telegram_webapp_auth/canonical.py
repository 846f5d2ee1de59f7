"""Build the ``data-check-string`` Telegram signs.

Both the Mini App ``init_data`` query string and the Login Widget payload are
reduced to the same canonical form: every ``key=value`` pair except the
designated ``hash`` pair, sorted by the full rendered line and joined with
``\\n``. Values are used verbatim, ``user`` stays an opaque JSON string.

Reference: https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, NamedTuple
from urllib.parse import unquote

from telegram_webapp_auth.errors import (
    EmptyPayloadError,
    MalformedPairError,
    MissingHashError,
)

HASH_FIELD = "hash"
AUTH_DATE_FIELD = "auth_date"
USER_FIELD = "user"


class Pair(NamedTuple):
    """A single ``key=value`` entry of a payload."""

    key: str
    value: str

    def render(self) -> str:
        return f"{self.key}={self.value}"


@dataclass(frozen=True)
class CanonicalPayload:
    """Result of canonicalization.

    Attributes:
        data_check_string: Newline-joined sorted lines ready for signing.
        hash: The supplied signature taken from the designated ``hash`` pair.
        auth_date: Parsed ``auth_date`` in Unix seconds, ``None`` if absent.
        pairs: Remaining pairs in input order, ``hash`` excluded.

    """

    data_check_string: str
    hash: str
    auth_date: int | None
    pairs: tuple[Pair, ...]

    def get(self, key: str) -> str | None:
        """Return the value of the first pair named ``key``."""
        for pair in self.pairs:
            if pair.key == key:
                return pair.value
        return None


def parse_query(raw: str) -> list[Pair]:
    """Split a raw ``init_data`` query string into pairs.

    The whole string is percent-decoded once before splitting, because the
    Telegram client signs the decoded form. Each segment is cut on its first
    ``=`` only, so values such as base64 query ids may contain ``=``.

    Raises:
        EmptyPayloadError: ``raw`` is empty.
        MalformedPairError: A segment has no ``=`` or an empty key.

    """
    if not raw:
        raise EmptyPayloadError("init_data is empty")

    decoded = unquote(raw)
    pairs: list[Pair] = []
    for segment in decoded.split("&"):
        key, sep, value = segment.partition("=")
        if not sep or not key:
            raise MalformedPairError(f"malformed query pair: {segment!r}")
        pairs.append(Pair(key, value))
    return pairs


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def pairs_from_mapping(data: Mapping[str, Any]) -> list[Pair]:
    """Turn a flat Login Widget mapping into pairs.

    ``None`` values are treated as absent fields and skipped.
    """
    if not data:
        raise EmptyPayloadError("payload is empty")

    pairs: list[Pair] = []
    for key, value in data.items():
        if not isinstance(key, str) or not key:
            raise MalformedPairError(f"malformed payload key: {key!r}")
        if value is None:
            continue
        pairs.append(Pair(key, _render_value(value)))
    return pairs


def build_data_check_string(pairs: Iterable[Pair]) -> str:
    """Sort rendered ``key=value`` lines by codepoint order and join them."""
    return "\n".join(sorted(pair.render() for pair in pairs))


def _parse_auth_date(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise MalformedPairError(
            f"auth_date is not a unix timestamp: {value!r}"
        ) from None


def canonicalize(payload: str | Mapping[str, Any] | None) -> CanonicalPayload:
    """Canonicalize ``payload`` and extract its signature.

    Only the first pair whose key is exactly ``hash`` is treated as the
    signature. Any later ``hash`` pair stays in the data-check-string as
    ordinary data.

    Args:
        payload: Raw ``init_data`` query string or a flat mapping.

    Returns:
        CanonicalPayload: The data-check-string, supplied hash and auth date.

    Raises:
        EmptyPayloadError: ``payload`` is ``None`` or empty.
        MalformedPairError: A pair cannot be parsed or the type is unsupported.
        MissingHashError: No ``hash`` pair is present.

    """
    if payload is None:
        raise EmptyPayloadError("init_data is empty")
    if isinstance(payload, str):
        pairs = parse_query(payload)
    elif isinstance(payload, Mapping):
        pairs = pairs_from_mapping(payload)
    else:
        raise MalformedPairError(
            f"unsupported payload type: {type(payload).__name__}"
        )

    signature: str | None = None
    data_pairs: list[Pair] = []
    for pair in pairs:
        if signature is None and pair.key == HASH_FIELD:
            signature = pair.value
            continue
        data_pairs.append(pair)

    if signature is None:
        raise MissingHashError("hash field not found")

    auth_date = None
    for pair in data_pairs:
        if pair.key == AUTH_DATE_FIELD:
            auth_date = _parse_auth_date(pair.value)
            break

    return CanonicalPayload(
        data_check_string=build_data_check_string(data_pairs),
        hash=signature,
        auth_date=auth_date,
        pairs=tuple(data_pairs),
    )


__all__ = [
    "Pair",
    "CanonicalPayload",
    "parse_query",
    "pairs_from_mapping",
    "build_data_check_string",
    "canonicalize",
]
