"""Validators for Mini App ``init_data`` and Login Widget payloads.

Both validators run the same pipeline: canonicalize the payload, check the
hash format, derive the per-bot secret once, compare signatures, then check
freshness. ``validate`` raises the first failure; ``is_valid`` collapses every
failure into ``False``.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Generic, Mapping, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from telegram_webapp_auth.canonical import (
    USER_FIELD,
    CanonicalPayload,
    canonicalize,
)
from telegram_webapp_auth.errors import (
    HashMismatchError,
    InvalidUserShapeError,
    TelegramAuthError,
)
from telegram_webapp_auth.expiry import check_expiry, now
from telegram_webapp_auth.models import OAuthUser, WebAppInitData, WebAppUser
from telegram_webapp_auth.secret import Flow, SecretCell
from telegram_webapp_auth.signature import check_hash_format, verify

if TYPE_CHECKING:
    from telegram_webapp_auth.config import Config

ModelT = TypeVar("ModelT", bound=BaseModel)

# Fields of ``init_data`` carrying JSON-encoded objects.
_JSON_FIELDS = ("user", "receiver", "chat")


class _Validator(ABC, Generic[ModelT]):
    flow: Flow

    def __init__(
        self,
        bot_token: str,
        hash_expiration: int | None = None,
        *,
        clock: Callable[[], float] = now,
        check_user: bool = False,
    ) -> None:
        if hash_expiration is not None and hash_expiration < 0:
            raise ValueError("hash_expiration must be non-negative")
        self._secret = SecretCell(bot_token, self.flow)
        self.hash_expiration = hash_expiration or None
        self.check_user = check_user
        self._clock = clock

    def _normalize(self, payload: Any) -> Any:
        return payload

    async def _verify(self, payload: Any) -> CanonicalPayload:
        canonical = canonicalize(self._normalize(payload))
        # No HMAC runs before the hash format is checked.
        check_hash_format(canonical.hash)
        secret = await self._secret.get()
        if not verify(canonical.data_check_string, canonical.hash, secret):
            raise HashMismatchError("Hash verification failed")
        check_expiry(canonical.auth_date, self.hash_expiration, self._clock())
        if self.check_user:
            self._check_user(canonical)
        return canonical

    @abstractmethod
    def _check_user(self, canonical: CanonicalPayload) -> None:
        """Raise :class:`InvalidUserShapeError` if the user part is malformed."""

    @abstractmethod
    def _build_model(self, canonical: CanonicalPayload) -> ModelT:
        """Return the verified payload as the flow's model."""

    async def validate(self, payload: Any) -> None:
        """Validate ``payload`` and raise :class:`TelegramAuthError` if invalid."""
        try:
            await self._verify(payload)
        except TelegramAuthError as exc:
            logger.warning(f"Rejected {self.flow.value} payload: {exc.kind}: {exc}")
            raise
        logger.debug(f"Accepted {self.flow.value} payload")

    async def is_valid(self, payload: Any) -> bool:
        """Return whether ``payload`` is authentic and fresh. Never raises."""
        try:
            await self._verify(payload)
        except TelegramAuthError as exc:
            logger.debug(f"{self.flow.value} payload is invalid: {exc.kind}")
            return False
        except Exception as exc:  # noqa: BLE001
            logger.debug(f"{self.flow.value} payload is invalid: {exc!r}")
            return False
        return True

    async def parse(self, payload: Any) -> ModelT:
        """Validate ``payload`` and return it as a typed model.

        Raises:
            TelegramAuthError: Validation failed.
            InvalidUserShapeError: The verified payload does not fit the model.

        """
        canonical = await self._verify(payload)
        return self._build_model(canonical)


def _load_json_object(name: str, raw: str) -> dict[str, Any]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidUserShapeError(f"{name} is not valid JSON: {exc.msg}") from exc
    if not isinstance(value, dict):
        raise InvalidUserShapeError(f"{name} must be a JSON object")
    return value


class InitDataValidator(_Validator[WebAppInitData]):
    """Validate ``init_data`` strings sent by Telegram Mini Apps.

    Example:
        >>> validator = InitDataValidator(bot_token, hash_expiration=3600)
        >>> await validator.validate(init_data)

    """

    flow = Flow.WEB_APP

    def _check_user(self, canonical: CanonicalPayload) -> None:
        raw_user = canonical.get(USER_FIELD)
        if raw_user is None:
            raise InvalidUserShapeError("user field is missing")
        try:
            WebAppUser.model_validate(_load_json_object(USER_FIELD, raw_user))
        except ValidationError as exc:
            raise InvalidUserShapeError(f"user has invalid shape: {exc}") from exc

    def _build_model(self, canonical: CanonicalPayload) -> WebAppInitData:
        data: dict[str, Any] = {"hash": canonical.hash}
        for key, value in canonical.pairs:
            if key in data:
                continue
            data[key] = (
                _load_json_object(key, value) if key in _JSON_FIELDS else value
            )
        if canonical.auth_date is not None:
            data["auth_date"] = canonical.auth_date
        try:
            return WebAppInitData.model_validate(data)
        except ValidationError as exc:
            raise InvalidUserShapeError(f"init_data has invalid shape: {exc}") from exc


class OAuthValidator(_Validator[OAuthUser]):
    """Validate payloads produced by the Telegram Login Widget."""

    flow = Flow.OAUTH

    def _normalize(self, payload: Any) -> Any:
        if isinstance(payload, BaseModel):
            return payload.model_dump(exclude_none=True)
        return payload

    def _as_mapping(self, canonical: CanonicalPayload) -> Mapping[str, Any]:
        data: dict[str, Any] = {"hash": canonical.hash}
        for key, value in canonical.pairs:
            data.setdefault(key, value)
        return data

    def _check_user(self, canonical: CanonicalPayload) -> None:
        self._build_model(canonical)

    def _build_model(self, canonical: CanonicalPayload) -> OAuthUser:
        try:
            return OAuthUser.model_validate(self._as_mapping(canonical))
        except ValidationError as exc:
            raise InvalidUserShapeError(f"user has invalid shape: {exc}") from exc


class TelegramAuth:
    """Both validators for a single bot.

    Example:
        >>> auth = TelegramAuth("123456:ABC-DEF1234ghIkl-zyx57W2v1u123ew11")
        >>> await auth.init_data.is_valid(init_data)
        >>> await auth.oauth.validate(login_payload)

    """

    def __init__(
        self,
        bot_token: str,
        hash_expiration: int | None = None,
        *,
        clock: Callable[[], float] = now,
        check_user: bool = False,
    ) -> None:
        self.init_data = InitDataValidator(
            bot_token, hash_expiration, clock=clock, check_user=check_user
        )
        self.oauth = OAuthValidator(
            bot_token, hash_expiration, clock=clock, check_user=check_user
        )

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "TelegramAuth":
        """Build validators from a loaded :class:`~telegram_webapp_auth.config.Config`."""
        bot = config.bot
        return cls(
            bot.bot_token.get_secret_value(),
            bot.hash_expiration,
            check_user=bot.check_user,
            **kwargs,
        )


__all__ = ["InitDataValidator", "OAuthValidator", "TelegramAuth"]
