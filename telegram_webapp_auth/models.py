"""Typed views of verified Telegram payloads using Pydantic."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict


class WebAppUser(BaseModel):
    """User object embedded in Mini App ``init_data``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    first_name: str
    is_bot: bool | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    is_premium: bool | None = None
    added_to_attachment_menu: bool | None = None
    allows_write_to_pm: bool | None = None
    photo_url: str | None = None


class WebAppChat(BaseModel):
    """Chat object embedded in Mini App ``init_data``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    type: str
    title: str
    username: str | None = None
    photo_url: str | None = None


class WebAppInitData(BaseModel):
    """Parsed and verified Mini App ``init_data``."""

    model_config = ConfigDict(extra="ignore")

    hash: str
    auth_date: datetime.datetime | None = None
    query_id: str | None = None
    user: WebAppUser | None = None
    receiver: WebAppUser | None = None
    chat: WebAppChat | None = None
    chat_type: str | None = None
    chat_instance: str | None = None
    start_param: str | None = None
    can_send_after: int | None = None
    signature: str | None = None


class OAuthUser(BaseModel):
    """Payload produced by the Telegram Login Widget."""

    model_config = ConfigDict(extra="ignore")

    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    photo_url: str | None = None
    auth_date: int
    hash: str


__all__ = ["WebAppUser", "WebAppChat", "WebAppInitData", "OAuthUser"]
