from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from telegram_webapp_auth.config import BotConfig, Config
from telegram_webapp_auth.web.app import create_app

BOT_TOKEN = "123456:ABC-DEF1234ghIkl-zyx57W2v1u123ew11"


@pytest.fixture()
def config() -> Config:
    return Config(bot=BotConfig(bot_token=SecretStr(BOT_TOKEN), hash_expiration=86400))


@pytest.fixture()
def client(config: Config) -> TestClient:
    with TestClient(create_app(config)) as test_client:
        yield test_client
