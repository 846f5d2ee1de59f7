from pathlib import Path

import pytest
from pydantic import ValidationError

from telegram_webapp_auth.config import ENV_MAP, BotConfig, load_config
from telegram_webapp_auth.validators import TelegramAuth

BOT_TOKEN = "123456:ABC-DEF1234ghIkl-zyx57W2v1u123ew11"


def write_config(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [*ENV_MAP, "CONFIG_PATH"]:
        monkeypatch.delenv(name, raising=False)


def test_missing_bot_section(tmp_path):
    write_config(tmp_path / "config.ini", "[Web]\ninit_data_scheme = tma\n")
    with pytest.raises(ValidationError, match="bot"):
        load_config(str(tmp_path / "config.ini"))


def test_valid_config(tmp_path):
    write_config(
        tmp_path / "config.ini",
        f"""
[Bot]
bot_token = {BOT_TOKEN}
hash_expiration = 3600
""",
    )
    conf = load_config(str(tmp_path / "config.ini"))
    assert conf.bot.bot_token.get_secret_value() == BOT_TOKEN
    assert conf.bot.hash_expiration == 3600
    assert conf.bot.check_user is False
    assert conf.web.init_data_header == "Authorization"
    assert conf.web.init_data_scheme == "tma"


def test_config_path_env(tmp_path, monkeypatch):
    write_config(tmp_path / "custom.ini", f"[Bot]\nbot_token = {BOT_TOKEN}\n")
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "custom.ini"))
    assert load_config().bot.hash_expiration is None


def test_env_overrides_ini(tmp_path, monkeypatch):
    write_config(
        tmp_path / "config.ini",
        f"""
[Bot]
bot_token = {BOT_TOKEN}
hash_expiration = 3600
[Web]
init_data_header = X-Init-Data
""",
    )
    monkeypatch.setenv("BOT_HASH_EXPIRATION", "60")
    monkeypatch.setenv("BOT_CHECK_USER", "true")
    monkeypatch.setenv("WEB_INIT_DATA_SCHEME", "twa")
    conf = load_config(str(tmp_path / "config.ini"))
    assert conf.bot.hash_expiration == 60
    assert conf.bot.check_user is True
    assert conf.web.init_data_header == "X-Init-Data"
    assert conf.web.init_data_scheme == "twa"


def test_env_only(tmp_path, monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", BOT_TOKEN)
    conf = load_config(str(tmp_path / "missing.ini"))
    assert conf.bot.bot_token.get_secret_value() == BOT_TOKEN


@pytest.mark.parametrize("value, expected", [("0", None), ("", None), ("15", 15)])
def test_hash_expiration_normalized(value, expected):
    assert BotConfig(bot_token=BOT_TOKEN, hash_expiration=value).hash_expiration == expected


def test_negative_expiration_rejected():
    with pytest.raises(ValidationError, match="non-negative"):
        BotConfig(bot_token=BOT_TOKEN, hash_expiration=-5)


def test_invalid_token_rejected():
    with pytest.raises(ValidationError, match="Invalid bot token"):
        BotConfig(bot_token="not a token")


def test_token_is_not_printed():
    conf = BotConfig(bot_token=BOT_TOKEN)
    assert BOT_TOKEN not in repr(conf)


def test_telegram_auth_from_config(tmp_path):
    write_config(
        tmp_path / "config.ini",
        f"[Bot]\nbot_token = {BOT_TOKEN}\nhash_expiration = 120\ncheck_user = yes\n",
    )
    auth = TelegramAuth.from_config(load_config(str(tmp_path / "config.ini")))
    assert auth.init_data.hash_expiration == 120
    assert auth.oauth.check_user is True
