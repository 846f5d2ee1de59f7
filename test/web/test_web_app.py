import time

import pytest
from fastapi.testclient import TestClient

from telegram_webapp_auth.config import BotConfig, Config, WebConfig
from telegram_webapp_auth.testing import sign_init_data, sign_oauth_user
from telegram_webapp_auth.validators import TelegramAuth
from telegram_webapp_auth.web.app import (
    MissingInitDataError,
    create_app,
    extract_init_data,
)

BOT_TOKEN = "123456:ABC-DEF1234ghIkl-zyx57W2v1u123ew11"
USER = {"id": 42, "first_name": "Ann", "username": "ann"}


def login_payload(user_id: int = 42, auth_date: int | None = None) -> dict:
    auth_date = int(time.time()) if auth_date is None else auth_date
    return sign_oauth_user(
        BOT_TOKEN, {"id": user_id, "first_name": "Ann", "auth_date": auth_date}
    )


@pytest.mark.parametrize(
    "method, payload_kwarg",
    [
        ("POST", "json"),
        ("GET", "params"),
    ],
)
def test_login_accepts_signed_payload(client: TestClient, method, payload_kwarg):
    resp = client.request(method, "/auth", **{payload_kwarg: login_payload()})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"]["id"] == 42
    assert "hash" not in body["user"]


def test_login_rejects_tampered_payload(client: TestClient):
    payload = login_payload()
    payload["id"] = 7
    resp = client.post("/auth", json=payload)
    assert resp.status_code == 401
    assert resp.json()["kind"] == "HashMismatch"


def test_login_rejects_stale_payload(client: TestClient):
    payload = login_payload(auth_date=int(time.time()) - 90000)
    resp = client.post("/auth", json=payload)
    assert resp.status_code == 401
    assert resp.json()["kind"] == "Expired"


def test_login_get_without_data(client: TestClient):
    resp = client.get("/auth")
    assert resp.status_code == 401
    assert resp.json()["kind"] == "EmptyPayload"


def test_login_post_invalid_json(client: TestClient):
    resp = client.post(
        "/auth", content=b"not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400


def test_webapp_me(client: TestClient):
    init_data = sign_init_data(
        BOT_TOKEN, auth_date=int(time.time()), user=USER, query_id="AAF1"
    )
    resp = client.get("/webapp/me", headers={"Authorization": f"tma {init_data}"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["id"] == 42
    assert body["query_id"] == "AAF1"


def test_webapp_me_requires_header(client: TestClient):
    resp = client.get("/webapp/me")
    assert resp.status_code == 401
    assert resp.json()["kind"] == "MissingInitData"


def test_webapp_me_rejects_bad_signature(client: TestClient):
    resp = client.get(
        "/webapp/me", headers={"Authorization": "tma query_id=x&hash=" + "0" * 64}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Hash verification failed"


def test_custom_header_and_injected_auth():
    config = Config(
        bot=BotConfig(bot_token=BOT_TOKEN),
        web=WebConfig(init_data_header="X-Init-Data", init_data_scheme="twa"),
    )
    app = create_app(config, auth=TelegramAuth(BOT_TOKEN, check_user=True))
    init_data = sign_init_data(BOT_TOKEN, auth_date=1, query_id="q")
    with TestClient(app) as client:
        resp = client.get("/webapp/me", headers={"X-Init-Data": f"twa {init_data}"})
    assert resp.status_code == 401
    assert resp.json()["kind"] == "InvalidUserShape"


@pytest.mark.parametrize(
    "header", [None, "", "tma", "tma   ", "Bearer abc", "abc"]
)
def test_extract_init_data_rejects(header):
    with pytest.raises(MissingInitDataError):
        extract_init_data(header, "tma")


def test_extract_init_data():
    assert extract_init_data("TMA a=1&hash=x", "tma") == "a=1&hash=x"
