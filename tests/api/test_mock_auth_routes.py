"""Tests for the auth pages with the stand-in auth backend switched on."""

import pytest

from config import Settings
from web.mock_auth import MOCK_EMAIL, MOCK_PASSWORD, MOCK_RESET_TOKEN, MOCK_TOKEN


@pytest.fixture
def test_settings():
    return Settings(use_mock_auth=True, mock_auth_latency=0)


def test_login(app_client, backend):
    response = app_client.post(
        "/vi/login",
        json={"username_or_email_or_phone": MOCK_EMAIL, "password": MOCK_PASSWORD},
    )

    body = response.json()
    assert body["data"]["authenticated"] is True
    assert body["data"]["user"]["full_name"] == "Người Dùng"
    assert body["redirect"] == "/vi"
    assert response.headers.get_list("set-cookie")[0].startswith(f"access_token={MOCK_TOKEN};")
    assert backend.requests == []


def test_login_rejected(app_client):
    response = app_client.post(
        "/en/login",
        json={"username_or_email_or_phone": MOCK_EMAIL, "password": "wrong"},
    )

    assert response.json()["data"]["authenticated"] is False
    assert response.json()["toasts"] == [{"kind": "error", "message": "Wrong login details!"}]


def test_session(app_client):
    app_client.cookies.set("access_token", MOCK_TOKEN)

    response = app_client.get("/vi/session")

    assert response.json()["data"]["user"]["email"] == MOCK_EMAIL


def test_foreign_token_is_cleared(app_client):
    app_client.cookies.set("access_token", "jwt-from-real-backend")
    app_client.cookies.set("refresh_token", "ref")

    response = app_client.get("/vi/session")

    assert response.json()["data"]["authenticated"] is False
    assert len(response.headers.get_list("set-cookie")) == 2


def test_forgot_password_unknown_email(app_client):
    response = app_client.post("/vi/forgot-password", json={"email": "someone@example.com"})

    assert response.json()["data"]["ok"] is False
    assert response.json()["toasts"][0]["message"] == "Email không tồn tại trong hệ thống!"


def test_reset_password(app_client):
    response = app_client.post(
        "/en/reset-password",
        json={
            "token": MOCK_RESET_TOKEN,
            "email": MOCK_EMAIL,
            "password": "newpass",
            "confirm_password": "newpass",
        },
    )

    assert response.json()["redirect"] == "/en/login"
