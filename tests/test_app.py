import pytest
from fastapi.testclient import TestClient

from timeseal.clock import FrozenClock
from timeseal.codec import HMACCodec
from timeseal.config import Settings
from timeseal.main import create_app


@pytest.fixture
def settings():
    return Settings(secret_key="superdupersecret", max_age=600)


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


def test_healthz(client):
    res = client.get("/healthz")
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "algorithm": "aes-gcm", "max_age": 600}


def test_issue_mints_session_and_token(client, settings):
    res = client.get("/csrf/token")
    assert res.status_code == 200
    token = res.json()["token"]
    assert len(token) == 44
    assert res.headers[settings.csrf_header] == token
    assert settings.session_cookie in res.cookies


def test_issued_token_passes_check_via_headers(client, settings):
    res = client.get("/csrf/token")
    token = res.json()["token"]
    session_id = res.cookies[settings.session_cookie]

    check = client.post(
        "/csrf/check",
        headers={settings.csrf_header: token, settings.session_header: session_id},
    )
    assert check.status_code == 200
    assert check.json() == {"status": "ok"}


def test_issue_reuses_existing_session(client, settings):
    res = client.get("/csrf/token", headers={"Cookie": f"{settings.session_cookie}=abc123"})
    assert settings.session_cookie not in res.cookies
    token = res.json()["token"]
    check = client.post(
        "/csrf/check",
        headers={settings.csrf_header: token, settings.session_header: "abc123"},
    )
    assert check.status_code == 200


def test_check_without_token_is_forbidden(client):
    res = client.post("/csrf/check")
    assert res.status_code == 403
    assert res.content == b""


def test_check_with_expired_token(settings):
    clock = FrozenClock(1_700_000_000)
    codec = HMACCodec(settings.secret_key, max_age=settings.max_age, clock=clock)
    client = TestClient(create_app(settings, codec=codec))

    token = client.get("/csrf/token", headers={"Cookie": "session_token=abc"}).json()["token"]
    assert len(token) == 28
    clock.advance(20 * 60)
    res = client.post("/csrf/check", headers={"X-CSRF-Token": token, "X-Session-ID": "abc"})
    assert res.status_code == 403


def test_issue_uses_session_header(client, settings):
    res = client.get("/csrf/token", headers={settings.session_header: "abc123"})
    assert settings.session_cookie not in res.cookies
    token = res.json()["token"]
    check = client.post(
        "/csrf/check",
        headers={settings.csrf_header: token, settings.session_header: "abc123"},
    )
    assert check.status_code == 200
