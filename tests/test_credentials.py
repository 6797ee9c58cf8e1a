"""Tests for the credential store."""

import asyncio
import json
import tempfile
from pathlib import Path

import httpx
import pytest

from contentdesk.auth import Credential, CredentialStore
from contentdesk.errors import AuthError, AuthReason


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def test_valid_strictly_before_expiry():
    with tempfile.TemporaryDirectory() as tmpdir:
        clock = Clock(1_000)
        store = CredentialStore(tmpdir, clock=clock)
        store.store("tok", 2_000)

        clock.now = 1_999
        assert store.is_valid()
        clock.now = 2_000
        assert not store.is_valid()
        clock.now = 2_001
        assert not store.is_valid()


def test_missing_credential():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CredentialStore(tmpdir)
        assert store.current() is None
        assert not store.is_valid()
        with pytest.raises(AuthError) as exc:
            store.require()
        assert exc.value.reason is AuthReason.MISSING


def test_expired_credential_requires_login():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CredentialStore(tmpdir, clock=Clock(5_000))
        store.store("tok", 4_000)
        with pytest.raises(AuthError) as exc:
            store.require()
        assert exc.value.reason is AuthReason.EXPIRED


def test_store_persists_across_instances():
    with tempfile.TemporaryDirectory() as tmpdir:
        CredentialStore(tmpdir).store("abc", 4_102_444_800)
        other = CredentialStore(tmpdir)
        assert other.current() == Credential("abc", 4_102_444_800)
        data = json.loads((Path(tmpdir) / "credentials.json").read_text())
        assert data == {"apiKey": "abc", "expiresAt": 4_102_444_800}


def test_corrupt_file_reads_as_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "credentials.json").write_text("{not json")
        assert CredentialStore(tmpdir).current() is None


def test_clear_and_attach():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = CredentialStore(tmpdir)
        assert "Authorization" not in store.attach({})
        store.store("abc", 4_102_444_800)
        headers = {"X-Other": "1"}
        attached = store.attach(headers)
        assert attached["Authorization"] == "Bearer abc"
        assert "Authorization" not in headers
        store.clear()
        assert store.current() is None


def test_login_success():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        seen["path"] = request.url.path
        return httpx.Response(200, json={"apiKey": "k-123", "expiresAt": 4_102_444_800})

    with tempfile.TemporaryDirectory() as tmpdir:
        store = CredentialStore(tmpdir, api_origin="https://api.test",
                                transport=httpx.MockTransport(handler))
        credential = asyncio.run(store.login("ops@example.com", "hunter2"))
        assert credential.token == "k-123"
        assert store.is_valid()
        assert seen["path"] == "/admin/login"
        assert seen["body"] == {"email": "ops@example.com", "password": "hunter2"}


def test_login_rejected_uses_server_message():
    def handler(request):
        return httpx.Response(401, json={"message": "Bad password"})

    with tempfile.TemporaryDirectory() as tmpdir:
        store = CredentialStore(tmpdir, transport=httpx.MockTransport(handler))
        with pytest.raises(AuthError) as exc:
            asyncio.run(store.login("ops@example.com", "nope"))
        assert exc.value.reason is AuthReason.INVALID_CREDENTIALS
        assert exc.value.message == "Bad password"
        assert store.current() is None


def test_login_rejected_without_message():
    def handler(request):
        return httpx.Response(500)

    with tempfile.TemporaryDirectory() as tmpdir:
        store = CredentialStore(tmpdir, transport=httpx.MockTransport(handler))
        with pytest.raises(AuthError) as exc:
            asyncio.run(store.login("ops@example.com", "x"))
        assert "500" in exc.value.message


def test_login_network_failure():
    def handler(request):
        raise httpx.ConnectError("unreachable")

    with tempfile.TemporaryDirectory() as tmpdir:
        store = CredentialStore(tmpdir, transport=httpx.MockTransport(handler))
        with pytest.raises(AuthError) as exc:
            asyncio.run(store.login("ops@example.com", "x"))
        assert exc.value.reason is AuthReason.NETWORK
