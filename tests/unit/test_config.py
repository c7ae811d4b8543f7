"""Tests for Settings validation."""

import json

import pytest
from pydantic import ValidationError

from app.core.config import Settings, adapter_scheme


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults() -> None:
    settings = make_settings()
    assert settings.fs_prefix == "fs"
    assert settings.missing_file_status == 404
    assert settings.adapter_name == "default"
    assert settings.proxy_enabled is False
    assert settings.adapter_scheme == "sqlite"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("memory://", "memory"),
        ("sqlite+aiosqlite:///./files.db", "sqlite"),
        ("postgresql+asyncpg://u:p@db/files", "postgresql"),
        ("firestore://auto", "firestore"),
        ("SQLITE+aiosqlite:///x.db", "sqlite"),
    ],
)
def test_adapter_scheme(url: str, expected: str) -> None:
    assert adapter_scheme(url) == expected


def test_unsupported_scheme_rejected() -> None:
    with pytest.raises(ValidationError, match="Unsupported DATABASE_URL scheme"):
        make_settings(database_url="redis://localhost")


def test_firestore_requires_credentials() -> None:
    with pytest.raises(ValidationError, match="FIREBASE_SERVICE_ACCOUNT_KEY"):
        make_settings(database_url="firestore://auto")


def test_firestore_with_key() -> None:
    key = json.dumps({"project_id": "demo"})
    settings = make_settings(database_url="firestore://auto", firebase_service_account_key=key)
    assert settings.firebase_service_account_key.get_secret_value() == key


@pytest.mark.parametrize(("raw", "expected"), [("files", "files"), ("/store/", "store")])
def test_fs_prefix_normalized(raw: str, expected: str) -> None:
    assert make_settings(fs_prefix=raw).fs_prefix == expected


@pytest.mark.parametrize("raw", ["", "/", "a/b", "api", "proxy", "docs"])
def test_fs_prefix_rejected(raw: str) -> None:
    with pytest.raises(ValidationError, match="fs_prefix"):
        make_settings(fs_prefix=raw)


@pytest.mark.parametrize("status", [200, 404, 410])
def test_missing_file_status_allowed(status: int) -> None:
    assert make_settings(missing_file_status=status).missing_file_status == status


def test_missing_file_status_rejected() -> None:
    with pytest.raises(ValidationError, match="missing_file_status"):
        make_settings(missing_file_status=500)


def test_empty_adapter_name_rejected() -> None:
    with pytest.raises(ValidationError, match="adapter_name"):
        make_settings(adapter_name="")


def test_environment_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "memory://")
    monkeypatch.setenv("PROXY_ENABLED", "true")
    monkeypatch.setenv("MISSING_FILE_STATUS", "410")
    settings = make_settings()
    assert settings.adapter_scheme == "memory"
    assert settings.proxy_enabled is True
    assert settings.missing_file_status == 410
