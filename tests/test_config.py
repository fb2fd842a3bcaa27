import ssl

import pytest

import config
from config import ConfigError, Settings
from database import Database


def test_database_url_prefers_explicit_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///census.db")
    assert Settings().database_url == "sqlite+aiosqlite:///census.db"


def test_database_url_built_from_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("DB_NAME", "census")
    monkeypatch.setenv("DB_USER", "app")
    monkeypatch.setenv("DB_PASSWORD", "p@ss:word")
    url = Settings().database_url
    assert url.startswith("postgresql+asyncpg://app:")
    assert url.endswith("@db.internal:6543/census")
    assert "p%40ss%3Aword" in url


def test_missing_database_settings_raise(monkeypatch):
    for name in ("DATABASE_URL", "DB_HOST", "DB_NAME", "DB_USER"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ConfigError, match="DB_HOST, DB_NAME, DB_USER"):
        Settings().database_url


def test_ca_path_prefers_secret_mount(tmp_path, monkeypatch):
    secret = tmp_path / "secret-ca.pem"
    local = tmp_path / "local-ca.pem"
    secret.write_text("x")
    local.write_text("x")
    monkeypatch.delenv("DB_CA_PATH", raising=False)
    monkeypatch.setattr(config, "SECRET_CA_PATH", str(secret))
    monkeypatch.setattr(config, "LOCAL_CA_PATH", str(local))
    assert Settings().ca_path() == str(secret)

    secret.unlink()
    assert Settings().ca_path() == str(local)

    local.unlink()
    assert Settings().ca_path() is None


def test_explicit_ca_path_wins(tmp_path, monkeypatch):
    explicit = tmp_path / "ca.pem"
    explicit.write_text("x")
    monkeypatch.setenv("DB_CA_PATH", str(explicit))
    assert Settings().ca_path() == str(explicit)


def test_ssl_context_verifies_by_default(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///census.db")
    monkeypatch.setenv("DB_SSL", "true")
    monkeypatch.setattr(Settings, "ca_path", lambda self: None)
    captured = {}

    def fake_init(self, url, ssl_context=None, **engine_options):
        captured["url"] = url
        captured["ssl"] = ssl_context
        captured["options"] = engine_options

    monkeypatch.setattr(Database, "__init__", fake_init)
    Database.from_settings(Settings())
    assert captured["url"] == "sqlite+aiosqlite:///census.db"
    assert captured["ssl"].verify_mode == ssl.CERT_REQUIRED
    assert captured["ssl"].check_hostname
    assert captured["options"]["pool_pre_ping"] is True


def test_startup_fails_without_database_config(monkeypatch):
    from fastapi.testclient import TestClient
    from api import create_app

    for name in ("DATABASE_URL", "DB_HOST", "DB_NAME", "DB_USER"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ConfigError):
        with TestClient(create_app(Settings())):
            pass


def test_pool_options_default_to_sized_pool(monkeypatch):
    monkeypatch.delenv("DB_POOL_SIZE", raising=False)
    options = Settings().pool_options()
    assert options["pool_size"] == 10
    assert options["max_overflow"] == 20
    assert options["pool_timeout"] == 30
    assert options["pool_recycle"] == 1800
    assert options["pool_pre_ping"] is True


def test_pool_size_zero_keeps_driver_pool(monkeypatch):
    monkeypatch.setenv("DB_POOL_SIZE", "0")
    options = Settings().pool_options()
    assert "pool_size" not in options
    assert "max_overflow" not in options
    assert options == {"pool_recycle": 1800, "pool_pre_ping": True}
