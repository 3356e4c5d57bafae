from memkv.config import Settings
from memkv.sweeper import Sweeper

import app as entrypoint

import pytest

ENV_VARS = [
    "MEMKV_HOST", "MEMKV_PORT", "MEMKV_MAX_AGE", "MEMKV_SWEEP_INTERVAL",
    "MEMKV_PRESERVE_CREATED_AT", "MEMKV_CANONICALIZE_JSON", "MEMKV_LOG_LEVEL",
]

#-------------FIXTURES----------------
@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch

#-------------SETTINGS----------------
def test_defaults(clean_env):
    settings = Settings()
    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.max_age == 86400
    assert settings.sweep_interval == 86400
    assert settings.preserve_created_at is False
    assert settings.canonicalize_json is True
    assert settings.log_level == "INFO"

def test_overrides(clean_env):
    clean_env.setenv("MEMKV_PORT", "9090")
    clean_env.setenv("MEMKV_MAX_AGE", "60")
    clean_env.setenv("MEMKV_SWEEP_INTERVAL", "5")
    clean_env.setenv("MEMKV_PRESERVE_CREATED_AT", "true")
    clean_env.setenv("MEMKV_CANONICALIZE_JSON", "0")
    clean_env.setenv("MEMKV_LOG_LEVEL", "debug")

    settings = Settings()
    assert settings.port == 9090
    assert settings.max_age == 60
    assert settings.sweep_interval == 5
    assert settings.preserve_created_at is True
    assert settings.canonicalize_json is False
    assert settings.log_level == "DEBUG"

#-------------WIRING----------------
def test_build_wires_store_into_app(clean_env):
    clean_env.setenv("MEMKV_PRESERVE_CREATED_AT", "yes")
    app, sweeper = entrypoint.build(Settings())
    assert isinstance(sweeper, Sweeper)
    assert sweeper.is_running is False

    client = app.test_client()
    assert client.get("/set?key=foo&value=bar").status_code == 200
    assert client.get("/get?key=foo").get_json()["value"] == "bar"
    assert sweeper._store.preserve_created_at is True
