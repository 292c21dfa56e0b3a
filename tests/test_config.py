import pytest

from config import get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_log_level_is_upper_cased(monkeypatch, fresh_settings):
    monkeypatch.setenv("LOG_LEVEL", "info")
    assert fresh_settings().log_level == "INFO"


def test_defaults(monkeypatch, fresh_settings):
    for name in ("LOG_LEVEL", "AUTH_SECRET", "TOKEN_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    settings = fresh_settings()
    assert settings.log_level == "INFO"
    assert settings.auth_secret == "change-me"
    assert settings.token_ttl_seconds == 3600
