"""Settings tests"""

from core.config import Settings, get_settings


def test_pagination_defaults():
    settings = Settings(_env_file=None)

    assert settings.events_default_limit == 50
    assert settings.events_max_limit == 100


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("EVENTS_MAX_LIMIT", "25")
    monkeypatch.setenv("APP_NAME", "convolog-test")

    settings = Settings(_env_file=None)

    assert settings.events_max_limit == 25
    assert settings.app_name == "convolog-test"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
