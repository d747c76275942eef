import pytest

from borewell.core import settings as settings_module
from borewell.core.settings import Settings, get_settings


@pytest.fixture
def fresh_settings(monkeypatch):
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_no_settings_instance_built_at_import():
    assert not hasattr(settings_module, "settings")


def test_get_settings_is_cached(fresh_settings):
    assert get_settings() is get_settings()


def test_environment_overrides(fresh_settings):
    fresh_settings.setenv("ENVIRONMENT", "development")
    s = get_settings()
    assert s.log_level == "DEBUG"
    assert s.log_json is False

    get_settings.cache_clear()
    fresh_settings.setenv("ENVIRONMENT", "production")
    assert get_settings().log_level == "WARNING"


def test_env_vars_feed_defaults(monkeypatch):
    monkeypatch.setenv("DEFAULT_BATA", "2500")
    monkeypatch.setenv("INVOICE_NUMBER_PREFIX", "BW")

    s = Settings()

    assert s.default_bata == 2500
    assert s.invoice_number_prefix == "BW"
    assert s.rates_file is None
