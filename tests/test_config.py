"""
配置读取测试
"""

import pytest

from app.config import DEFAULT_BASE_URL, ConfigError, Settings


def test_from_env_defaults():
    settings = Settings.from_env({})

    assert settings.api_key is None
    assert settings.campaign_uuid is None
    assert settings.port == 3000
    assert settings.log_level == "INFO"
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.max_pages == 20
    assert settings.request_delay == 0.0
    assert not settings.have_key
    assert not settings.have_campaign


def test_from_env_values():
    settings = Settings.from_env({
        "RAISELY_API_KEY": "secret",
        "CAMPAIGN_UUID": "camp-1",
        "PORT": "8080",
        "LOG_LEVEL": "debug",
        "RAISELY_BASE_URL": "https://proxy.test/v3/",
        "RAISELY_TIMEOUT": "5",
        "RAISELY_MAX_PAGES": "0",
        "RAISELY_REQUEST_DELAY": "0.25",
    })

    assert settings.api_key == "secret"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.base_url == "https://proxy.test/v3"
    assert settings.timeout == 5
    assert settings.max_pages == 1
    assert settings.request_delay == 0.25
    settings.require()


def test_empty_strings_count_as_missing():
    settings = Settings.from_env({"RAISELY_API_KEY": "", "CAMPAIGN_UUID": "camp-1"})

    with pytest.raises(ConfigError, match="Missing RAISELY_API_KEY"):
        settings.require()


def test_invalid_port():
    with pytest.raises(ConfigError, match="PORT"):
        Settings.from_env({"PORT": "eighty"})
