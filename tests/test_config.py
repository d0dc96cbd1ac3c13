"""Tests for configuration loading."""

from pathlib import Path

import httpx
import pytest

from tictail_client.core.config import Config
from tictail_client.core.exceptions import ConfigurationError


def test_defaults():
    config = Config()

    assert config.auth_url == "https://tictail.com/oauth/"
    assert config.api_url == "https://api.tictail.com"
    assert config.connect_timeout == 30.0
    assert config.request_timeout == 30.0
    assert config.max_redirects == 3
    assert config.verify_ssl is True
    assert config.missing_expiry == "expired"


def test_urls_are_normalized():
    config = Config(auth_url="https://auth.test/oauth", api_url="https://api.test/")

    assert config.auth_url == "https://auth.test/oauth/"
    assert config.api_url == "https://api.test"


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TICTAIL_CLIENT_ID", "env-id")
    monkeypatch.setenv("TICTAIL_CLIENT_SECRET", "env-secret")
    monkeypatch.setenv("TICTAIL_REQUEST_TIMEOUT", "12.5")
    monkeypatch.setenv("TICTAIL_VERIFY_SSL", "false")
    monkeypatch.setenv("TICTAIL_MISSING_EXPIRY", "NEVER")

    config = Config.from_env()

    assert config.client_id == "env-id"
    assert config.client_secret == "env-secret"
    assert config.request_timeout == 12.5
    assert config.verify_ssl is False
    assert config.missing_expiry == "never"


def test_from_env_reads_dotenv_file(monkeypatch, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("TICTAIL_CLIENT_ID=dotenv-id\n")

    config = Config.from_env(env_file)

    assert config.client_id == "dotenv-id"


@pytest.mark.parametrize("kwargs", [
    {"missing_expiry": "sometimes"},
    {"connect_timeout": "soon"},
    {"request_timeout": 0},
    {"max_redirects": -1},
    {"verify_ssl": "maybe"},
])
def test_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        Config(**kwargs)


def test_from_file_merges_profile(monkeypatch, tmp_path):
    config_file = tmp_path / "tictail.yml"
    config_file.write_text(
        "defaults:\n"
        "  client_id: default-id\n"
        "  request_timeout: 10\n"
        "profiles:\n"
        "  staging:\n"
        "    api_url: https://api.staging.test\n"
        "    client_secret: ${STAGING_SECRET}\n"
    )
    monkeypatch.setenv("STAGING_SECRET", "from-env")

    config = Config.from_file(config_file, "staging")

    assert config.client_id == "default-id"
    assert config.client_secret == "from-env"
    assert config.api_url == "https://api.staging.test"
    assert config.request_timeout == 10.0
    assert config.profile == "staging"


def test_environment_wins_over_file(monkeypatch, tmp_path):
    config_file = tmp_path / "tictail.yml"
    config_file.write_text("defaults:\n  client_id: file-id\n")
    monkeypatch.setenv("TICTAIL_CLIENT_ID", "env-id")

    assert Config.from_file(config_file).client_id == "env-id"


def test_from_file_errors(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        Config.from_file(tmp_path / "missing.yml")

    bad = tmp_path / "bad.yml"
    bad.write_text("defaults: [unclosed\n")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        Config.from_file(bad)

    empty = tmp_path / "empty.yml"
    empty.write_text("")
    with pytest.raises(ConfigurationError, match="Profile not found"):
        Config.from_file(empty, "prod")


def test_validate_and_to_dict_mask_secrets():
    config = Config(client_secret="s", access_token="t", verify_ssl=False)

    warnings = config.validate()
    data = config.to_dict()

    assert any("client id" in w for w in warnings)
    assert any("TLS" in w for w in warnings)
    assert data["client_secret"] == "***"
    assert data["access_token"] == "***"


def test_transport_settings():
    config = Config(connect_timeout=5, request_timeout=20)

    timeout = config.get_timeout()

    assert isinstance(timeout, httpx.Timeout)
    assert timeout.connect == 5.0
    assert timeout.read == 20.0
    assert config.get_headers()["Accept"] == "application/json"


@pytest.mark.parametrize("field_name", ["auth_url", "api_url"])
def test_null_url_in_profile_is_configuration_error(tmp_path, field_name):
    config_file = tmp_path / "tictail.yml"
    config_file.write_text(f"defaults:\n  {field_name}: null\n")

    with pytest.raises(ConfigurationError) as exc_info:
        Config.from_file(config_file)

    assert exc_info.value.details == {"field": field_name}


def test_non_string_url_is_configuration_error():
    with pytest.raises(ConfigurationError):
        Config(api_url=8080)
