import json

import pytest

from ocmutil.client import OCM_CONFIG_ERROR, create_connection, get_ocm_configuration
from ocmutil.common.config import INTEGRATION_URL, PRODUCTION_URL, STAGING_URL, get_current_env
from ocmutil.credentials import OCMConfig
from ocmutil.errors import ConfigurationError
from ocmutil.transport.connection import OCMConnection


@pytest.fixture(autouse=True)
def clear_ocm_env(monkeypatch):
    for name in ("OCM_TOKEN", "OCM_URL", "OCM_REFRESH_TOKEN", "OCM_CONFIG", "OCM_KEYRING"):
        monkeypatch.delenv(name, raising=False)


def test_file_values_used_without_env():
    file_config = OCMConfig(access_token="file-token", refresh_token="file-refresh", url="stage")

    config = get_ocm_configuration(lambda: file_config)

    assert config.access_token == "file-token"
    assert config.refresh_token == "file-refresh"
    assert config.url == "stage"


def test_env_overrides_file_field_by_field(monkeypatch):
    monkeypatch.setenv("OCM_TOKEN", "env-token")
    monkeypatch.setenv("OCM_URL", "integration")

    config = get_ocm_configuration(
        lambda: OCMConfig(access_token="file-token", refresh_token="file-refresh", url="stage", user="me")
    )

    assert config.access_token == "env-token"
    assert config.url == "integration"
    assert config.refresh_token == "file-refresh"
    assert config.user == "me"


def test_file_not_loaded_when_env_complete(monkeypatch):
    monkeypatch.setenv("OCM_TOKEN", "env-token")
    monkeypatch.setenv("OCM_URL", "prod")
    monkeypatch.setenv("OCM_REFRESH_TOKEN", "env-refresh")

    def loader():
        raise AssertionError("config file should not be read")

    config = get_ocm_configuration(loader)

    assert config == OCMConfig(access_token="env-token", refresh_token="env-refresh", url="prod")


def test_loader_failure_is_reported():
    def loader():
        raise ConfigurationError("can't parse config file 'x': boom")

    with pytest.raises(ConfigurationError, match="could not load OCM configuration file"):
        get_ocm_configuration(loader)


def test_create_connection_resolves_alias(monkeypatch):
    monkeypatch.setenv("OCM_TOKEN", "env-token")
    monkeypatch.setenv("OCM_URL", "stg")

    connection = create_connection(lambda: OCMConfig())

    assert isinstance(connection, OCMConnection)
    assert connection.url == STAGING_URL
    assert connection.tokens == ("env-token", None)


def test_create_connection_accepts_full_url():
    connection = create_connection(lambda: OCMConfig(refresh_token="r", url=PRODUCTION_URL))

    assert connection.url == PRODUCTION_URL


def test_create_connection_rejects_unknown_alias():
    with pytest.raises(ConfigurationError) as excinfo:
        create_connection(lambda: OCMConfig(access_token="t", url="https://example.com"))

    assert "Invalid OCM_URL found: https://example.com" in str(excinfo.value)
    assert "'production', 'staging', 'integration'" in str(excinfo.value)


def test_create_connection_without_url_reports_generic_error():
    with pytest.raises(ConfigurationError) as excinfo:
        create_connection(lambda: OCMConfig(access_token="t"))

    assert str(excinfo.value) == OCM_CONFIG_ERROR


def test_create_connection_without_tokens_reports_generic_error():
    with pytest.raises(ConfigurationError) as excinfo:
        create_connection(lambda: OCMConfig(url="production"))

    assert str(excinfo.value) == OCM_CONFIG_ERROR


def test_create_connection_wraps_config_load_errors():
    def loader():
        raise ConfigurationError("can't read config file")

    with pytest.raises(ConfigurationError) as excinfo:
        create_connection(loader)

    assert str(excinfo.value) == OCM_CONFIG_ERROR


@pytest.mark.parametrize(
    ("alias", "expected"),
    [
        ("production", "production"),
        ("staging", "stage"),
        ("integration", "integration"),
    ],
)
def test_get_current_env(alias, expected):
    connection = create_connection(lambda: OCMConfig(access_token="t", url=alias))

    assert get_current_env(connection) == expected


def test_create_connection_reads_config_file(monkeypatch, tmp_path):
    cfg_file = tmp_path / "ocm.json"
    cfg_file.write_text(
        json.dumps({"access_token": "file-token", "refresh_token": "file-refresh", "url": "integration"}),
        encoding="utf-8",
    )
    monkeypatch.setenv("OCM_CONFIG", str(cfg_file))
    monkeypatch.setenv("OCM_TOKEN", "env-token")

    connection = create_connection()

    assert connection.url == INTEGRATION_URL
    assert connection.tokens == ("env-token", "file-refresh")


@pytest.mark.parametrize(
    "content",
    [
        json.dumps({"scopes": 5, "access_token": "t", "url": "prod"}).encode(),
        json.dumps({"url": ["prod"], "access_token": "t"}).encode(),
        json.dumps({"access_token": 5, "url": "prod"}).encode(),
        b'{"access_token": "t", "url": "prod"}\xff',
    ],
)
def test_create_connection_reports_broken_config_file(monkeypatch, tmp_path, content):
    cfg_file = tmp_path / "ocm.json"
    cfg_file.write_bytes(content)
    monkeypatch.setenv("OCM_CONFIG", str(cfg_file))

    with pytest.raises(ConfigurationError) as excinfo:
        create_connection()

    assert str(excinfo.value) == OCM_CONFIG_ERROR
