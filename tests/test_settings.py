"""Tests for loading client configuration from the environment."""

import pytest

from config.settings import ClientConfig, Config
from protocol.constants import DEFAULT_APP_ID
from protocol.messages import Endpoint, Identity
from utils.exceptions import ConfigurationError

ENV_VARS = (
    'APRS_HOST',
    'APRS_PORT',
    'APRS_CALLSIGN',
    'APRS_PASSCODE',
    'APRS_FILTER',
    'APRS_APP_ID',
    'APRS_TRANSMIT_ENABLED',
    'APRS_IDLE_TIMEOUT',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(monkeypatch):
    monkeypatch.setenv('APRS_HOST', 'aprs.server.com')

    config = Config().load_client_config()

    assert config.host == 'aprs.server.com'
    assert config.port == 14580
    assert config.callsign == 'N0CALL'
    assert config.passcode == -1
    assert config.filter is None
    assert config.app_id == DEFAULT_APP_ID
    assert config.transmit_enabled is False
    assert config.idle_timeout == 0


def test_all_values(monkeypatch):
    monkeypatch.setenv('APRS_HOST', 'aprs.server.com')
    monkeypatch.setenv('APRS_PORT', '12345')
    monkeypatch.setenv('APRS_CALLSIGN', 'K1ABC-5')
    monkeypatch.setenv('APRS_PASSCODE', '1234')
    monkeypatch.setenv('APRS_FILTER', 'f/*')
    monkeypatch.setenv('APRS_APP_ID', 'myapp 1.2')
    monkeypatch.setenv('APRS_TRANSMIT_ENABLED', 'yes')
    monkeypatch.setenv('APRS_IDLE_TIMEOUT', '30')

    loader = Config()
    config = loader.load_client_config()

    assert loader.client is config
    assert config.endpoint == Endpoint('aprs.server.com', 12345)
    assert config.identity == Identity('K1ABC-5', 1234, 'myapp 1.2')
    assert config.filter == 'f/*'
    assert config.transmit_enabled is True
    assert config.idle_timeout == 30.0


def test_empty_filter_is_none(monkeypatch):
    monkeypatch.setenv('APRS_HOST', 'aprs.server.com')
    monkeypatch.setenv('APRS_FILTER', '')
    assert Config().load_client_config().filter is None


def test_auto_passcode(monkeypatch):
    monkeypatch.setenv('APRS_HOST', 'aprs.server.com')
    monkeypatch.setenv('APRS_CALLSIGN', 'N0CALL-9')
    monkeypatch.setenv('APRS_PASSCODE', 'auto')
    assert Config().load_client_config().passcode == 13023


def test_missing_host():
    with pytest.raises(ConfigurationError, match='APRS_HOST'):
        Config().load_client_config()


@pytest.mark.parametrize('name, value', [
    ('APRS_PORT', 'http'),
    ('APRS_PORT', '70000'),
    ('APRS_PASSCODE', 'secret'),
    ('APRS_TRANSMIT_ENABLED', 'maybe'),
    ('APRS_IDLE_TIMEOUT', 'soon'),
    ('APRS_IDLE_TIMEOUT', '-1'),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv('APRS_HOST', 'aprs.server.com')
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        Config().load_client_config()


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        ClientConfig(host='').validate()


@pytest.mark.parametrize('port', [0, 65536, '14580'])
def test_validate_rejects_bad_port(port):
    with pytest.raises(ConfigurationError):
        ClientConfig(host='aprs.server.com', port=port).validate()


def test_validate_rejects_empty_callsign():
    with pytest.raises(ConfigurationError):
        ClientConfig(host='aprs.server.com', callsign='').validate()
