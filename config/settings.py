"""Configuration management for the APRS-IS client."""

from dataclasses import dataclass
from typing import Optional
import os
from pathlib import Path

from dotenv import load_dotenv

from protocol.constants import (
    DEFAULT_APP_ID,
    DEFAULT_CALLSIGN,
    DEFAULT_PASSCODE,
    DEFAULT_PORT,
)
from protocol.messages import Endpoint, Identity
from protocol.passcode import aprs_passcode
from utils.exceptions import ConfigurationError


# Load .env file from project root
# This is called at module import time to ensure env vars are available
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path, override=False)

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off', '')


@dataclass
class ClientConfig:
    """Configuration for an APRS-IS client session."""

    host: str
    port: int = DEFAULT_PORT
    callsign: str = DEFAULT_CALLSIGN
    passcode: int = DEFAULT_PASSCODE
    filter: Optional[str] = None
    app_id: str = DEFAULT_APP_ID
    transmit_enabled: bool = False
    idle_timeout: float = 0

    def validate(self) -> None:
        """Validate client configuration parameters."""
        if not self.host:
            raise ConfigurationError("APRS-IS host is required")
        if not isinstance(self.port, int) or self.port < 1 or self.port > 65535:
            raise ConfigurationError("APRS-IS port must be between 1 and 65535")
        if not self.callsign:
            raise ConfigurationError("Callsign is required")
        if not isinstance(self.passcode, int):
            raise ConfigurationError("Passcode must be an integer")
        if self.idle_timeout < 0:
            raise ConfigurationError("Idle timeout must not be negative")

    @property
    def endpoint(self) -> Endpoint:
        return Endpoint(host=self.host, port=self.port)

    @property
    def identity(self) -> Identity:
        return Identity(callsign=self.callsign, passcode=self.passcode, app_id=self.app_id)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean (true/false), got: {value}")


class Config:
    """Main configuration loader and manager."""

    def __init__(self):
        """Initialize configuration manager."""
        self.client: Optional[ClientConfig] = None

    def load_client_config(self) -> ClientConfig:
        """
        Load client configuration from environment variables.

        Environment variables:
            APRS_HOST: APRS-IS server hostname (required)
            APRS_PORT: Server port (default: 14580)
            APRS_CALLSIGN: Login callsign (default: N0CALL)
            APRS_PASSCODE: Passcode, or 'auto' to compute it from the callsign
                           (default: -1, read-only)
            APRS_FILTER: Server-side filter expression (default: none)
            APRS_APP_ID: Application name and version (default: IS.py <version>)
            APRS_TRANSMIT_ENABLED: Allow sending packets other than the login
                                   (default: false)
            APRS_IDLE_TIMEOUT: Seconds without data before the session is
                               dropped, 0 disables (default: 0)

        Returns:
            Validated ClientConfig instance

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        host = os.getenv('APRS_HOST')
        if not host:
            raise ConfigurationError(
                "APRS_HOST environment variable is required. "
                "Example: APRS_HOST=rotate.aprs2.net"
            )

        port_str = os.getenv('APRS_PORT', str(DEFAULT_PORT))
        try:
            port = int(port_str)
        except ValueError:
            raise ConfigurationError(f"APRS_PORT must be a valid integer, got: {port_str}")

        callsign = os.getenv('APRS_CALLSIGN', DEFAULT_CALLSIGN)

        passcode_str = os.getenv('APRS_PASSCODE', str(DEFAULT_PASSCODE))
        if passcode_str.strip().lower() == 'auto':
            passcode = aprs_passcode(callsign)
        else:
            try:
                passcode = int(passcode_str)
            except ValueError:
                raise ConfigurationError(
                    f"APRS_PASSCODE must be an integer or 'auto', got: {passcode_str}"
                )

        timeout_str = os.getenv('APRS_IDLE_TIMEOUT', '0')
        try:
            idle_timeout = float(timeout_str)
        except ValueError:
            raise ConfigurationError(f"APRS_IDLE_TIMEOUT must be a number, got: {timeout_str}")

        config = ClientConfig(
            host=host,
            port=port,
            callsign=callsign,
            passcode=passcode,
            filter=os.getenv('APRS_FILTER') or None,
            app_id=os.getenv('APRS_APP_ID', DEFAULT_APP_ID),
            transmit_enabled=_parse_bool(
                'APRS_TRANSMIT_ENABLED', os.getenv('APRS_TRANSMIT_ENABLED', 'false')
            ),
            idle_timeout=idle_timeout,
        )
        config.validate()
        self.client = config
        return config
