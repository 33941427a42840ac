"""Message structure definitions."""

from dataclasses import dataclass
from typing import Optional
import re


@dataclass(frozen=True)
class Endpoint:
    """Remote APRS-IS server address."""

    host: str
    port: int

    def __str__(self) -> str:
        return f'{self.host}:{self.port}'


@dataclass(frozen=True)
class Identity:
    """Station identity presented to the server at login."""

    callsign: str
    passcode: int
    app_id: str

    @property
    def is_read_only(self) -> bool:
        """True when logging in without a valid passcode."""
        return self.passcode == -1


@dataclass(frozen=True)
class LoginMessage:
    """User login line sent to an APRS-IS server after connecting."""

    identity: Identity
    filter: Optional[str] = None

    def to_line(self) -> str:
        """
        Format the login line.

        Returns:
            ``user <callsign> pass <passcode> vers <appId>`` followed by
            `` filter <expr>`` when a filter is set, without delimiter
        """
        line = (
            f'user {self.identity.callsign} '
            f'pass {self.identity.passcode} '
            f'vers {self.identity.app_id}'
        )
        if self.filter:
            line += f' filter {self.filter}'
        return line

    def __str__(self) -> str:
        return self.to_line()


_LOGRESP_PATTERN = re.compile(
    r'^#\s+logresp\s+(?P<callsign>\S+)\s+(?P<status>\w+)(?:,\s*server\s+(?P<server>\S+))?'
)


@dataclass(frozen=True)
class LoginResponse:
    """Server reply to a login line, e.g. ``# logresp N0CALL unverified, server T2TEST``."""

    callsign: str
    verified: bool
    server: Optional[str] = None

    @classmethod
    def parse(cls, line: str) -> Optional['LoginResponse']:
        """
        Parse a logresp line.

        Args:
            line: Line received from the server, delimiter stripped

        Returns:
            Parsed LoginResponse, or None if the line is not a logresp
        """
        match = _LOGRESP_PATTERN.match(line)
        if match is None:
            return None
        return cls(
            callsign=match.group('callsign'),
            verified=match.group('status').lower() == 'verified',
            server=match.group('server'),
        )
