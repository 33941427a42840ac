"""Protocol module for line framing, encoding, and message definitions."""

from protocol.constants import (
    MESSAGE_DELIMITER,
    MAX_PACKET_LENGTH,
    CONTROL_PREFIX,
    DEFAULT_CALLSIGN,
    DEFAULT_PASSCODE,
    DEFAULT_APP_ID,
)
from protocol.events import SessionEvent, ConnectionState
from protocol.encoding import encode_line, encoded_length, is_control_line
from protocol.framing import StreamFramer
from protocol.messages import Endpoint, Identity, LoginMessage, LoginResponse
from protocol.passcode import aprs_passcode

__all__ = [
    'MESSAGE_DELIMITER',
    'MAX_PACKET_LENGTH',
    'CONTROL_PREFIX',
    'DEFAULT_CALLSIGN',
    'DEFAULT_PASSCODE',
    'DEFAULT_APP_ID',
    'SessionEvent',
    'ConnectionState',
    'encode_line',
    'encoded_length',
    'is_control_line',
    'StreamFramer',
    'Endpoint',
    'Identity',
    'LoginMessage',
    'LoginResponse',
    'aprs_passcode',
]
