"""Protocol constants for APRS-IS line handling.

These are protocol-level constants that should not be changed
without checking them against the APRS-IS server implementations.
"""

VERSION = '0.1.0'

# Every line on the APRS-IS, in both directions, ends with <CR><LF>
MESSAGE_DELIMITER = '\r\n'

# Maximum length of a single line in bytes, delimiter included
MAX_PACKET_LENGTH = 512

# Server commands, keep-alives and client directives start with '#'
CONTROL_PREFIX = '#'

# Wire text encoding; undecodable bytes are replaced, never rejected
TEXT_ENCODING = 'utf-8'

# Login defaults: N0CALL with passcode -1 is a read-only, unverified login
DEFAULT_CALLSIGN = 'N0CALL'
DEFAULT_PASSCODE = -1
DEFAULT_PORT = 14580

# appname and versionnum should not exceed 15 characters
DEFAULT_APP_ID = f'IS.py {VERSION}'
