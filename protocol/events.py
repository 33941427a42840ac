"""Session event and state definitions."""

from enum import Enum


class SessionEvent(str, Enum):
    """Events emitted by an APRS-IS session to its subscribers."""
    
    CONNECT = 'connect'         # Transport connected
    DISCONNECT = 'disconnect'   # Session is back to disconnected
    END = 'end'                 # Server closed its side of the stream
    DATA = 'data'               # Raw chunk received
    PACKET = 'packet'           # Complete line framed from the stream
    COMMENT = 'comment'         # '#' line from the server
    LOGRESP = 'logresp'         # Login response parsed
    SENDING = 'sending'         # Encoded line about to be written
    ERROR = 'error'             # Transport or connect failure
    TIMEOUT = 'timeout'         # No data within the idle timeout


class ConnectionState(str, Enum):
    """Lifecycle state of an APRS-IS session."""
    
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    CONNECTED = 'connected'
