"""APRS-IS client session."""

from client.is_socket import ISSocket, open_connection

__all__ = [
    'ISSocket',
    'open_connection',
]
