"""Custom exception classes for the APRS-IS client."""


class APRSISError(Exception):
    """Base exception class for all APRS-IS client errors."""
    pass


class NotConnectedError(APRSISError):
    """Exception raised when an operation needs an active session."""
    pass


class AlreadyConnectedError(APRSISError):
    """Exception raised when connecting a session that is connecting or connected."""
    pass


class TransmitNotPermittedError(APRSISError):
    """Exception raised when sending without transmit permission."""
    pass


class MessageTooLongError(APRSISError):
    """Exception raised when an encoded message exceeds the maximum packet length."""
    pass


class ConfigurationError(APRSISError, ValueError):
    """Exception raised when configuration is invalid or missing."""
    pass
