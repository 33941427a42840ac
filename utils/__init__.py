"""Utility modules for logging and exception handling."""

from utils.logging import setup_logging, get_logger
from utils.exceptions import (
    APRSISError,
    NotConnectedError,
    AlreadyConnectedError,
    TransmitNotPermittedError,
    MessageTooLongError,
    ConfigurationError,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'APRSISError',
    'NotConnectedError',
    'AlreadyConnectedError',
    'TransmitNotPermittedError',
    'MessageTooLongError',
    'ConfigurationError',
]
