"""Configuration module for managing client settings."""

from config.settings import (
    ClientConfig,
    Config,
)

__all__ = [
    'ClientConfig',
    'Config',
]
