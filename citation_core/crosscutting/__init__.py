"""Crosscutting: configuración, logging y errores tipados."""

from .config import Settings, get_settings
from .exceptions import (
    CitationCoreError,
    ErrorResponse,
    InvalidEntityError,
    InvalidInputError,
    InvalidOptionsError,
)
from .logger import JSONFormatter, logger, setup_logger

__all__ = [
    "Settings",
    "get_settings",
    "CitationCoreError",
    "ErrorResponse",
    "InvalidEntityError",
    "InvalidInputError",
    "InvalidOptionsError",
    "JSONFormatter",
    "logger",
    "setup_logger",
]
