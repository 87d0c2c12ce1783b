"""Core module initialization."""

from .config import Settings, settings
from .logging import LoggerAdapter, get_logger, setup_logging

__all__ = ["Settings", "settings", "get_logger", "setup_logging", "LoggerAdapter"]
