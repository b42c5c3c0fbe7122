"""Logging framework for the scan report system."""

from .logger_manager import LoggerManager, parse_size
from .structured_formatter import StructuredFormatter

__all__ = ['LoggerManager', 'StructuredFormatter', 'parse_size']
