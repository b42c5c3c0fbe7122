"""Core infrastructure for the scan report system."""

from .config import ConfigManager
from .logger import LoggerManager

__all__ = ['ConfigManager', 'LoggerManager']
