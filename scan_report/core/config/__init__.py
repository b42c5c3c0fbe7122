"""Configuration management module for the scan report system."""

from .config_manager import ConfigManager, DEFAULT_CONFIG
from .config_validator import ConfigValidator

__all__ = ['ConfigManager', 'ConfigValidator', 'DEFAULT_CONFIG']
