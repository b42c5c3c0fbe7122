"""Configuration exceptions."""

from typing import List, Optional
from .base_exceptions import ScanReportError


class ConfigurationError(ScanReportError):
    """A configuration source could not be loaded or holds bad values."""

    def __init__(self, message: str, config_section: Optional[str] = None,
                 config_key: Optional[str] = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if config_section:
            details['config_section'] = config_section
        if config_key:
            details['config_key'] = config_key
        kwargs.setdefault('error_code', 'CONFIG_ERROR')

        super().__init__(message, details=details, **kwargs)

        self.config_section = config_section
        self.config_key = config_key


class ConfigValidationError(ConfigurationError):
    """The merged configuration failed validation; ``validation_errors`` lists why."""

    def __init__(self, validation_errors: List[str], **kwargs):
        count = len(validation_errors)
        super().__init__(
            f"Configuration validation failed with {count} "
            f"error{'s' if count != 1 else ''}: {'; '.join(validation_errors)}",
            details={'validation_errors': list(validation_errors)},
            error_code='CONFIG_VALIDATION_ERROR',
            suggestion='Fix the listed values in the configuration file',
            **kwargs
        )
        self.validation_errors = list(validation_errors)


class ConfigPersistenceError(ConfigurationError):
    """Report settings could not be written back.

    Callers log this error and carry on; it never blocks or reverses a
    report generation attempt.
    """

    def __init__(self, file_path: Optional[str], reason: str, **kwargs):
        target = file_path or '<no configuration file>'
        super().__init__(
            f"Failed to save configuration to {target}: {reason}",
            details={'file_path': file_path, 'reason': reason},
            error_code='CONFIG_PERSISTENCE_FAILED',
            suggestion='Check that the configuration directory is writable',
            **kwargs
        )
        self.file_path = file_path
        self.reason = reason
