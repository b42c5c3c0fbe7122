"""Exception classes for the scan report system."""

from .base_exceptions import ScanReportException, ScanReportError, ScanReportCriticalError
from .config_exceptions import (
    ConfigurationError, ConfigValidationError,
    ConfigPersistenceError
)
from .report_exceptions import (
    ReportError, InvalidFilterCriteriaError, ReportValidationError,
    DirectoryNotWritableError, FileNotWritableError, NoAlertsMatchedError,
    GenerationFailedError, TemplateNotFoundError, SessionLoadError
)

__all__ = [
    'ScanReportException', 'ScanReportError', 'ScanReportCriticalError',
    'ConfigurationError', 'ConfigValidationError',
    'ConfigPersistenceError',
    'ReportError', 'InvalidFilterCriteriaError', 'ReportValidationError',
    'DirectoryNotWritableError', 'FileNotWritableError', 'NoAlertsMatchedError',
    'GenerationFailedError', 'TemplateNotFoundError', 'SessionLoadError'
]
