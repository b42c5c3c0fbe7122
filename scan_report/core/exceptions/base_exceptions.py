"""Root of the scan report exception hierarchy."""

from typing import Optional, Dict, Any


class ScanReportException(Exception):
    """Base class for every exception raised by the report pipeline.

    Carries the user-facing ``message``, a machine-readable ``error_code``,
    contextual ``details`` (paths, template ids, offending values) and an
    optional ``suggestion`` shown next to the message.
    """

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = dict(details) if details else {}
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used by the CLI and the JSON log formatter."""
        return {
            'exception_type': type(self).__name__,
            'message': self.message,
            'error_code': self.error_code,
            'details': self.details,
            'suggestion': self.suggestion,
        }

    def log_extra(self) -> Dict[str, Any]:
        """Fields for ``logger.<level>(..., extra=...)``.

        Keys avoid the attribute names ``logging.LogRecord`` reserves.
        """
        return {'error_code': self.error_code, 'error_details': self.details}

    def __str__(self) -> str:
        if not self.suggestion:
            return self.message
        return f"{self.message}. Suggestion: {self.suggestion}"


class ScanReportError(ScanReportException):
    """Recoverable failure: reported to the user, the host keeps running.

    Validation, generation, persistence and session loading errors all
    derive from this class.
    """


class ScanReportCriticalError(ScanReportException):
    """Failure the caller cannot continue from."""
