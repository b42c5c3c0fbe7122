"""Report pipeline exception classes."""

from typing import Optional, Iterable
from .base_exceptions import ScanReportError


class ReportError(ScanReportError):
    """Base class for report pipeline errors."""

    def __init__(self, message: str, **kwargs):
        kwargs['error_code'] = kwargs.get('error_code', 'REPORT_ERROR')
        super().__init__(message, **kwargs)


class InvalidFilterCriteriaError(ReportError):
    """Exception raised when risk/confidence inclusion sets are malformed."""

    def __init__(self, field_name: str, invalid_values: Iterable, **kwargs):
        """Initialize invalid filter criteria error.

        Args:
            field_name: Criteria field holding the bad values
            invalid_values: Values outside the allowed ordinal range
            **kwargs: Additional arguments for base class
        """
        invalid = sorted(invalid_values, key=repr)
        message = f"Invalid {field_name} in filter criteria: {invalid}"

        details = kwargs.get('details', {})
        details.update({
            'field': field_name,
            'invalid_values': invalid
        })

        kwargs['details'] = details
        kwargs['error_code'] = 'INVALID_FILTER_CRITERIA'

        super().__init__(message, **kwargs)

        self.field_name = field_name
        self.invalid_values = invalid


class ReportValidationError(ReportError):
    """Base class for pre-flight validation failures.

    A validation error blocks generation entirely; it is always raised (or
    returned) before anything touches the filesystem.
    """

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        details = kwargs.get('details', {})
        if path is not None:
            details['path'] = path
        kwargs['details'] = details
        kwargs['error_code'] = kwargs.get('error_code', 'REPORT_VALIDATION_ERROR')

        super().__init__(message, **kwargs)

        self.path = path


class DirectoryNotWritableError(ReportValidationError):
    """The report file does not exist and its directory cannot be written."""

    def __init__(self, directory: str, **kwargs):
        message = f"Cannot write to the report directory: {directory}"
        kwargs['error_code'] = 'DIRECTORY_NOT_WRITABLE'
        kwargs['suggestion'] = 'Choose a directory you have write permission for'
        super().__init__(message, path=directory, **kwargs)


class FileNotWritableError(ReportValidationError):
    """The report file exists but cannot be overwritten."""

    def __init__(self, file_path: str, **kwargs):
        message = f"Cannot overwrite the existing report file: {file_path}"
        kwargs['error_code'] = 'FILE_NOT_WRITABLE'
        kwargs['suggestion'] = 'Check the file permissions or choose another report name'
        super().__init__(message, path=file_path, **kwargs)


class NoAlertsMatchedError(ReportValidationError):
    """No alerts survived the scope and severity filters."""

    def __init__(self, **kwargs):
        message = "No alerts match the selected sites, risks and confidences"
        kwargs['error_code'] = 'NO_ALERTS_MATCHED'
        kwargs['suggestion'] = 'Widen the filters or generate the report anyway'
        super().__init__(message, **kwargs)


class GenerationFailedError(ReportError):
    """The renderer failed while producing the report."""

    def __init__(self, template_id: str, reason: str, target_path: Optional[str] = None,
                 **kwargs):
        """Initialize generation failed error.

        Args:
            template_id: Config name of the template being rendered
            reason: Message of the underlying renderer exception
            target_path: Report file the renderer was writing
            **kwargs: Additional arguments for base class
        """
        message = f"Failed to generate the report: {reason}"

        details = kwargs.get('details', {})
        details.update({
            'template': template_id,
            'reason': reason,
            'target_path': target_path
        })

        kwargs['details'] = details
        kwargs['error_code'] = 'GENERATION_FAILED'

        super().__init__(message, **kwargs)

        self.template_id = template_id
        self.reason = reason
        self.target_path = target_path


class TemplateNotFoundError(ReportError):
    """Exception raised when a report template cannot be found."""

    def __init__(self, template_name: str, available: Optional[Iterable[str]] = None,
                 **kwargs):
        message = f"Report template not found: {template_name}"
        available_names = sorted(available) if available is not None else []

        details = kwargs.get('details', {})
        details.update({
            'template': template_name,
            'available_templates': available_names
        })

        kwargs['details'] = details
        kwargs['error_code'] = 'TEMPLATE_NOT_FOUND'
        if available_names:
            kwargs['suggestion'] = f"Use one of: {', '.join(available_names)}"

        super().__init__(message, **kwargs)

        self.template_name = template_name


class SessionLoadError(ReportError):
    """Exception raised when a session export cannot be read."""

    def __init__(self, file_path: str, reason: str, **kwargs):
        message = f"Failed to load session from {file_path}: {reason}"

        details = kwargs.get('details', {})
        details.update({
            'file_path': file_path,
            'reason': reason
        })

        kwargs['details'] = details
        kwargs['error_code'] = 'SESSION_LOAD_ERROR'
        kwargs['suggestion'] = 'Check the session file exists and is valid YAML or JSON'

        super().__init__(message, **kwargs)

        self.file_path = file_path
        self.reason = reason
