"""Configuration validator for the scan report system."""

from typing import Dict, Any, List

from ..logger import parse_size


RISK_RANGE = range(0, 4)
CONFIDENCE_RANGE = range(0, 5)


class ConfigValidator:
    """Validates scan report configuration for correctness."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize validator with configuration.

        Args:
            config: Configuration dictionary to validate
        """
        self.config = config
        self.errors: List[str] = []

    def validate(self) -> List[str]:
        """Validate complete configuration.

        Returns:
            List of validation error messages
        """
        self.errors = []

        self._validate_system_config()
        self._validate_logging_config()
        self._validate_reports_config()

        return self.errors

    def _validate_system_config(self) -> None:
        system = self.config.get('system', {})

        environment = system.get('environment', 'development')
        valid_envs = ['development', 'testing', 'production']
        if environment not in valid_envs:
            self.errors.append(f"Environment must be one of: {valid_envs}")

    def _validate_logging_config(self) -> None:
        """Validate logging configuration section."""
        logging_config = self.config.get('logging', {})

        level = logging_config.get('level')
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if level not in valid_levels:
            self.errors.append(f"logging.level must be one of: {valid_levels}")

        file_rotation = logging_config.get('file_rotation', True)
        if not isinstance(file_rotation, bool):
            self.errors.append("logging.file_rotation must be a boolean")

        max_size = logging_config.get('max_file_size', '10MB')
        if parse_size(max_size) is None:
            self.errors.append("logging.max_file_size must be a valid size string (e.g., '10MB')")

        backup_count = logging_config.get('backup_count', 5)
        if not isinstance(backup_count, int) or backup_count < 0:
            self.errors.append("logging.backup_count must be a non-negative integer")

    def _validate_reports_config(self) -> None:
        """Validate reports configuration section."""
        reports = self.config.get('reports', {})

        for key in ('title', 'description', 'template', 'report_name_pattern'):
            value = reports.get(key, '')
            if not isinstance(value, str):
                self.errors.append(f"reports.{key} must be a string")

        if not reports.get('report_name_pattern'):
            self.errors.append("reports.report_name_pattern must not be empty")

        for key in ('report_directory', 'template_directory'):
            value = reports.get(key)
            if not value or not isinstance(value, str):
                self.errors.append(f"reports.{key} must be a non-empty string")

        if not isinstance(reports.get('display_report', False), bool):
            self.errors.append("reports.display_report must be a boolean")

        self._validate_ordinals(reports.get('included_risks', []), 'included_risks', RISK_RANGE)
        self._validate_ordinals(reports.get('included_confidences', []),
                                'included_confidences', CONFIDENCE_RANGE)

    def _validate_ordinals(self, values: Any, key: str, valid_range: range) -> None:
        if not isinstance(values, list):
            self.errors.append(f"reports.{key} must be a list")
            return

        for value in values:
            # bool is an int subclass but never a valid ordinal
            if isinstance(value, bool) or not isinstance(value, int) or value not in valid_range:
                self.errors.append(
                    f"reports.{key} contains invalid value {value!r}, "
                    f"expected integers {valid_range.start}-{valid_range.stop - 1}"
                )

    def is_valid(self) -> bool:
        """Check if configuration is valid.

        Returns:
            True if configuration is valid, False otherwise
        """
        return len(self.validate()) == 0
