"""Logging setup for the ``scan_report`` logger hierarchy."""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Dict, Any, List, Optional

from .structured_formatter import StructuredFormatter


ROOT_LOGGER_NAME = 'scan_report'
LOG_FILE_NAME = 'scan_report.log'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_MAX_BYTES = 10 * 1024 * 1024

SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*(GB|MB|KB|B)\s*$', re.IGNORECASE)
SIZE_UNITS = {'B': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}


def parse_size(size: str) -> Optional[int]:
    """Convert a size such as ``'10MB'`` to bytes; None when malformed."""
    match = SIZE_PATTERN.match(size) if isinstance(size, str) else None
    if match is None:
        return None
    number, unit = match.groups()
    return int(float(number) * SIZE_UNITS[unit.upper()])


class LoggerManager:
    """Attaches console and file handlers to the ``scan_report`` logger.

    Modules log through ``logging.getLogger(__name__)`` and inherit the
    handlers configured here. The file handler is only added when
    ``logging.file_logging`` is enabled, and always writes JSON.
    """

    def __init__(self, config: Dict[str, Any]):
        """Configure logging from the full configuration mapping.

        Args:
            config: Configuration with ``logging`` and ``system`` sections
        """
        self.config = config
        self.logging_config = config.get('logging', {})
        self.level = self._level_from_name(self.logging_config.get('level', 'INFO'))
        self.root = logging.getLogger(ROOT_LOGGER_NAME)
        self.handlers: List[logging.Handler] = []
        self.loggers: Dict[str, logging.Logger] = {'root': self.root}
        self._configure()

    @staticmethod
    def _level_from_name(name: Any) -> int:
        level = logging.getLevelName(str(name).upper())
        return level if isinstance(level, int) else logging.INFO

    def _configure(self) -> None:
        self.root.setLevel(self.level)
        for handler in self.root.handlers[:]:
            self.root.removeHandler(handler)

        self._attach(self._console_handler())

        if self.logging_config.get('file_logging', False):
            logs_dir = Path(self.config.get('system', {}).get('logs_dir', 'logs'))
            logs_dir.mkdir(parents=True, exist_ok=True)
            self._attach(self._file_handler(logs_dir / LOG_FILE_NAME))

    def _attach(self, handler: logging.Handler) -> None:
        handler.setLevel(self.level)
        self.root.addHandler(handler)
        self.handlers.append(handler)

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler()
        if self.config.get('system', {}).get('environment') == 'production':
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(
                logging.Formatter(self.logging_config.get('format', DEFAULT_FORMAT))
            )
        return handler

    def _file_handler(self, log_file: Path) -> logging.Handler:
        if self.logging_config.get('file_rotation', True):
            max_bytes = parse_size(self.logging_config.get('max_file_size', '10MB'))
            handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes or DEFAULT_MAX_BYTES,
                backupCount=self.logging_config.get('backup_count', 5),
                encoding='utf-8'
            )
        else:
            handler = logging.FileHandler(log_file, encoding='utf-8')

        handler.setFormatter(StructuredFormatter())
        return handler

    def get_logger(self, name: str) -> logging.Logger:
        """Return ``scan_report.<name>``."""
        if name not in self.loggers:
            self.loggers[name] = logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
        return self.loggers[name]

    def set_level(self, level: str) -> None:
        """Change the level of the hierarchy and of the managed handlers."""
        self.level = self._level_from_name(level)
        self.root.setLevel(self.level)
        for handler in self.handlers:
            handler.setLevel(self.level)

    def shutdown(self) -> None:
        """Detach and close the handlers this manager added."""
        for handler in self.handlers:
            self.root.removeHandler(handler)
            handler.close()
        self.handlers.clear()
