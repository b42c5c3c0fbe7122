"""Pre-flight checks run before a report is generated."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .models import AlertNode
from ..core.exceptions import (
    ReportValidationError, DirectoryNotWritableError, FileNotWritableError,
    NoAlertsMatchedError
)


logger = logging.getLogger(__name__)


class ReportValidator:
    """Checks the report destination and that something is left to report.

    Passing validation does not guarantee the renderer succeeds; it only
    guarantees nothing obviously doomed is attempted.
    """

    def validate(self, target_path: Union[str, Path], filtered_root: AlertNode,
                 allow_empty: bool = False) -> Optional[ReportValidationError]:
        """Return the first failing check, or None when the report can be generated.

        Args:
            target_path: Report file to be written
            filtered_root: Root of the filtered alert tree
            allow_empty: Generate even when no alerts matched
        """
        path = Path(target_path)

        if not path.exists():
            directory = path.parent
            if not directory.is_dir() or not os.access(directory, os.W_OK):
                return DirectoryNotWritableError(str(directory.absolute()))
        elif path.is_dir() or not os.access(path, os.W_OK):
            return FileNotWritableError(str(path.absolute()))

        if filtered_root.child_count == 0 and not allow_empty:
            return NoAlertsMatchedError()

        return None

    def ensure_valid(self, target_path: Union[str, Path], filtered_root: AlertNode,
                     allow_empty: bool = False) -> None:
        """Raise the first failing check.

        Raises:
            ReportValidationError: If any check fails
        """
        error = self.validate(target_path, filtered_root, allow_empty)
        if error is not None:
            logger.info(f"Report validation failed: {error.message}")
            raise error
