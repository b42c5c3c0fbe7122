"""ScanReport - scope and severity filtering for vulnerability scan reports

Prepares the data behind a scan report: the alert tree is pruned to the
selected sites and risk/confidence levels, the report file name is derived
from a configurable pattern, and the destination is validated before the
filtered data is handed to a template renderer.
"""

__version__ = "1.0.0"
__author__ = "ScanReport Development Team"
__description__ = "Scope and severity filtering for vulnerability scan reports"
__license__ = "MIT"

from .core.exceptions import ScanReportException, ScanReportError

__all__ = [
    'ScanReportException',
    'ScanReportError',
    '__version__'
]
