"""JSON log formatter."""

import json
import logging
from datetime import datetime
from typing import Dict, Any

from ..exceptions import ScanReportException


# Attributes every LogRecord carries; anything else came in via ``extra``
RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {
    'message', 'asctime', 'taskName'
}


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredFormatter(logging.Formatter):
    """Formats records as one JSON object per line.

    Report pipeline exceptions attached to a record are emitted with their
    error code and details so failed generations can be searched by code.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
            error = record.exc_info[1]
            if isinstance(error, ScanReportException):
                entry['error'] = {
                    key: _json_safe(value) for key, value in error.to_dict().items()
                }

        if self.include_extra:
            extra = {
                key: _json_safe(value) for key, value in vars(record).items()
                if key not in RECORD_ATTRIBUTES and not key.startswith('_')
            }
            if extra:
                entry['extra'] = extra

        return json.dumps(entry, ensure_ascii=False, separators=(',', ':'))
