"""
Logging setup for scripts and services embedding the analytics engine.

The library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are attached here by the process entry point.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None)).keys()) | {'message', 'asctime'}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` fields inlined."""

    def format(self, record):
        log_obj = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_obj[key] = value
        if record.exc_info:
            log_obj['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


def setup_logging(
    log_dir: Optional[str] = 'logs',
    name: str = 'analytics',
    level: int = logging.INFO
) -> Optional[Path]:
    """
    Setup JSON logging to file plus plain console output.

    Args:
        log_dir: Directory for the JSON log file; None disables the file handler
        name: Log file prefix
        level: Console level (the file always receives DEBUG)

    Returns:
        Path of the log file, or None when file logging is disabled
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    log_file = None
    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_file = directory / f'{name}_{datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")}.json'

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)

    return log_file
