"""
logging_config.py

Central logging setup.

    from logging_config import get_logger

    logger = get_logger(__name__)
    logger.info('Truth table built', extra={'extra_info': {'rows': 8}})
"""

import logging
import logging.handlers
from pathlib import Path

LOGGER_ROOT = 'logika'

DEFAULT_FORMAT = '[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class LogikaLogFormatter(logging.Formatter):
    """Appends the `extra_info` dict of a record as `k=v` pairs."""

    def __init__(self, include_extra=True):
        self.include_extra = include_extra
        super().__init__(fmt=DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record):
        log_message = super().format(record)

        extra_info = getattr(record, 'extra_info', None)
        if self.include_extra and extra_info:
            extra_str = ' | '.join(f'{k}={v}' for k, v in extra_info.items())
            log_message += f' | {extra_str}'

        return log_message


def _level(level):
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f'Unknown log level: {level!r}')
    return value


def setup_logging(level=logging.INFO, log_file=None, max_bytes=1_000_000, backup_count=3):
    """
    Configure the `logika` logger hierarchy.

    Calling it again replaces the handlers, so the app factory can run
    more than once (tests) without duplicating output.
    """
    root = logging.getLogger(LOGGER_ROOT)
    root.setLevel(_level(level))
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(LogikaLogFormatter())
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
        file_handler.setFormatter(LogikaLogFormatter())
        root.addHandler(file_handler)

    return root


def get_logger(name):
    """Logger below the `logika` root, e.g. `logika.evaluator`."""
    if name == LOGGER_ROOT or name.startswith(LOGGER_ROOT + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{LOGGER_ROOT}.{name}')
