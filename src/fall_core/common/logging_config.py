# src/fall_core/common/logging_config.py

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .paths import get_fall_home_dir

LOG_FILE_NAME = 'fall.log'

_PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _formatters(json_format: bool) -> Dict[str, Any]:
    formatters: Dict[str, Any] = {
        'console': {
            '()': 'colorlog.ColoredFormatter',
            'format': '%(log_color)s' + _PLAIN_FORMAT + '%(reset)s',
            'datefmt': _DATE_FORMAT,
        },
    }
    if json_format:
        formatters['file'] = {
            '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
            'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
        }
    else:
        formatters['file'] = {'format': _PLAIN_FORMAT, 'datefmt': _DATE_FORMAT}
    return formatters


def setup_logging(
    directory: Optional[Union[str, Path]] = None,
    level: Union[int, str] = "INFO",
    console: bool = True,
    json_format: bool = False,
    logger_name: str = "fall_core",
) -> Path:
    """
    Route the `fall_core` loggers to a rotating log file and, optionally, stdout.

    The keyword names match `LoggingConfig`, so a loaded configuration can be
    applied with `setup_logging(**config.logging.model_dump())`. Only
    `logger_name` is configured; the root logger is left to the application.

    Returns:
        Path of the log file.
    """
    log_dir = Path(directory).expanduser() if directory else get_fall_home_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    handlers: Dict[str, Any] = {
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'file',
            'filename': str(log_file),
            'maxBytes': 10485760,  # 10MB
            'backupCount': 3,
            'encoding': 'utf8',
        },
    }
    if console:
        handlers['console'] = {
            'class': 'logging.StreamHandler',
            'formatter': 'console',
            'stream': sys.stdout,
        }

    if isinstance(level, str):
        level = level.upper()

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': _formatters(json_format),
        'handlers': handlers,
        'loggers': {
            logger_name: {'handlers': list(handlers), 'level': level, 'propagate': False},
        },
    })

    logger = logging.getLogger(logger_name)
    logger.debug(f"Logging to {log_file} at {logging.getLevelName(logger.level)}")
    return log_file
