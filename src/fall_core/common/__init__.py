# fall_core.common - Common utilities for Fall

from .logging_config import setup_logging
from .paths import get_fall_home_dir

__all__ = [
    "setup_logging",
    "get_fall_home_dir",
]
