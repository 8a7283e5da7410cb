from .unique import unique
from .regexp import regexp
from .relative_path import relative_path

__all__ = ["unique", "regexp", "relative_path"]
