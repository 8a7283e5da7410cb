# fall_core.builtin - Builtin pipeline components

from .source import list_source
from .projector import unique, regexp, relative_path
from .action import quickfix, QuickfixOptions, QuickfixAction, default_quickfix_actions

__all__ = [
    "list_source",
    "unique",
    "regexp",
    "relative_path",
    "quickfix",
    "QuickfixOptions",
    "QuickfixAction",
    "default_quickfix_actions",
]
