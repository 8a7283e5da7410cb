from .quickfix import quickfix, QuickfixOptions, QuickfixAction, default_quickfix_actions

__all__ = ["quickfix", "QuickfixOptions", "QuickfixAction", "default_quickfix_actions"]
