"""
Fall Core Exceptions.

These are generic exceptions shared by the pipeline engine, the builtin
stages and the configuration layer. None of them depend on the host.
"""
from typing import Optional, Any, Dict


class FallException(Exception):
    """Base exception for all Fall errors."""

    def __init__(self, detail: str = "An error occurred", context: Optional[Dict[str, Any]] = None):
        self.detail = detail
        self.context = context or {}
        super().__init__(detail)


class ConfigError(FallException):
    """Raised when there's an issue with configuration (e.g., invalid YAML, unknown reference)."""

    def __init__(self, detail: str = "Configuration error", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, context=context)


class NotFoundError(FallException):
    """Raised when a requested component (e.g., registry entry, action) is not found."""

    def __init__(self, detail: str = "Component not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, context=context)


class ContractError(FallException):
    """Raised when a pipeline is constructed from arguments that break its contract."""

    def __init__(self, detail: str = "Pipeline contract violated", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, context=context)


class AbortError(FallException):
    """Raised at a cancellation checkpoint once the abort signal has been set."""

    def __init__(self, reason: Any = None, context: Optional[Dict[str, Any]] = None):
        self.reason = reason
        detail = "The operation was aborted"
        if reason is not None:
            detail = f"{detail}: {reason}"
        super().__init__(detail=detail, context=context)
