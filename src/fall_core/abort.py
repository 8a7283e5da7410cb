"""
Cooperative cancellation for pipeline stages.

One AbortSignal is threaded by reference through every stage of a pipeline
run. Stages observe it at their checkpoints; nothing is interrupted
preemptively.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from .exceptions import AbortError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AbortSignal:
    """
    Read-only view of a cancellation request.

    Signals are created by an AbortController; stages only ever read them.
    """

    def __init__(self):
        self._aborted = False
        self._reason: Any = None
        self._listeners: List[Callable[[Any], None]] = []
        self._event: Optional[asyncio.Event] = None

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Any:
        return self._reason

    def throw_if_aborted(self) -> None:
        """Raise AbortError if cancellation has been requested."""
        if self._aborted:
            raise AbortError(self._reason)

    def add_listener(self, callback: Callable[[Any], None]) -> None:
        """
        Register a callback invoked with the reason once the signal fires.

        Callbacks added after the signal fired are invoked immediately.
        """
        if self._aborted:
            callback(self._reason)
            return
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[Any], None]) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    async def wait(self) -> Any:
        """Suspend until the signal fires and return its reason."""
        if self._aborted:
            return self._reason
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()
        return self._reason

    def _fire(self, reason: Any) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        if self._event is not None:
            self._event.set()
        listeners, self._listeners = self._listeners, []
        for callback in listeners:
            callback(reason)

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self._aborted})"


class AbortController:
    """Owner side of an AbortSignal."""

    def __init__(self):
        self.signal = AbortSignal()

    def abort(self, reason: Any = None) -> None:
        """Set the signal. Aborting twice keeps the first reason."""
        if reason is None:
            reason = "aborted"
        if not self.signal.aborted:
            logger.debug(f"Abort requested: {reason}")
        self.signal._fire(reason)


async def abortable(awaitable: Awaitable[T], signal: Optional[AbortSignal] = None) -> T:
    """
    Await `awaitable` unless `signal` fires first.

    When the signal fires while the awaitable is still pending, the underlying
    task is cancelled and AbortError is raised instead of returning.
    """
    if signal is None:
        return await awaitable
    if signal.aborted:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise AbortError(signal.reason)

    task = asyncio.ensure_future(awaitable)

    def _on_abort(_reason: Any) -> None:
        task.cancel()

    signal.add_listener(_on_abort)
    try:
        return await task
    except asyncio.CancelledError:
        if signal.aborted:
            raise AbortError(signal.reason) from None
        raise
    finally:
        signal.remove_listener(_on_abort)
