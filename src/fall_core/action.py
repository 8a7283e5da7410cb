"""
Action abstraction for Fall.

Actions run after the user made a selection. They receive the materialized
items, not a stream, and perform side effects through the host. An action
that returns a truthy value asks the driver to keep the picker open.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Generic, List, Optional, TypeVar
import logging

from .derivable import Derivable, derive_list
from .exceptions import ContractError
from .item import IdItem

if TYPE_CHECKING:
    from .abort import AbortSignal
    from .host import Host

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class InvokeParams(Generic[T]):
    """
    Parameters passed to `Action.invoke`.

    `selected_items` is None when the user made no explicit selection.
    """
    filtered_items: List[IdItem[T]] = field(default_factory=list)
    selected_items: Optional[List[IdItem[T]]] = None
    item: Optional[IdItem[T]] = None


class Action(ABC, Generic[T]):
    """Base class for side-effecting operations on a finished selection."""

    @abstractmethod
    async def invoke(
        self,
        host: "Host",
        params: InvokeParams[T],
        *,
        signal: Optional["AbortSignal"] = None,
    ) -> Optional[bool]:
        """
        Run the action.

        Returns:
            True to keep the picker open, False or None to close it
        """
        raise NotImplementedError


InvokeFn = Callable[..., Awaitable[Optional[bool]]]


class _FunctionAction(Action[T]):
    def __init__(self, invoke: InvokeFn):
        self._invoke = invoke

    async def invoke(self, host, params, *, signal=None):
        return await self._invoke(host, params, signal=signal)

    def __repr__(self) -> str:
        return f"Action({getattr(self._invoke, '__qualname__', self._invoke)!r})"


def define_action(invoke: InvokeFn) -> Action[T]:
    """Define an action from a coroutine function `(host, params, *, signal)`."""
    return _FunctionAction(invoke)


def compose_actions(*actions: Derivable[Action[T]]) -> Action[T]:
    """
    Compose multiple actions into one.

    The actions run one after another with the same parameters. The picker is
    kept open if any of them asked for it.
    """
    if not actions:
        raise ContractError("compose_actions() requires at least one action")

    async def invoke(host, params, *, signal=None):
        keep_open = False
        for action in derive_list(actions):
            if await action.invoke(host, params, signal=signal):
                keep_open = True
        return keep_open

    return define_action(invoke)
