"""
Host boundary.

The host is the editor process the picker runs inside. The pipeline engine
only threads it through to the stages; builtin actions talk to it through
the two coroutines declared here.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class Host(ABC):
    """
    Abstract connection to the host editor.

    Implementations own the transport (RPC channel, test double, ...).
    """

    @abstractmethod
    async def call(self, fn: str, *args: Any) -> Any:
        """
        Call a host function and return its result.

        Args:
            fn: Name of the host function (e.g. "setqflist")
            *args: Positional arguments forwarded to the function
        """
        raise NotImplementedError

    @abstractmethod
    async def cmd(self, command: str) -> None:
        """Execute a host command (e.g. "copen")."""
        raise NotImplementedError


async def setqflist(
    host: Host,
    lst: List[Dict[str, Any]],
    action: str = " ",
    what: Optional[Dict[str, Any]] = None,
) -> Any:
    """Create, replace or add to the host's quickfix list."""
    if what is None:
        return await host.call("setqflist", lst, action)
    return await host.call("setqflist", lst, action, what)
