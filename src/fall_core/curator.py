"""
Curator abstraction for Fall.

A Curator originates a stream of items driven by a query. The query is
opaque here; how it is matched is up to the curator implementation.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, AsyncIterator, Callable, Generic, List, Optional, TypeVar
import logging

from .derivable import Derivable, derive_list
from .exceptions import ContractError
from .item import IdItem, aclose_stream

if TYPE_CHECKING:
    from .abort import AbortSignal
    from .host import Host

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CurateParams:
    """Parameters passed to `Curator.curate`."""
    args: List[str] = field(default_factory=list)
    query: str = ""


class Curator(ABC, Generic[T]):
    """Base class for components that originate items from a query."""

    @abstractmethod
    def curate(
        self,
        host: "Host",
        params: CurateParams,
        *,
        signal: Optional["AbortSignal"] = None,
    ) -> AsyncIterator[IdItem[T]]:
        """
        Start a new stream of items for `params.query`.

        Returns:
            Async iterator yielding items lazily, as the caller pulls
        """
        raise NotImplementedError


CurateFn = Callable[..., AsyncIterator[IdItem[T]]]


class _FunctionCurator(Curator[T]):
    def __init__(self, curate: CurateFn):
        self._curate = curate

    def curate(self, host, params, *, signal=None):
        return self._curate(host, params, signal=signal)

    def __repr__(self) -> str:
        return f"Curator({getattr(self._curate, '__qualname__', self._curate)!r})"


def define_curator(curate: CurateFn) -> Curator[T]:
    """
    Define a curator from a curate function.

    Args:
        curate: Callable `(host, params, *, signal)` returning an async
            iterator of items, typically an async generator function.
    """
    return _FunctionCurator(curate)


def compose_curators(*curators: Derivable[Curator]) -> Curator:
    """
    Compose several curators into one.

    Every curator receives the same query; their streams are concatenated in
    the order given and re-identified with a running id.
    """
    if not curators:
        raise ContractError("compose_curators() requires at least one curator")

    async def curate(host, params, *, signal=None):
        next_id = 0
        for curator in derive_list(curators):
            stream = curator.curate(host, params, signal=signal)
            try:
                async for item in stream:
                    yield item.model_copy(update={"id": next_id})
                    next_id += 1
            finally:
                await aclose_stream(stream)

    logger.debug(f"Composed {len(curators)} curators")
    return define_curator(curate)
