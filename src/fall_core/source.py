"""
Source abstraction for Fall.

A Source originates a stream of items from its parameters alone; it takes no
query. Sources are reusable templates: every call to `collect` produces an
independent stream.
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
class CollectParams:
    """Parameters passed to `Source.collect`."""
    args: List[str] = field(default_factory=list)


class Source(ABC, Generic[T]):
    """Base class for components that originate items without a query."""

    @abstractmethod
    def collect(
        self,
        host: "Host",
        params: CollectParams,
        *,
        signal: Optional["AbortSignal"] = None,
    ) -> AsyncIterator[IdItem[T]]:
        """
        Start a new stream of items.

        Returns:
            Async iterator yielding items lazily, as the caller pulls
        """
        raise NotImplementedError


CollectFn = Callable[..., AsyncIterator[IdItem[T]]]


class _FunctionSource(Source[T]):
    def __init__(self, collect: CollectFn):
        self._collect = collect

    def collect(self, host, params, *, signal=None):
        return self._collect(host, params, signal=signal)

    def __repr__(self) -> str:
        return f"Source({getattr(self._collect, '__qualname__', self._collect)!r})"


def define_source(collect: CollectFn) -> Source[T]:
    """
    Define a source from a collect function.

    Args:
        collect: Callable `(host, params, *, signal)` returning an async
            iterator of items, typically an async generator function.
    """
    return _FunctionSource(collect)


def compose_sources(*sources: Derivable[Source]) -> Source:
    """
    Compose several sources into one.

    The sources are collected one after another, in the order given. Items are
    re-identified with a running id so ids stay unique across the composition.
    """
    if not sources:
        raise ContractError("compose_sources() requires at least one source")

    async def collect(host, params, *, signal=None):
        next_id = 0
        for source in derive_list(sources):
            stream = source.collect(host, params, signal=signal)
            try:
                async for item in stream:
                    yield item.model_copy(update={"id": next_id})
                    next_id += 1
            finally:
                await aclose_stream(stream)

    logger.debug(f"Composed {len(sources)} sources")
    return define_source(collect)
