"""
Projector abstraction and pipeline composition for Fall.

A Projector turns one stream of items into another, possibly changing the
detail type. Projectors are chained with `compose_projectors` and attached to
a Source or Curator with `pipe_projectors`.

Example:
    double = define_projector(double_lines)
    source = pipe_projectors(list_source(items), double, unique)
    async for item in source.collect(host, CollectParams(), signal=signal):
        ...
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterator,
    Callable,
    Generic,
    Optional,
    TypeVar,
    Union,
    overload,
)
import logging

from .curator import Curator, define_curator
from .derivable import Derivable, derive, derive_list
from .exceptions import ContractError
from .item import IdItem, aclose_stream
from .source import Source, define_source

if TYPE_CHECKING:
    from .abort import AbortSignal
    from .host import Host

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
E = TypeVar("E")


@dataclass(frozen=True)
class ProjectParams(Generic[T]):
    """Parameters passed to `Projector.project`."""
    items: AsyncIterator[IdItem[T]]


class Projector(ABC, Generic[T, U]):
    """Base class for stream transformers."""

    @abstractmethod
    def project(
        self,
        host: "Host",
        params: ProjectParams[T],
        *,
        signal: Optional["AbortSignal"] = None,
    ) -> AsyncIterator[IdItem[U]]:
        """
        Wrap `params.items` into a new stream.

        Implementations pull from the upstream only as they are pulled
        themselves, and must not re-emit an item they already yielded.
        """
        raise NotImplementedError


ProjectFn = Callable[..., AsyncIterator[IdItem[U]]]


class _FunctionProjector(Projector[T, U]):
    def __init__(self, project: ProjectFn):
        self._project = project

    def project(self, host, params, *, signal=None):
        return self._project(host, params, signal=signal)

    def __repr__(self) -> str:
        return f"Projector({getattr(self._project, '__qualname__', self._project)!r})"


def define_projector(project: ProjectFn) -> Projector[T, U]:
    """
    Define a projector from a project function.

    Args:
        project: Callable `(host, params, *, signal)` returning an async
            iterator of items, typically an async generator function.
    """
    return _FunctionProjector(project)


@overload
def compose_projectors(
    p1: Derivable[Projector[A, B]],
) -> Projector[A, B]: ...


@overload
def compose_projectors(
    p1: Derivable[Projector[A, B]],
    p2: Derivable[Projector[B, C]],
) -> Projector[A, C]: ...


@overload
def compose_projectors(
    p1: Derivable[Projector[A, B]],
    p2: Derivable[Projector[B, C]],
    p3: Derivable[Projector[C, D]],
) -> Projector[A, D]: ...


@overload
def compose_projectors(
    p1: Derivable[Projector[A, B]],
    p2: Derivable[Projector[B, C]],
    p3: Derivable[Projector[C, D]],
    p4: Derivable[Projector[D, E]],
) -> Projector[A, E]: ...


@overload
def compose_projectors(
    p1: Derivable[Projector[Any, Any]],
    *rest: Derivable[Projector[Any, Any]],
) -> Projector[Any, Any]: ...


def compose_projectors(*projectors):
    """
    Compose multiple projectors into one.

    The projectors are applied in the order they are passed. Derivable
    projectors are resolved every time the composed projector is run.
    """
    if not projectors:
        raise ContractError("compose_projectors() requires at least one projector")

    async def project(host, params, *, signal=None):
        streams = [params.items]
        for projector in derive_list(projectors):
            streams.append(projector.project(host, ProjectParams(items=streams[-1]), signal=signal))
        try:
            async for item in streams[-1]:
                yield item
        finally:
            # Final stage first, back to the input stream.
            for stream in reversed(streams):
                await aclose_stream(stream)

    logger.debug(f"Composed {len(projectors)} projectors")
    return define_projector(project)


@overload
def pipe_projectors(
    origin: Derivable[Source[A]],
    p1: Derivable[Projector[A, B]],
) -> Source[B]: ...


@overload
def pipe_projectors(
    origin: Derivable[Curator[A]],
    p1: Derivable[Projector[A, B]],
) -> Curator[B]: ...


@overload
def pipe_projectors(
    origin: Derivable[Source[A]],
    p1: Derivable[Projector[A, B]],
    p2: Derivable[Projector[B, C]],
) -> Source[C]: ...


@overload
def pipe_projectors(
    origin: Derivable[Curator[A]],
    p1: Derivable[Projector[A, B]],
    p2: Derivable[Projector[B, C]],
) -> Curator[C]: ...


@overload
def pipe_projectors(
    origin: Derivable[Source[Any]],
    p1: Derivable[Projector[Any, Any]],
    *rest: Derivable[Projector[Any, Any]],
) -> Source[Any]: ...


@overload
def pipe_projectors(
    origin: Derivable[Curator[Any]],
    p1: Derivable[Projector[Any, Any]],
    *rest: Derivable[Projector[Any, Any]],
) -> Curator[Any]: ...


def pipe_projectors(origin, *projectors) -> Union[Source, Curator]:
    """
    Pipe projectors to a source or a curator.

    The projectors are applied in the order they are passed. The origin is
    resolved once, here; the result is a Source when the origin is a Source
    and a Curator when it is a Curator.

    Raises:
        ContractError: If no projector is given, or the origin is not exactly
            one of Source and Curator.
    """
    src = derive(origin)
    projector = compose_projectors(*projectors)
    is_source = isinstance(src, Source)
    is_curator = isinstance(src, Curator)

    if is_source and is_curator:
        raise ContractError(
            f"Cannot pipe projectors to {src!r}: it is both a Source and a Curator",
            context={"origin": repr(src)},
        )

    async def run(items, host, signal):
        stream = projector.project(host, ProjectParams(items=items), signal=signal)
        try:
            async for item in stream:
                yield item
        finally:
            await aclose_stream(stream)
            await aclose_stream(items)

    if is_source:
        def collect(host, params, *, signal=None):
            return run(src.collect(host, params, signal=signal), host, signal)

        logger.debug(f"Piped {len(projectors)} projectors to source {src!r}")
        return define_source(collect)

    if is_curator:
        def curate(host, params, *, signal=None):
            return run(src.curate(host, params, signal=signal), host, signal)

        logger.debug(f"Piped {len(projectors)} projectors to curator {src!r}")
        return define_curator(curate)

    raise ContractError(
        f"Cannot pipe projectors to {src!r}: it is neither a Source nor a Curator",
        context={"origin": repr(src)},
    )
