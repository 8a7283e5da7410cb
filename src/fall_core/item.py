"""
Item model for Fall pipelines.

An IdItem is the immutable unit flowing through every stage. Stages that
want to change an item yield a new one (see `IdItem.model_copy`).
"""
from typing import Any, AsyncIterator, Generic, Optional, TypeVar, TypedDict

from pydantic import BaseModel, ConfigDict, Field

D = TypeVar("D")


class IdItem(BaseModel, Generic[D]):
    """
    A candidate the user can browse and act on.

    The `detail` payload is stage specific and opaque to the pipeline engine.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: int = Field(..., description="Identifier unique within one pipeline run")
    value: str = Field(..., description="Display oriented representation")
    detail: D = Field(..., description="Stage specific payload")
    label: Optional[str] = Field(None, description="Display override for value")


class PathDetail(TypedDict, total=False):
    """Detail of an item that points into a file."""
    path: str
    line: int
    column: int
    length: int
    context: str


class BufnameDetail(TypedDict, total=False):
    """Detail of an item that points into an editor buffer."""
    bufname: str
    line: int
    column: int
    length: int
    context: str


async def aclose_stream(stream: AsyncIterator[Any]) -> None:
    """Close an item stream if it supports it. Plain async iterators are left alone."""
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()
