from typing import Any, Iterable, List

from ...item import IdItem
from ...source import Source, define_source


def list_source(items: Iterable[Any] = ()) -> Source:
    """
    Create a source that yields the given items.

    Plain values are wrapped as `IdItem(id=<index>, value=str(v), detail=v)`.
    """
    snapshot: List[IdItem] = [
        item if isinstance(item, IdItem) else IdItem(id=index, value=str(item), detail=item)
        for index, item in enumerate(items)
    ]

    async def collect(host, params, *, signal=None):
        for item in snapshot:
            if signal is not None:
                signal.throw_if_aborted()
            yield item

    return define_source(collect)
