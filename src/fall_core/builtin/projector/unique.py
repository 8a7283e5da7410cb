from typing import Any, Hashable, Set

from ...item import IdItem
from ...projector import Projector, define_projector

_MISSING = object()


def _key_of(item: IdItem, key: str) -> Any:
    if key == "value":
        return item.value
    detail = item.detail
    if isinstance(detail, dict):
        return detail.get(key, _MISSING)
    return getattr(detail, key, _MISSING)


def unique(key: str = "value") -> Projector:
    """
    Create a projector that drops items whose key was already seen.

    Args:
        key: "value" to compare item values, otherwise a detail key.
            Items without that key are always kept. Unhashable keys such as
            lists are compared by their repr.
    """
    async def project(host, params, *, signal=None):
        seen: Set[Hashable] = set()
        async for item in params.items:
            if signal is not None:
                signal.throw_if_aborted()
            k = _key_of(item, key)
            if k is _MISSING:
                yield item
                continue
            try:
                hash(k)
            except TypeError:
                k = repr(k)
            if k in seen:
                continue
            seen.add(k)
            yield item

    return define_projector(project)
