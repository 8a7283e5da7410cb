import re
from typing import Iterable, List, Pattern, Union

from ...item import IdItem
from ...projector import Projector, define_projector


def _compile(patterns: Iterable[Union[str, Pattern[str]]]) -> List[Pattern[str]]:
    return [p if isinstance(p, re.Pattern) else re.compile(p) for p in patterns]


def regexp(
    includes: Iterable[Union[str, Pattern[str]]] = (),
    excludes: Iterable[Union[str, Pattern[str]]] = (),
    attr: str = "value",
) -> Projector:
    """
    Create a projector that filters items with regular expressions.

    An item is kept when `attr` matches at least one include pattern (or no
    include pattern was given) and matches no exclude pattern. `attr` is
    "value" or a key of the item detail; items lacking it are dropped.
    """
    include_patterns = _compile(includes)
    exclude_patterns = _compile(excludes)

    def _target(item: IdItem):
        if attr == "value":
            return item.value
        if isinstance(item.detail, dict):
            return item.detail.get(attr)
        return getattr(item.detail, attr, None)

    async def project(host, params, *, signal=None):
        async for item in params.items:
            if signal is not None:
                signal.throw_if_aborted()
            target = _target(item)
            if not isinstance(target, str):
                continue
            if include_patterns and not any(p.search(target) for p in include_patterns):
                continue
            if any(p.search(target) for p in exclude_patterns):
                continue
            yield item

    return define_projector(project)
