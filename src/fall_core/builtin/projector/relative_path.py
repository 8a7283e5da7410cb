import os
from typing import Optional

from ...projector import Projector, define_projector


def relative_path(base: Optional[str] = None) -> Projector:
    """
    Create a projector that rewrites `detail["path"]` relative to `base`.

    `base` defaults to the working directory at the time the stream starts.
    Paths outside `base` are left untouched. The item value is rewritten too
    when it was the path itself.
    """
    async def project(host, params, *, signal=None):
        root = os.path.abspath(base or os.getcwd())
        async for item in params.items:
            if signal is not None:
                signal.throw_if_aborted()
            detail = item.detail
            path = detail.get("path") if isinstance(detail, dict) else None
            if not isinstance(path, str):
                yield item
                continue
            abspath = os.path.abspath(path)
            if os.path.commonpath([root, abspath]) != root:
                yield item
                continue
            rel = os.path.relpath(abspath, root)
            update = {"detail": {**detail, "path": rel}}
            if item.value == path:
                update["value"] = rel
            yield item.model_copy(update=update)

    return define_projector(project)
