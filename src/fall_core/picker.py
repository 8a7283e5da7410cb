"""
Picker pipelines.

A PickerPipeline bundles what a driver needs for one picker session: the
origin producing items (a Source or a Curator, usually with projectors piped
to it) and the named actions available once a selection is made.
"""
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator, Dict, List, Optional, Sequence, Union

from .action import Action, InvokeParams
from .curator import Curator, CurateParams
from .derivable import Derivable, derive
from .exceptions import ContractError, NotFoundError
from .item import IdItem, aclose_stream
from .projector import pipe_projectors
from .source import CollectParams, Source

if TYPE_CHECKING:
    from .abort import AbortSignal
    from .config import PickerConfig
    from .host import Host
    from .registry import ComponentRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickerPipeline:
    origin: Union[Source, Curator]
    actions: Dict[str, Derivable[Action]] = field(default_factory=dict)
    default_action: Optional[str] = None

    def stream(
        self,
        host: "Host",
        args: Sequence[str] = (),
        query: str = "",
        *,
        signal: Optional["AbortSignal"] = None,
    ) -> AsyncIterator[IdItem]:
        """Start a new run of the origin. `query` is ignored by Sources."""
        if isinstance(self.origin, Source):
            return self.origin.collect(host, CollectParams(args=list(args)), signal=signal)
        return self.origin.curate(host, CurateParams(args=list(args), query=query), signal=signal)

    async def invoke(
        self,
        name: Optional[str],
        host: "Host",
        filtered_items: List[IdItem],
        selected_items: Optional[List[IdItem]] = None,
        item: Optional[IdItem] = None,
        *,
        signal: Optional["AbortSignal"] = None,
    ) -> Optional[bool]:
        """
        Run the named action (or the default action when `name` is None).

        Raises:
            NotFoundError: If no action with that name is configured.
        """
        name = name or self.default_action
        if name is None or name not in self.actions:
            raise NotFoundError(
                f"Action '{name}' not found. Available: {sorted(self.actions)}",
                context={"action": name},
            )
        action = derive(self.actions[name])
        params = InvokeParams(filtered_items=filtered_items, selected_items=selected_items, item=item)
        logger.debug(f"Invoking action '{name}' on {len(filtered_items)} items")
        return await action.invoke(host, params, signal=signal)


async def materialize(stream: AsyncIterator[IdItem], limit: Optional[int] = None) -> List[IdItem]:
    """Pull a stream into a list, stopping after `limit` items when given."""
    items: List[IdItem] = []
    try:
        if limit is not None and limit <= 0:
            return items
        async for item in stream:
            items.append(item)
            if limit is not None and len(items) >= limit:
                break
    finally:
        await aclose_stream(stream)
    return items


def build_picker(config: "PickerConfig", registry: "ComponentRegistry") -> PickerPipeline:
    """
    Assemble a PickerPipeline from configuration.

    Components are passed on as Factory Derivables, so each picker run builds
    its own projector and action instances.
    """
    if config.source is not None:
        kind, ref = "source", config.source
    elif config.curator is not None:
        kind, ref = "curator", config.curator
    else:
        raise ContractError("A picker needs a source or a curator")

    origin: Any = derive(registry.get(kind, ref.name, **ref.options))
    expected = Source if kind == "source" else Curator
    if not isinstance(origin, expected):
        raise ContractError(
            f"{kind.capitalize()} '{ref.name}' built {origin!r}, which is not a {expected.__name__}",
            context={"kind": kind, "name": ref.name},
        )
    if config.projectors:
        projectors = [registry.get("projector", p.name, **p.options) for p in config.projectors]
        origin = pipe_projectors(origin, *projectors)

    actions = {
        name: registry.get("action", a.name, **a.options) for name, a in config.actions.items()
    }
    return PickerPipeline(origin=origin, actions=actions, default_action=config.default_action)
