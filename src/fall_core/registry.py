"""
Component registry.

Maps names to component factories so pickers can be assembled from
configuration. Third-party packages register factories under the entry point
groups listed in `ENTRY_POINT_GROUPS`.
"""
import logging
from functools import partial
from importlib.metadata import entry_points
from typing import Any, Callable, Dict, List

from .derivable import Factory
from .exceptions import ConfigError, NotFoundError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUPS: Dict[str, str] = {
    "source": "fall_core.sources",
    "curator": "fall_core.curators",
    "projector": "fall_core.projectors",
    "action": "fall_core.actions",
}


class ComponentRegistry:
    """
    A registry of named component factories.

    A factory is any callable accepting the component options as keyword
    arguments and returning a Source, Curator, Projector or Action.
    """

    def __init__(self, discover: bool = True, builtins: bool = True):
        self._factories: Dict[str, Dict[str, Callable[..., Any]]] = {
            kind: {} for kind in ENTRY_POINT_GROUPS
        }
        if builtins:
            self.load_builtins()
        if discover:
            self._discover_installed_components()

    def load_builtins(self) -> None:
        """Register the components shipped with fall_core."""
        from .builtin import list_source, unique, regexp, relative_path, quickfix

        self.register("source", "list", list_source)
        self.register("projector", "unique", unique)
        self.register("projector", "regexp", regexp)
        self.register("projector", "relative_path", relative_path)
        self.register("action", "quickfix", quickfix)

    def _discover_installed_components(self) -> None:
        """Scan installed packages for component factories."""
        for kind, group in ENTRY_POINT_GROUPS.items():
            for ep in entry_points(group=group):
                if ep.name in self._factories[kind]:
                    continue
                try:
                    self._factories[kind][ep.name] = ep.load()
                    logger.debug(f"Loaded {kind} '{ep.name}' from {group}")
                except Exception as e:
                    logger.error(f"Failed to load {kind} plugin '{ep.name}': {e}", exc_info=True)
        logger.info(
            "Discovered components: "
            + ", ".join(f"{kind}s={self.names(kind)}" for kind in ENTRY_POINT_GROUPS)
        )

    def _kind(self, kind: str) -> Dict[str, Callable[..., Any]]:
        try:
            return self._factories[kind]
        except KeyError:
            raise ConfigError(
                f"Unknown component kind '{kind}'. Expected one of {list(ENTRY_POINT_GROUPS)}"
            ) from None

    def register(self, kind: str, name: str, factory: Callable[..., Any]) -> None:
        """Register (or replace) a component factory."""
        factories = self._kind(kind)
        if name in factories:
            logger.warning(f"{kind.capitalize()} '{name}' already registered, replacing")
        factories[name] = factory

    def names(self, kind: str) -> List[str]:
        return sorted(self._kind(kind))

    def has(self, kind: str, name: str) -> bool:
        return name in self._kind(kind)

    def get(self, kind: str, name: str, **options: Any) -> Factory:
        """
        Look up a component.

        Returns:
            A Factory Derivable; the component is only built when a
            composition resolves it.

        Raises:
            NotFoundError: If no factory is registered under `name`.
        """
        factories = self._kind(kind)
        if name not in factories:
            raise NotFoundError(
                f"{kind.capitalize()} '{name}' not found. Available: {sorted(factories)}",
                context={"kind": kind, "name": name},
            )
        return Factory(partial(factories[name], **options))
