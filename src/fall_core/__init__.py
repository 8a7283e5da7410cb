"""
Fall Core - item pipeline layer of the Fall list picker.

This package provides:
- Item model (item.py)
- Derivable values (derivable.py)
- Source, Curator and Projector abstractions and their composition
  (source.py, curator.py, projector.py)
- Actions run on a finished selection (action.py)
- Cooperative cancellation (abort.py)
- Host boundary (host.py)
- Builtin components (builtin/)
- Configuration, registry and picker assembly (config.py, registry.py, picker.py)
- Common utilities (common/)
"""

from . import common
from . import builtin

from .abort import AbortController, AbortSignal, abortable
from .item import IdItem, PathDetail, BufnameDetail, aclose_stream
from .derivable import Derivable, Value, Factory, derive, derive_list
from .host import Host, setqflist
from .source import Source, CollectParams, define_source, compose_sources
from .curator import Curator, CurateParams, define_curator, compose_curators
from .projector import (
    Projector,
    ProjectParams,
    define_projector,
    compose_projectors,
    pipe_projectors,
)
from .action import Action, InvokeParams, define_action, compose_actions
from .picker import PickerPipeline, build_picker, materialize
from .registry import ComponentRegistry
from .config import ConfigLoader, FallConfig, PickerConfig, ComponentRef, LoggingConfig
from .exceptions import (
    FallException,
    ConfigError,
    NotFoundError,
    ContractError,
    AbortError,
)

__all__ = [
    # Submodules
    "common",
    "builtin",
    # Cancellation
    "AbortController",
    "AbortSignal",
    "abortable",
    # Items
    "IdItem",
    "aclose_stream",
    "PathDetail",
    "BufnameDetail",
    # Derivable
    "Derivable",
    "Value",
    "Factory",
    "derive",
    "derive_list",
    # Host
    "Host",
    "setqflist",
    # Pipeline
    "Source",
    "CollectParams",
    "define_source",
    "compose_sources",
    "Curator",
    "CurateParams",
    "define_curator",
    "compose_curators",
    "Projector",
    "ProjectParams",
    "define_projector",
    "compose_projectors",
    "pipe_projectors",
    # Actions
    "Action",
    "InvokeParams",
    "define_action",
    "compose_actions",
    # Assembly
    "PickerPipeline",
    "build_picker",
    "materialize",
    "ComponentRegistry",
    "ConfigLoader",
    "FallConfig",
    "PickerConfig",
    "ComponentRef",
    "LoggingConfig",
    # Exceptions
    "FallException",
    "ConfigError",
    "NotFoundError",
    "ContractError",
    "AbortError",
]
