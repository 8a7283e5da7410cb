"""
Derivable values.

A Derivable is either a ready-made value or a zero-argument factory that
builds it. Composition functions resolve their Derivable arguments each time
they run, so a factory yields a fresh instance per pipeline run.
"""
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Tuple, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Value(Generic[T]):
    """An eagerly supplied value."""
    value: T

    def resolve(self) -> T:
        return self.value


@dataclass(frozen=True)
class Factory(Generic[T]):
    """A value deferred until it is resolved."""
    factory: Callable[[], T]

    def resolve(self) -> T:
        return self.factory()


Derivable = Union[Value[T], Factory[T], Callable[[], T], T]


def to_derivable(obj: "Derivable[T]") -> Union[Value[T], Factory[T]]:
    """Normalize `obj` into one of the two explicit variants."""
    if isinstance(obj, (Value, Factory)):
        return obj
    if callable(obj):
        return Factory(obj)
    return Value(obj)


def derive(obj: "Derivable[T]") -> T:
    """Resolve a single Derivable."""
    return to_derivable(obj).resolve()


def derive_list(objs: Iterable["Derivable[T]"]) -> Tuple[T, ...]:
    """Resolve Derivables one by one, keeping their order and number."""
    return tuple(derive(obj) for obj in objs)
