"""Type definitions for reactive-store."""

from typing import Any, Callable, Mapping, Protocol, TypeVar

# Type variables
T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
A = TypeVar("A")  # Action type

StateTree = dict[str, Any]


class Reducer(Protocol[T, A]):
    """Protocol for reducer functions."""

    def __call__(self, state: T = ..., action: A = ...) -> T:
        """Process an action and return new state.

        Called with no arguments, returns the initial state.
        """
        ...


class Listener(Protocol):
    """Protocol for store listeners."""

    def __call__(self) -> None:
        """Called after every successful dispatch or slice registration."""
        ...


class SelectorFunc(Protocol[T_co]):
    """Protocol for selectors."""

    def __call__(self, state: Mapping[str, Any]) -> T_co:
        """Compute a value from the state tree."""
        ...


Combiner = Callable[..., Any]

StoreEnhancer = Callable[[Callable[..., Any]], Callable[..., Any]]
