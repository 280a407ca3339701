"""Memoized selectors and the named selector registry."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, Mapping, Sequence, TypeVar

from .errors import NotCallableError
from .types import Combiner, SelectorFunc

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class Selector(Generic[T]):
    """
    A memoized derived value over the state tree.

    The selector evaluates its input selectors against the state and passes
    their results to ``combiner``. The combiner only runs again when at
    least one input result differs by identity from the previous call;
    otherwise the cached result object is returned.

    Example:
        ```python
        visible = Selector(
            [lambda s: s["todos"], lambda s: s["filter"]],
            lambda todos, f: [t for t in todos if f in t],
        )
        visible(state) is visible(state)  # True
        ```
    """

    __slots__ = (
        "_inputs",
        "_combiner",
        "_name",
        "_last_state",
        "_last_args",
        "_last_result",
        "_recomputations",
    )

    def __init__(
        self,
        inputs: Sequence[SelectorFunc[Any]],
        combiner: Callable[..., T],
        *,
        name: str | None = None,
    ) -> None:
        for selector in inputs:
            if not callable(selector):
                raise NotCallableError("input selector", selector)
        if not callable(combiner):
            raise NotCallableError("selector combiner", combiner)

        self._inputs = tuple(inputs)
        self._combiner = combiner
        self._name = name
        self._last_state: Any = _UNSET
        self._last_args: tuple[Any, ...] | None = None
        self._last_result: Any = _UNSET
        self._recomputations = 0

    @property
    def name(self) -> str | None:
        """Get the registry name, if any."""
        return self._name

    @property
    def inputs(self) -> tuple[SelectorFunc[Any], ...]:
        """Get the input selectors."""
        return self._inputs

    def __call__(self, state: Any) -> T:
        if state is self._last_state and self._last_result is not _UNSET:
            return self._last_result

        args = tuple(selector(state) for selector in self._inputs)

        if self._last_args is None or not _same_args(args, self._last_args):
            self._last_result = self._combiner(*args)
            self._last_args = args
            self._recomputations += 1

        self._last_state = state
        return self._last_result

    def recomputations(self) -> int:
        """Number of times the combiner has run."""
        return self._recomputations

    def reset_recomputations(self) -> None:
        """Set the recomputation counter back to zero."""
        self._recomputations = 0

    def __repr__(self) -> str:
        name = f" name={self._name!r}" if self._name else ""
        return f"Selector(inputs={len(self._inputs)}{name})"


def _same_args(args: tuple[Any, ...], previous: tuple[Any, ...]) -> bool:
    if len(args) != len(previous):
        return False
    return all(a is b for a, b in zip(args, previous))


def create_selector(
    inputs: Sequence[SelectorFunc[Any]],
    combiner: Callable[..., T],
    *,
    name: str | None = None,
) -> Selector[T]:
    """
    Create a memoized selector.

    Args:
        inputs: Selectors whose results are passed to ``combiner``.
        combiner: Function computing the derived value from input results.
        name: Optional name for debugging.

    Returns:
        A Selector.
    """
    return Selector(inputs, combiner, name=name)


def pick_combiner(input_names: Sequence[str]) -> Callable[..., dict[str, Any]]:
    """Build a combiner that maps each input name to its computed value."""
    names = tuple(input_names)

    def pick(*values: Any) -> dict[str, Any]:
        return dict(zip(names, values))

    return pick


def base_selector(slice_name: str) -> Callable[[Mapping[str, Any]], Any]:
    """Build a selector returning one slice of the state tree."""

    def select_slice(state: Mapping[str, Any]) -> Any:
        return state.get(slice_name)

    select_slice.__name__ = f"select_{slice_name}"
    return select_slice


class SelectorRegistry:
    """
    Named selectors for one store.

    Input names refer to other registered selectors. A name that is not
    registered yet gets a base selector projecting the slice of the same
    name, so selectors can be declared before their slices exist.
    """

    __slots__ = ("_selectors",)

    def __init__(self) -> None:
        self._selectors: dict[str, SelectorFunc[Any]] = {}

    def add_base_selector(self, slice_name: str) -> None:
        """Register ``state -> state[slice_name]`` unless the name is taken."""
        if slice_name not in self._selectors:
            self._selectors[slice_name] = base_selector(slice_name)

    def add_selector(
        self,
        name: str,
        input_names: Iterable[str],
        combiner: Combiner | None = None,
    ) -> Selector[Any]:
        """
        Register a memoized selector under ``name``.

        Args:
            name: Registry name. An existing entry is replaced.
            input_names: Names of the input selectors, resolved now.
            combiner: Receives one value per input. Defaults to a combiner
                building ``{input_name: value}``.

        Returns:
            The new Selector.
        """
        input_names = list(input_names)
        if combiner is None:
            combiner = pick_combiner(input_names)

        for input_name in input_names:
            self.add_base_selector(input_name)

        inputs = [self._selectors[input_name] for input_name in input_names]
        selector = Selector(inputs, combiner, name=name)

        if name in self._selectors:
            logger.debug("Replacing selector %r", name)
        self._selectors[name] = selector
        return selector

    def add_selectors(
        self,
        selectors: Mapping[str, Sequence[Any]],
    ) -> dict[str, Selector[Any]]:
        """
        Register several selectors at once.

        Args:
            selectors: Name to ``(input_names,)`` or
                ``(input_names, combiner)``.

        Returns:
            Name to the registered Selector.
        """
        return {
            name: self.add_selector(name, *definition)
            for name, definition in selectors.items()
        }

    def get(self, name: str) -> SelectorFunc[Any] | None:
        """Get a selector by name, or None."""
        return self._selectors.get(name)

    def clear(self) -> None:
        """Remove every selector."""
        self._selectors.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._selectors

    def __len__(self) -> int:
        return len(self._selectors)

    def __iter__(self):
        return iter(self._selectors)
