"""Combine slice reducers into one reducer over the whole state tree."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .actions import get_action_type
from .errors import NotCallableError, UndefinedStateError
from .types import Reducer

_MISSING = object()


def combine_reducers(
    reducers: Mapping[str, Reducer[Any, Any]],
) -> Callable[[Mapping[str, Any] | None, Any], dict[str, Any]]:
    """
    Turn a mapping of slice reducers into a single reducer.

    Each key of the state tree is handed to the reducer registered under
    the same name. A slice missing from the incoming state starts from
    ``reducer()``. Keys without a reducer are carried over untouched.

    When every slice reducer returns the object it was given, the incoming
    state object itself is returned, so consumers can detect "no change"
    with ``is``.

    Args:
        reducers: Slice name to reducer function.

    Returns:
        A reducer ``(state, action) -> state``.

    Raises:
        NotCallableError: If a mapping value is not callable.

    Example:
        ```python
        def counter(state=0, action=None):
            if action and action["type"] == "increment":
                return state + 1
            return state

        reducer = combine_reducers({"counter": counter})
        reducer({"counter": 1}, {"type": "increment"})  # {"counter": 2}
        ```
    """
    for slice_name, reducer in reducers.items():
        if not callable(reducer):
            raise NotCallableError(f"reducer for slice '{slice_name}'", reducer)

    final_reducers = dict(reducers)

    def combination(
        state: Mapping[str, Any] | None, action: Any
    ) -> dict[str, Any]:
        if state is None:
            state = {}

        has_changed = False
        next_state: dict[str, Any] = {}

        for slice_name, reducer in final_reducers.items():
            previous = state.get(slice_name, _MISSING)
            if previous is _MISSING:
                previous = reducer()
                has_changed = True
            next_slice = reducer(previous, action)
            if next_slice is None:
                raise UndefinedStateError(slice_name, get_action_type(action))
            next_state[slice_name] = next_slice
            has_changed = has_changed or next_slice is not previous

        if not has_changed and isinstance(state, dict):
            return state

        for key, value in state.items():
            if key not in next_state:
                next_state[key] = value
        return next_state

    return combination
