"""Exception hierarchy for reactive-store."""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base exception for all reactive-store errors."""


class InvalidActionError(StoreError):
    """Raised when a dispatched value is not a plain action record."""

    def __init__(self, action: Any) -> None:
        self.action = action
        super().__init__(
            f"Actions must be plain records (dict or Action), "
            f"got {type(action).__name__}. "
            f"Use an enhancer for async or callable actions."
        )


class UndefinedTypeError(StoreError):
    """Raised when an action has no ``type``."""

    def __init__(self, action: Any) -> None:
        self.action = action
        super().__init__(
            'Actions may not have an undefined "type" property. '
            "Have you misspelled a constant?"
        )


class ReentrantDispatchError(StoreError):
    """Raised when dispatch is called while another dispatch is running."""

    def __init__(self, operation: str = "dispatch") -> None:
        self.operation = operation
        super().__init__(
            f"Reducers and listeners may not {operation} while an action is "
            f"being dispatched."
        )


class NotCallableError(StoreError, TypeError):
    """Raised when a listener, reducer or enhancer is not callable."""

    def __init__(self, kind: str, value: Any) -> None:
        self.kind = kind
        self.value = value
        super().__init__(
            f"Expected the {kind} to be callable, got {type(value).__name__}."
        )


class UndefinedStateError(StoreError):
    """Raised when a slice reducer returns ``None``."""

    def __init__(self, slice_name: str, action_type: Any = None) -> None:
        self.slice_name = slice_name
        self.action_type = action_type
        if action_type is None:
            detail = "during initialization"
        else:
            detail = f"for action {action_type!r}"
        super().__init__(
            f"Reducer for slice '{slice_name}' returned None {detail}. "
            f"Return the previous state for unknown actions and an initial "
            f"value when called with no arguments."
        )


class SelectorNotFoundError(StoreError, KeyError):
    """Raised when a named selector is evaluated but was never registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"No selector registered under '{self.name}'."


class StoreNotFoundError(StoreError, LookupError):
    """Raised when a widget asks for a store and none is reachable."""

    def __init__(self, widget: Any) -> None:
        self.widget = widget
        super().__init__(
            f"Store not found in widget tree for {widget.__class__.__name__}. "
            f"Pass the store explicitly or mount a StoreProvider above this widget."
        )
