"""Textual bindings - provide a store to widgets and post change messages."""

from __future__ import annotations

from typing import Any, Callable, Sequence

from textual.containers import Container
from textual.message import Message
from textual.widget import Widget

from .effects import connect_effects
from .errors import StoreNotFoundError
from .store import Store
from .types import SelectorFunc


class StoreChanged(Message):
    """Message posted when the value a widget selected from a store changes."""

    def __init__(
        self,
        store: Store,
        selector_name: str | None,
        old_value: Any,
        new_value: Any,
    ) -> None:
        super().__init__()
        self.store = store
        self.selector_name = selector_name
        self.old_value = old_value
        self.new_value = new_value


class StoreProvider(Container):
    """Widget that provides a store to its descendants."""

    DEFAULT_CSS = """
    StoreProvider {
        width: 100%;
        height: auto;
    }
    """

    def __init__(
        self,
        store: Store,
        *children: Widget,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self._store = store
        self._compose_children = children

    @property
    def store(self) -> Store:
        """Get the provided store."""
        return self._store

    def compose(self):
        yield from self._compose_children


class StoreHandle:
    """
    Handle returned by use_store() - selected value, dispatch, unsubscribe.

    Without selector names the handle exposes the whole state tree.
    """

    __slots__ = ("_store", "_selector", "_selector_name", "_unsubscribers")

    def __init__(
        self,
        store: Store,
        selector: SelectorFunc[Any] | None,
        selector_name: str | None,
        unsubscribers: Sequence[Callable[[], None]] = (),
    ) -> None:
        self._store = store
        self._selector = selector
        self._selector_name = selector_name
        self._unsubscribers = list(unsubscribers)

    @property
    def value(self) -> Any:
        """Get the selected value (or the whole state tree)."""
        state = self._store.get_state()
        if self._selector is None:
            return state
        return self._selector(state)

    @property
    def state(self) -> dict[str, Any]:
        """Get the whole state tree."""
        return self._store.get_state()

    @property
    def store(self) -> Store:
        """Get the store this handle belongs to."""
        return self._store

    @property
    def selector_name(self) -> str | None:
        """Get the registry name of the selected value, if any."""
        return self._selector_name

    def dispatch(self, action: Any) -> Any:
        """Dispatch an action to the store."""
        return self._store.dispatch(action)

    def unsubscribe(self) -> None:
        """Stop posting messages and running effects for this widget."""
        while self._unsubscribers:
            self._unsubscribers.pop()()

    def __call__(self) -> Any:
        """Shorthand to get current value."""
        return self.value


def selector_name_for(selector_names: Sequence[str]) -> str:
    """Registry name of the selector picking ``selector_names`` into a dict."""
    return f"select:{'-'.join(selector_names)}"


def use_store(
    widget: Widget,
    store: Store | None = None,
    *,
    selector_names: Sequence[str] | None = None,
    subscribe: bool = True,
) -> StoreHandle:
    """
    Consume a store from a widget.

    Args:
        widget: The widget consuming the store.
        store: The store. When omitted, the nearest StoreProvider above the
            widget is used.
        selector_names: Selectors or slices to pick into a dict. The
            combined selector is registered once and shared between widgets
            asking for the same names.
        subscribe: Post StoreChanged messages to the widget when the
            selected value changes (default True).

    Returns:
        A StoreHandle with .value and .dispatch().

    Raises:
        StoreNotFoundError: If no store is passed and no provider is found.

    Example:
        ```python
        class TodoList(Widget):
            def on_mount(self):
                self.todos = use_store(self, selector_names=["todos", "filter"])

            def on_store_changed(self, event: StoreChanged) -> None:
                self.refresh()
        ```
    """
    if store is None:
        store = find_store(widget)
        if store is None:
            raise StoreNotFoundError(widget)

    selector: SelectorFunc[Any] | None = None
    name: str | None = None
    if selector_names:
        name = selector_name_for(selector_names)
        selector = store.get_selector_by_name(name) or store.add_selector(
            name, selector_names
        )

    unsubscribers: list[Callable[[], None]] = []

    if subscribe:
        select = selector or (lambda state: state)
        last = [select(store.get_state())]

        def on_store_change() -> None:
            new_value = select(store.get_state())
            old_value = last[0]
            if new_value is old_value:
                return
            last[0] = new_value
            widget.post_message(StoreChanged(store, name, old_value, new_value))

        unsubscribers.append(store.subscribe(on_store_change))

    # Connect @effect decorated methods for this store
    unsubscribers.append(connect_effects(widget, store))

    return StoreHandle(store, selector, name, unsubscribers)


def find_store(widget: Widget) -> Store | None:
    """Find the store of the nearest provider above a widget."""
    current: Widget | None = widget

    while current is not None:
        if isinstance(current, StoreProvider):
            return current.store

        if hasattr(current, "parent") and current.parent is not None:
            current = current.parent
        else:
            break

    return None
