"""Effect decorator for reacting to selector changes in widgets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, TypeVar

if TYPE_CHECKING:
    from .store import Store

F = TypeVar("F", bound=Callable[..., Any])

# Attribute name to store effect metadata on methods
EFFECT_ATTR = "__reactive_store_effects__"


class EffectRegistration:
    """Stores effect registration info on a method."""

    __slots__ = ("targets",)

    def __init__(self) -> None:
        self.targets: list[str] = []

    def add(self, target: str) -> None:
        if target not in self.targets:
            self.targets.append(target)


def get_effect_registration(method: Callable[..., Any]) -> EffectRegistration | None:
    """Get effect registration from a method, if any."""
    return getattr(method, EFFECT_ATTR, None)


def effect(*selector_names: str) -> Callable[[F], F]:
    """
    Decorator to mark a widget method as an effect of named selectors.

    The method is called with ``(old, new)`` whenever the value of one of
    the selectors changes (by identity) after a dispatch.

    Args:
        *selector_names: Names of selectors or slices to watch.

    Example:
        ```python
        class TodoCount(Static):
            def on_mount(self):
                self.todos = use_store(self, store)

            @effect("visible_todos")
            def on_visible_change(self, old, new):
                self.update(f"{len(new)} items")
        ```
    """
    if not selector_names:
        raise ValueError("@effect requires at least one selector name")

    def decorator(method: F) -> F:
        registration = get_effect_registration(method)
        if registration is None:
            registration = EffectRegistration()
            setattr(method, EFFECT_ATTR, registration)

        for name in selector_names:
            registration.add(name)

        return method

    return decorator


def find_effects(widget: Any) -> dict[str, list[Callable[[Any, Any], Any]]]:
    """Map selector names to the bound effect methods of a widget."""
    effects: dict[str, list[Callable[[Any, Any], Any]]] = {}

    for attr_name in dir(type(widget)):
        if attr_name.startswith("_"):
            continue

        try:
            # Look at the class first, properties must not run here
            class_attr = getattr(type(widget), attr_name, None)
            if class_attr is None:
                continue

            registration = get_effect_registration(class_attr)
            if registration is None:
                continue

            method = getattr(widget, attr_name)
            if not callable(method):
                continue
        except (AttributeError, AssertionError, TypeError):
            continue

        for name in registration.targets:
            effects.setdefault(name, []).append(method)

    return effects


def connect_effects(widget: Any, store: Store) -> Callable[[], None]:
    """
    Connect a widget's @effect methods to a store.

    Selector names that are not registered yet get a base selector for
    the slice of the same name.

    Args:
        widget: The widget instance.
        store: The store to watch.

    Returns:
        A function that disconnects the effects.
    """
    effects = find_effects(widget)
    if not effects:
        return lambda: None

    selectors = {}
    for name in effects:
        selector = store.get_selector_by_name(name)
        if selector is None:
            selector = store.add_selector(name, [name], lambda value: value)
        selectors[name] = selector

    state = store.get_state()
    last_values = {name: selector(state) for name, selector in selectors.items()}

    def on_store_change() -> None:
        current = store.get_state()
        for name, selector in selectors.items():
            old = last_values[name]
            new = selector(current)
            if new is old:
                continue
            last_values[name] = new
            for method in effects[name]:
                method(old, new)

    return store.subscribe(on_store_change)
