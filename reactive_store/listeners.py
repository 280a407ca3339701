"""Ordered listener collection with snapshot-at-dispatch semantics."""

from __future__ import annotations

from typing import Callable

from .errors import NotCallableError


class Subscription:
    """One registration of a listener. Removing it is idempotent."""

    __slots__ = ("listener", "_registry", "_active")

    def __init__(self, listener: Callable[[], None], registry: ListenerRegistry) -> None:
        self.listener = listener
        self._registry = registry
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Remove the listener. Calling it again does nothing."""
        if not self._active:
            return
        self._active = False
        self._registry._remove(self)

    def __call__(self) -> None:
        self.unsubscribe()


class ListenerRegistry:
    """
    Listeners of a store, in subscription order.

    The collection is an immutable tuple replaced on every change, so a
    snapshot taken when a dispatch starts is unaffected by listeners that
    subscribe or unsubscribe while it is being notified.

    Example:
        ```python
        listeners = ListenerRegistry()
        unsubscribe = listeners.subscribe(lambda: print("changed"))
        listeners.notify()
        unsubscribe()
        unsubscribe()  # no-op
        ```
    """

    __slots__ = ("_subscriptions",)

    def __init__(self) -> None:
        self._subscriptions: tuple[Subscription, ...] = ()

    def subscribe(self, listener: Callable[[], None]) -> Subscription:
        """
        Add a listener.

        Args:
            listener: Called with no arguments after each change.

        Returns:
            A callable Subscription that removes the listener.

        Raises:
            NotCallableError: If listener is not callable.
        """
        if not callable(listener):
            raise NotCallableError("listener", listener)

        subscription = Subscription(listener, self)
        self._subscriptions = (*self._subscriptions, subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions = tuple(
            s for s in self._subscriptions if s is not subscription
        )

    def snapshot(self) -> tuple[Callable[[], None], ...]:
        """Get the listeners registered right now."""
        return tuple(s.listener for s in self._subscriptions)

    def notify(self, snapshot: tuple[Callable[[], None], ...] | None = None) -> None:
        """Call each listener of ``snapshot`` (default: a fresh one) in order."""
        if snapshot is None:
            snapshot = self.snapshot()
        for listener in snapshot:
            listener()

    def __len__(self) -> int:
        return len(self._subscriptions)
