"""Store - dispatch engine with dynamic slices and named selectors."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from .actions import get_action_type, has_action_type, init_action, is_plain_object
from .combine import combine_reducers
from .config import StoreConfig
from .errors import (
    InvalidActionError,
    NotCallableError,
    ReentrantDispatchError,
    SelectorNotFoundError,
    UndefinedStateError,
    UndefinedTypeError,
)
from .listeners import ListenerRegistry, Subscription
from .selectors import Selector, SelectorRegistry
from .types import Combiner, Listener, Reducer, SelectorFunc, StateTree, StoreEnhancer

logger = logging.getLogger(__name__)


def _pending_reducer(state: Any, action: Any) -> Any:
    """Placeholder installed until the first slice is registered."""
    return state


class Store:
    """
    A state container whose slices and selectors can be added at runtime.

    Until the first slice is registered with ``add_reducers``, dispatched
    actions are queued instead of reduced. Registering the first slice
    replays them once, in order, and notifies listeners a single time.

    Example:
        ```python
        def counter(state=0, action=None):
            if action and action["type"] == "increment":
                return state + 1
            return state

        store = create_store()
        store.dispatch({"type": "increment"})   # queued
        store.add_reducers({"counter": counter})
        store.get_state()                       # {"counter": 1}

        store.add_selector("doubled", ["counter"], lambda n: n * 2)
        store.select("doubled")                 # 2
        ```

    Instances are independent: create one at the application entry point
    and pass it to whatever needs it.
    """

    def __init__(
        self,
        *,
        config: StoreConfig | None = None,
        name: str | None = None,
    ) -> None:
        """
        Create an empty store and queue the reserved INIT action.

        Args:
            config: Store configuration.
            name: Optional name for debugging. Overrides ``config.name``.
        """
        config = config or StoreConfig()
        if name is not None:
            config = config.model_copy(update={"name": name})

        self._config = config
        self._state: StateTree = {}
        self._reducer: Callable[[Any, Any], Any] = _pending_reducer
        self._reducers: dict[str, Reducer[Any, Any]] = {}
        self._is_dispatching = False
        self._pending: list[Any] = []
        self._listeners = ListenerRegistry()
        self._selectors = SelectorRegistry()

        self.dispatch(init_action(config.init_action_type))

    # --- State access ---

    @property
    def name(self) -> str | None:
        """Get store name."""
        return self._config.name

    @property
    def config(self) -> StoreConfig:
        """Get the store configuration."""
        return self._config

    @property
    def is_dispatching(self) -> bool:
        """True while a reducer or listener is running."""
        return self._is_dispatching

    @property
    def pending_actions(self) -> tuple[Any, ...]:
        """Actions waiting for the first slice."""
        return tuple(self._pending)

    @property
    def reducers(self) -> dict[str, Reducer[Any, Any]]:
        """Get a copy of the registered slice reducers."""
        return dict(self._reducers)

    def get_state(self) -> StateTree:
        """
        Get the current state tree.

        The returned dict is replaced, never modified, by later dispatches.
        Treat it as read-only.
        """
        return self._state

    # --- Dispatch ---

    def dispatch(self, action: Any) -> Any:
        """
        Dispatch an action.

        Args:
            action: A dict or Action with a ``type``.

        Returns:
            The action itself, or None when it was queued because no slice
            is registered yet.

        Raises:
            InvalidActionError: If action is not a dict or Action.
            UndefinedTypeError: If action has no type.
            ReentrantDispatchError: If called from a reducer or listener.
        """
        return self._dispatch(action, notify=True)

    def _dispatch(self, action: Any, *, notify: bool) -> Any:
        if not is_plain_object(action):
            raise InvalidActionError(action)

        if not has_action_type(action):
            raise UndefinedTypeError(action)
        action_type = get_action_type(action)

        if self._is_dispatching:
            raise ReentrantDispatchError()

        if self._reducer is _pending_reducer:
            self._pending.append(action)
            logger.debug(
                "Store %r has no slices yet, queued %r (%d pending)",
                self.name,
                action_type,
                len(self._pending),
            )
            return None

        if self._config.log_actions:
            logger.debug("Store %r dispatching %r", self.name, action_type)

        listeners = self._listeners.snapshot()
        try:
            self._is_dispatching = True
            self._state = self._reducer(self._state, action)
            if notify:
                self._listeners.notify(listeners)
        finally:
            self._is_dispatching = False

        return action

    def _notify(self) -> None:
        listeners = self._listeners.snapshot()
        try:
            self._is_dispatching = True
            self._listeners.notify(listeners)
        finally:
            self._is_dispatching = False

    # --- Listeners ---

    def subscribe(self, listener: Listener) -> Subscription:
        """
        Call ``listener`` after every dispatch and slice registration.

        Listeners added or removed while listeners are being notified take
        effect from the next dispatch.

        Args:
            listener: A no-argument callable.

        Returns:
            A callable that removes the listener. Calling it twice is a no-op.

        Raises:
            NotCallableError: If listener is not callable.
        """
        return self._listeners.subscribe(listener)

    # --- Reducers ---

    def add_reducers(self, reducers: Mapping[str, Reducer[Any, Any]]) -> None:
        """
        Register slices.

        Each new slice starts from ``reducer()``. A slice name that is
        already registered keeps its reducer and its state. The first call
        with at least one slice replays queued actions. Listeners are
        notified once.

        Args:
            reducers: Slice name to reducer.

        Raises:
            NotCallableError: If a reducer is not callable.
            UndefinedStateError: If a new reducer returns None when called
                with no arguments.
            ReentrantDispatchError: If called from a reducer or listener.
        """
        if self._is_dispatching:
            raise ReentrantDispatchError("add reducers")

        for slice_name, reducer in reducers.items():
            if not callable(reducer):
                raise NotCallableError(f"reducer for slice '{slice_name}'", reducer)

        if not reducers:
            return

        initial_state: dict[str, Any] = {}
        for slice_name, reducer in reducers.items():
            if slice_name in self._reducers:
                continue
            value = reducer()
            if value is None:
                raise UndefinedStateError(slice_name)
            initial_state[slice_name] = value

        for slice_name in reducers:
            self._selectors.add_base_selector(slice_name)

        merged = dict(self._reducers)
        for slice_name, reducer in reducers.items():
            merged.setdefault(slice_name, reducer)
        self._reducers = merged
        self._reducer = combine_reducers(merged)

        next_state = dict(self._state)
        for slice_name, value in initial_state.items():
            next_state.setdefault(slice_name, value)
        self._state = next_state

        logger.debug(
            "Store %r registered slices %s", self.name, sorted(initial_state)
        )

        if self._pending:
            logger.debug(
                "Store %r replaying %d queued actions",
                self.name,
                len(self._pending),
            )

        # An action that raises is dropped; the rest stay queued for the
        # next registration.
        try:
            while self._pending:
                self._dispatch(self._pending.pop(0), notify=False)
        finally:
            self._notify()

    def replace_reducer(self, next_reducer: Reducer[Any, Any]) -> None:
        """
        Replace the reducer computing the whole state tree.

        Dispatches the reserved INIT action afterwards so slices can
        populate their initial values. Queued actions stay queued until a
        slice is registered with ``add_reducers``.

        Raises:
            NotCallableError: If next_reducer is not callable.
            ReentrantDispatchError: If called from a reducer or listener.
        """
        if not callable(next_reducer):
            raise NotCallableError("reducer", next_reducer)
        if self._is_dispatching:
            raise ReentrantDispatchError("replace the reducer")

        self._reducer = next_reducer
        logger.debug("Store %r reducer replaced", self.name)
        self._dispatch(init_action(self._config.init_action_type), notify=True)

    # --- Selectors ---

    def add_selector(
        self,
        name: str,
        input_names: Sequence[str],
        combiner: Combiner | None = None,
    ) -> Selector[Any]:
        """
        Register a memoized selector.

        Args:
            name: Selector name. An existing selector of that name is replaced.
            input_names: Names of registered selectors or slices. Unknown
                names get a selector returning the slice of that name.
            combiner: Receives one value per input. Without it the selector
                returns ``{input_name: value}``.

        Returns:
            The selector, callable with a state tree.
        """
        selector = self._selectors.add_selector(name, input_names, combiner)
        logger.debug("Store %r registered selector %r", self.name, name)
        return selector

    def add_selectors(
        self, selectors: Mapping[str, Sequence[Any]]
    ) -> dict[str, Selector[Any]]:
        """Register selectors given as ``{name: (input_names, combiner)}``."""
        return self._selectors.add_selectors(selectors)

    def get_selector_by_name(self, name: str) -> SelectorFunc[Any] | None:
        """Get a selector by name, or None."""
        return self._selectors.get(name)

    def select(self, name: str) -> Any:
        """
        Evaluate a named selector against the current state.

        Raises:
            SelectorNotFoundError: If no selector has that name.
        """
        selector = self._selectors.get(name)
        if selector is None:
            raise SelectorNotFoundError(name)
        return selector(self._state)

    @property
    def selector_names(self) -> list[str]:
        return list(self._selectors)

    # --- Testing ---

    def reset(self) -> None:
        """
        Drop all slices, selectors and queued actions.

        Listeners are kept. Meant for test isolation.
        """
        self._reducers = {}
        self._selectors.clear()
        self._pending = []
        self._reducer = _pending_reducer
        self._state = {}
        logger.debug("Store %r reset", self.name)

    def __repr__(self) -> str:
        name = f" name={self.name!r}" if self.name else ""
        return f"Store(slices={list(self._reducers)!r}{name})"


def create_store(
    reducer: Mapping[str, Reducer[Any, Any]] | Reducer[Any, Any] | None = None,
    *,
    enhancer: StoreEnhancer | None = None,
    config: StoreConfig | None = None,
    name: str | None = None,
) -> Store:
    """
    Create a new store.

    Args:
        reducer: Either a mapping of slice reducers, registered with
            ``add_reducers``, or a single reducer installed with
            ``replace_reducer``. Omit it to add slices later.
        enhancer: Called with ``create_store``; must return a function with
            the same signature. Used to wrap the store, e.g. its dispatch.
        config: Store configuration.
        name: Optional name for debugging.

    Returns:
        A Store (or whatever the enhancer returns).

    Raises:
        NotCallableError: If enhancer is given but not callable.

    Example:
        ```python
        store = create_store({"todos": todos_reducer}, name="app")
        ```
    """
    if enhancer is not None:
        if not callable(enhancer):
            raise NotCallableError("enhancer", enhancer)
        return enhancer(create_store)(reducer, config=config, name=name)

    store = Store(config=config, name=name)

    if isinstance(reducer, Mapping):
        store.add_reducers(reducer)
    elif reducer is not None:
        store.replace_reducer(reducer)

    return store