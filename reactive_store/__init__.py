"""
Reactive Store - a Redux-style store whose slices and selectors grow at runtime.

The store holds a state tree of named slices, reduces dispatched actions
through the registered slice reducers and notifies listeners after each
change. Slices and memoized selectors can be added after the store has
started; actions dispatched before the first slice exists are queued and
replayed once it is registered.

Key Features:
- create_store: Explicit store objects, no global singleton
- add_reducers: Register slices at any time
- add_selector: Named, memoized selectors built from slices or other selectors
- subscribe: Listeners notified after every change
- use_store / @effect: Bind a store to Textual widgets

Example:
    ```python
    from typing import Literal

    from reactive_store import Action, create_store

    class Increment(Action):
        type: Literal["counter/increment"] = "counter/increment"
        amount: int = 1

    def counter(state=0, action=None):
        match action:
            case Increment(amount=amount):
                return state + amount
        return state

    store = create_store(name="app")
    store.dispatch(Increment())            # queued, no slices yet
    store.add_reducers({"counter": counter})
    store.get_state()                      # {"counter": 1}

    store.add_selector("summary", ["counter"], lambda n: f"{n} clicks")
    store.select("summary")                # "1 clicks"
    ```
"""

# Actions
from .actions import (
    Action,
    ActionTypes,
    is_plain_object,
    get_action_type,
    has_action_type,
)

# Reducers
from .combine import combine_reducers

# Selectors
from .selectors import (
    Selector,
    SelectorRegistry,
    create_selector,
)

# Listeners
from .listeners import (
    ListenerRegistry,
    Subscription,
)

# Store
from .store import (
    Store,
    create_store,
)

# Configuration
from .config import StoreConfig

# Errors
from .errors import (
    StoreError,
    InvalidActionError,
    UndefinedTypeError,
    ReentrantDispatchError,
    NotCallableError,
    UndefinedStateError,
    SelectorNotFoundError,
    StoreNotFoundError,
)

# Textual bindings
from .bindings import (
    StoreChanged,
    StoreHandle,
    StoreProvider,
    use_store,
)

# Effects
from .effects import (
    effect,
)

# Types
from .types import (
    Reducer,
    Listener,
    SelectorFunc,
    StateTree,
    Combiner,
    StoreEnhancer,
)

__version__ = "0.1.0a1"

__all__ = [
    # Actions
    "Action",
    "ActionTypes",
    "is_plain_object",
    "get_action_type",
    "has_action_type",
    # Reducers
    "combine_reducers",
    # Selectors
    "Selector",
    "SelectorRegistry",
    "create_selector",
    # Listeners
    "ListenerRegistry",
    "Subscription",
    # Store
    "Store",
    "create_store",
    # Configuration
    "StoreConfig",
    # Errors
    "StoreError",
    "InvalidActionError",
    "UndefinedTypeError",
    "ReentrantDispatchError",
    "NotCallableError",
    "UndefinedStateError",
    "SelectorNotFoundError",
    "StoreNotFoundError",
    # Bindings
    "StoreChanged",
    "StoreHandle",
    "StoreProvider",
    "use_store",
    # Effects
    "effect",
    # Types
    "Reducer",
    "Listener",
    "SelectorFunc",
    "StateTree",
    "Combiner",
    "StoreEnhancer",
]
