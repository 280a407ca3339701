"""Tests for Store and create_store."""

import logging
from typing import Any, Literal, get_type_hints
from unittest.mock import MagicMock

import pytest

from reactive_store import (
    Action,
    ActionTypes,
    Combiner,
    InvalidActionError,
    Listener,
    NotCallableError,
    Reducer,
    ReentrantDispatchError,
    SelectorFunc,
    SelectorNotFoundError,
    Store,
    StoreConfig,
    StoreEnhancer,
    UndefinedStateError,
    UndefinedTypeError,
    create_store,
)


class Increment(Action):
    type: Literal["counter/increment"] = "counter/increment"
    amount: int = 1


class AddTodo(Action):
    type: Literal["todos/add"] = "todos/add"
    text: str


def counter(state=0, action=None):
    match action:
        case Increment(amount=amount):
            return state + amount
        case {"type": "X"}:
            return state + 1
    return state


def todos(state=None, action=None):
    if state is None:
        state = []
    match action:
        case AddTodo(text=text):
            return [*state, text]
    return state


@pytest.fixture
def store():
    return create_store({"counter": counter, "todos": todos}, name="test")


class TestCreateStore:
    """Tests for create_store."""

    def test_creates_empty_store(self):
        store = create_store()

        assert isinstance(store, Store)
        assert store.get_state() == {}

    def test_init_action_is_queued(self):
        store = create_store()

        assert len(store.pending_actions) == 1
        assert store.pending_actions[0].type == ActionTypes.INIT

    def test_with_reducer_mapping(self, store):
        assert store.get_state() == {"counter": 0, "todos": []}
        assert store.pending_actions == ()

    def test_with_single_reducer(self):
        def root(state, action):
            return {**state, "last": action.type if isinstance(action, Action) else action["type"]}

        store = create_store(root)

        assert store.get_state() == {"last": ActionTypes.INIT}

    def test_name(self):
        assert create_store(name="app").name == "app"

    def test_name_overrides_config(self):
        store = create_store(config=StoreConfig(name="config"), name="arg")

        assert store.name == "arg"
        assert store.config.name == "arg"

    def test_custom_init_action_type(self):
        store = create_store(config=StoreConfig(init_action_type="@@app/INIT"))

        assert store.pending_actions[0].type == "@@app/INIT"

    def test_stores_are_independent(self):
        first = create_store({"counter": counter})
        second = create_store({"counter": counter})

        first.dispatch(Increment())

        assert first.get_state() == {"counter": 1}
        assert second.get_state() == {"counter": 0}

    def test_enhancer(self):
        dispatched = []

        def logging_enhancer(next_create_store):
            def enhanced(*args, **kwargs):
                store = next_create_store(*args, **kwargs)
                original = store.dispatch

                def dispatch(action):
                    dispatched.append(action)
                    return original(action)

                store.dispatch = dispatch
                return store

            return enhanced

        store = create_store({"counter": counter}, enhancer=logging_enhancer)
        action = Increment()
        store.dispatch(action)

        assert dispatched == [action]
        assert store.get_state() == {"counter": 1}

    def test_enhancer_must_be_callable(self):
        with pytest.raises(NotCallableError, match="enhancer"):
            create_store(enhancer="nope")


class TestDispatch:
    """Tests for dispatch."""

    def test_returns_action(self, store):
        action = Increment()

        assert store.dispatch(action) is action

    def test_returns_dict_action(self, store):
        action = {"type": "X"}

        assert store.dispatch(action) is action
        assert store.get_state()["counter"] == 1

    def test_updates_state(self, store):
        store.dispatch(Increment(amount=2))
        store.dispatch(AddTodo(text="milk"))

        assert store.get_state() == {"counter": 2, "todos": ["milk"]}

    def test_state_replaced_not_mutated(self, store):
        before = store.get_state()

        store.dispatch(Increment())

        assert store.get_state() is not before
        assert before == {"counter": 0, "todos": []}

    def test_unknown_action_keeps_state_reference(self, store):
        before = store.get_state()

        store.dispatch({"type": "unknown"})

        assert store.get_state() is before

    @pytest.mark.parametrize("action", [None, [], "increment", 1, object()])
    def test_rejects_non_plain_actions(self, store, action):
        with pytest.raises(InvalidActionError):
            store.dispatch(action)

    def test_rejects_missing_type(self, store):
        with pytest.raises(UndefinedTypeError):
            store.dispatch({"payload": 1})

    def test_accepts_none_type(self, store):
        action = {"type": None}

        assert store.dispatch(action) is action
        assert store.dispatch(Action(type=None)) == Action(type=None)

    def test_validation_happens_before_queueing(self):
        store = create_store()

        with pytest.raises(UndefinedTypeError):
            store.dispatch({})

        assert len(store.pending_actions) == 1

    def test_notifies_listeners(self, store):
        listener = MagicMock()
        store.subscribe(listener)

        store.dispatch(Increment())

        listener.assert_called_once_with()

    def test_listener_sees_new_state(self, store):
        seen = []
        store.subscribe(lambda: seen.append(store.get_state()["counter"]))

        store.dispatch(Increment())

        assert seen == [1]

    def test_reducer_error_clears_dispatching_flag(self):
        def explode(state=0, action=None):
            if action is not None and getattr(action, "type", None) == "boom":
                raise RuntimeError("reducer failed")
            return state

        store = create_store({"explode": explode})

        with pytest.raises(RuntimeError):
            store.dispatch(Action(type="boom"))

        assert not store.is_dispatching
        assert store.dispatch(Action(type="fine")) is not None

    def test_listener_error_propagates_and_clears_flag(self, store):
        store.subscribe(MagicMock(side_effect=RuntimeError("listener failed")))

        with pytest.raises(RuntimeError):
            store.dispatch(Increment())

        assert not store.is_dispatching
        assert store.get_state()["counter"] == 1

    def test_log_actions(self, caplog):
        store = create_store({"counter": counter}, config=StoreConfig(log_actions=True))

        with caplog.at_level(logging.DEBUG, logger="reactive_store.store"):
            store.dispatch(Increment())

        assert "counter/increment" in caplog.text


class TestReentrancy:
    """Tests for the no-nested-dispatch rule."""

    def test_dispatch_from_reducer(self):
        holder = {}

        def sneaky(state=0, action=None):
            if action is not None and getattr(action, "type", None) == "sneak":
                holder["store"].dispatch(Action(type="other"))
            return state

        store = create_store({"sneaky": sneaky})
        holder["store"] = store

        with pytest.raises(ReentrantDispatchError):
            store.dispatch(Action(type="sneak"))

        assert not store.is_dispatching

    def test_dispatch_from_listener(self, store):
        store.subscribe(lambda: store.dispatch(Increment()))

        with pytest.raises(ReentrantDispatchError):
            store.dispatch(Increment())

        assert store.get_state()["counter"] == 1

    def test_add_reducers_from_listener(self, store):
        store.subscribe(lambda: store.add_reducers({"other": counter}))

        with pytest.raises(ReentrantDispatchError):
            store.dispatch(Increment())

    def test_replace_reducer_from_reducer(self):
        holder = {}

        def sneaky(state=0, action=None):
            if action is not None and getattr(action, "type", None) == "sneak":
                holder["store"].replace_reducer(lambda s, a: s)
            return state

        store = create_store({"sneaky": sneaky})
        holder["store"] = store

        with pytest.raises(ReentrantDispatchError):
            store.dispatch(Action(type="sneak"))


class TestPendingQueue:
    """Tests for actions dispatched before the first slice."""

    def test_queued_dispatch_returns_none(self):
        store = create_store()

        assert store.dispatch({"type": "X"}) is None

    def test_queued_dispatch_does_not_notify(self):
        store = create_store()
        listener = MagicMock()
        store.subscribe(listener)

        store.dispatch({"type": "X"})

        listener.assert_not_called()
        assert store.get_state() == {}

    def test_replayed_on_first_slice(self):
        store = create_store()
        listener = MagicMock()
        store.subscribe(listener)
        store.dispatch({"type": "X"})

        store.add_reducers({"counter": counter})

        assert store.get_state()["counter"] == 1
        listener.assert_called_once_with()
        assert store.pending_actions == ()

    def test_replayed_in_order(self):
        seen = []

        def recorder(state=0, action=None):
            if action is not None:
                seen.append(action["type"] if isinstance(action, dict) else action.type)
            return state

        store = create_store()
        store.dispatch({"type": "first"})
        store.dispatch({"type": "second"})

        store.add_reducers({"recorder": recorder})

        assert seen == [ActionTypes.INIT, "first", "second"]

    def test_replayed_only_once(self):
        store = create_store()
        store.dispatch({"type": "X"})
        store.add_reducers({"counter": counter})

        store.add_reducers({"other": counter})

        assert store.get_state() == {"counter": 1, "other": 0}

    def test_replace_reducer_keeps_queue(self):
        store = create_store()
        store.dispatch({"type": "X"})

        store.replace_reducer(lambda state, action: state)

        assert len(store.pending_actions) == 2

        store.add_reducers({"counter": counter})
        assert store.get_state()["counter"] == 1

    def test_failed_replay_keeps_rest_queued_and_notifies(self):
        def fragile(state=0, action=None):
            match action:
                case {"type": "boom"}:
                    raise RuntimeError("boom")
                case {"type": "X"}:
                    return state + 1
            return state

        store = create_store()
        listener = MagicMock()
        store.subscribe(listener)
        store.dispatch({"type": "boom"})
        store.dispatch({"type": "X"})

        with pytest.raises(RuntimeError):
            store.add_reducers({"counter": fragile})

        assert store.get_state() == {"counter": 0}
        assert store.pending_actions == ({"type": "X"},)
        listener.assert_called_once_with()

        store.add_reducers({"other": counter})

        assert store.get_state() == {"counter": 1, "other": 0}
        assert store.pending_actions == ()


class TestAddReducers:
    """Tests for add_reducers."""

    def test_adds_initial_state(self, store):
        def flag(state=False, action=None):
            return state

        store.add_reducers({"flag": flag})

        assert store.get_state() == {"counter": 0, "todos": [], "flag": False}

    def test_new_slice_reduces_actions(self, store):
        store.add_reducers({"other": counter})

        store.dispatch(Increment())

        assert store.get_state()["counter"] == 1
        assert store.get_state()["other"] == 1

    def test_existing_state_preserved(self, store):
        store.dispatch(Increment(amount=5))

        store.add_reducers({"counter": counter})

        assert store.get_state()["counter"] == 5

    def test_first_registration_wins(self, store):
        def other_counter(state=100, action=None):
            return state - 1

        store.add_reducers({"counter": other_counter})
        store.dispatch(Increment())

        assert store.reducers["counter"] is counter
        assert store.get_state()["counter"] == 1

    def test_registers_base_selector(self, store):
        selector = store.get_selector_by_name("counter")

        assert selector is not None
        assert selector(store.get_state()) == 0

    def test_keeps_existing_selector(self):
        store = create_store()
        custom = store.add_selector("counter", ["other"], lambda o: o)

        store.add_reducers({"counter": counter})

        assert store.get_selector_by_name("counter") is custom

    def test_notifies_once(self, store):
        listener = MagicMock()
        store.subscribe(listener)

        store.add_reducers({"other": counter})

        listener.assert_called_once_with()

    def test_rejects_non_callable(self, store):
        with pytest.raises(NotCallableError):
            store.add_reducers({"bad": "not a reducer"})

        assert "bad" not in store.get_state()

    def test_none_initial_state_raises(self):
        store = create_store()

        with pytest.raises(UndefinedStateError):
            store.add_reducers({"nothing": lambda state=None, action=None: state})

        assert store.get_state() == {}
        assert store.get_selector_by_name("nothing") is None

    def test_empty_mapping_is_noop(self):
        store = create_store()
        listener = MagicMock()
        store.subscribe(listener)

        store.add_reducers({})

        listener.assert_not_called()
        assert len(store.pending_actions) == 1


class TestReplaceReducer:
    """Tests for replace_reducer."""

    def test_dispatches_init(self, store):
        seen = []

        def root(state, action):
            seen.append(action.type)
            return state

        store.replace_reducer(root)

        assert seen == [ActionTypes.INIT]

    def test_notifies(self, store):
        listener = MagicMock()
        store.subscribe(listener)

        store.replace_reducer(lambda state, action: state)

        listener.assert_called_once_with()

    def test_rejects_non_callable(self, store):
        with pytest.raises(NotCallableError):
            store.replace_reducer(None)


class TestSubscribe:
    """Tests for subscribe."""

    def test_unsubscribe(self, store):
        listener = MagicMock()
        unsubscribe = store.subscribe(listener)

        unsubscribe()
        store.dispatch(Increment())

        listener.assert_not_called()

    def test_unsubscribe_twice(self, store):
        unsubscribe = store.subscribe(MagicMock())

        unsubscribe()
        unsubscribe()

    def test_rejects_non_callable(self, store):
        with pytest.raises(NotCallableError):
            store.subscribe(42)

    def test_subscribe_during_dispatch_applies_next_time(self, store):
        late = MagicMock()
        subscribed = []

        def first():
            if not subscribed:
                subscribed.append(store.subscribe(late))

        store.subscribe(first)
        store.dispatch(Increment())
        late.assert_not_called()

        store.dispatch(Increment())
        late.assert_called_once_with()

    def test_unsubscribe_during_dispatch_applies_next_time(self, store):
        second = MagicMock()
        handles = []

        store.subscribe(lambda: handles[0]())
        handles.append(store.subscribe(second))

        store.dispatch(Increment())
        store.dispatch(Increment())

        assert second.call_count == 1


class TestSelectors:
    """Tests for store selectors."""

    def test_pick_selector_memoizes(self, store):
        pair = store.add_selector("pair", ["counter", "todos"])

        first = pair(store.get_state())
        second = pair(store.get_state())

        assert first is second
        assert first == {"counter": 0, "todos": []}

    def test_pick_selector_recomputes_on_change(self, store):
        pair = store.add_selector("pair", ["counter", "todos"])
        first = pair(store.get_state())

        store.dispatch(Increment())
        second = pair(store.get_state())

        assert second is not first
        assert second["counter"] == 1
        assert second["todos"] is first["todos"]

    def test_selector_before_slice(self):
        store = create_store()
        doubled = store.add_selector("doubled", ["counter"], lambda n: (n or 0) * 2)

        store.add_reducers({"counter": counter})
        store.dispatch(Increment(amount=3))

        assert doubled(store.get_state()) == 6

    def test_selector_of_selector(self, store):
        store.add_selector("count", ["todos"], len)
        store.add_selector("label", ["count", "counter"], lambda n, c: f"{n}/{c}")
        store.dispatch(AddTodo(text="milk"))

        assert store.select("label") == "1/0"

    def test_get_selector_by_name(self, store):
        selector = store.add_selector("pair", ["counter", "todos"])

        assert store.get_selector_by_name("pair") is selector
        assert store.get_selector_by_name("missing") is None

    def test_overwrite(self, store):
        store.add_selector("x", ["counter"], lambda c: "first")
        store.add_selector("x", ["counter"], lambda c: "second")

        assert store.select("x") == "second"

    def test_add_selectors(self, store):
        store.add_selectors({"total": (["counter"], lambda c: c + 10)})

        assert store.select("total") == 10

    def test_select_unknown(self, store):
        with pytest.raises(SelectorNotFoundError):
            store.select("missing")

    def test_selector_names(self, store):
        store.add_selector("pair", ["counter", "todos"])

        assert set(store.selector_names) == {"counter", "todos", "pair"}


class TestReset:
    """Tests for reset."""

    def test_clears_state_reducers_and_selectors(self, store):
        store.add_selector("pair", ["counter", "todos"])

        store.reset()

        assert store.get_state() == {}
        assert store.reducers == {}
        assert store.get_selector_by_name("pair") is None
        assert store.get_selector_by_name("counter") is None

    def test_queues_again_after_reset(self, store):
        store.reset()

        assert store.dispatch(Increment()) is None
        store.add_reducers({"counter": counter})

        assert store.get_state() == {"counter": 1}

    def test_keeps_listeners(self, store):
        listener = MagicMock()
        store.subscribe(listener)

        store.reset()
        store.add_reducers({"counter": counter})

        listener.assert_called_once_with()

    def test_repr(self, store):
        assert "test" in repr(store)
        assert "counter" in repr(store)


class TestScenario:
    """End-to-end: dispatch before any slice exists."""

    def test_queued_action_replayed_with_single_notification(self):
        store = create_store()
        listener = MagicMock()
        store.subscribe(listener)

        store.dispatch({"type": "X"})
        before = store.get_state()
        store.add_reducers({"counter": counter})

        assert before == {}
        assert store.get_state()["counter"] == 1
        assert listener.call_count == 1


class TestPublicSignatures:
    """Tests for the annotations and docstrings of the public API."""

    def test_annotated_with_exported_types(self):
        assert get_type_hints(Store.subscribe)["listener"] is Listener
        assert get_type_hints(Store.add_selector)["combiner"] == Combiner | None
        assert get_type_hints(Store.get_selector_by_name)["return"] == (
            SelectorFunc[Any] | None
        )
        assert get_type_hints(create_store)["enhancer"] == StoreEnhancer | None
        assert get_type_hints(Store.replace_reducer)["next_reducer"] == Reducer[
            Any, Any
        ]

    def test_properties_documented(self):
        for member in (Store.config, Store.name, Store.pending_actions):
            assert member.__doc__
