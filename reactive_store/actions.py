"""Action records and the plain-record check used by dispatch."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ActionTypes:
    """
    Private action types reserved by the store.

    Reducers must return the current state for any unknown action, and
    their initial state when called with no arguments. Do not dispatch
    these types from application code.
    """

    INIT = "@@reactive_store/INIT"


class Action(BaseModel):
    """
    A tagged, immutable action record.

    Subclass it to declare typed actions:

    Example:
        ```python
        class Increment(Action):
            type: Literal["counter/increment"] = "counter/increment"
            amount: int = 1

        store.dispatch(Increment(amount=2))
        store.dispatch(Action(type="todos/clear"))
        ```

    Extra fields are kept, so ``Action(type="add", text="milk")`` works
    without a subclass.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: Any


def is_plain_object(value: Any) -> bool:
    """
    Check whether a value can be dispatched.

    Accepts ``Action`` instances and exact ``dict`` instances. Lists,
    ``None``, dict subclasses and arbitrary objects are rejected.
    """
    if isinstance(value, Action):
        return True
    return type(value) is dict


def has_action_type(action: Any) -> bool:
    """
    Check whether an action carries a ``type``.

    Only a missing ``type`` counts as undefined; ``None`` is a valid type.
    """
    if isinstance(action, Action):
        return True
    if isinstance(action, dict):
        return "type" in action
    return hasattr(action, "type")


def get_action_type(action: Any) -> Any:
    """Return the ``type`` of an action, or ``None`` when it has none."""
    if isinstance(action, Action):
        return action.type
    if isinstance(action, dict):
        return action.get("type")
    return getattr(action, "type", None)


def init_action(action_type: str = ActionTypes.INIT) -> Action:
    """Build the reserved action dispatched on creation and reducer replacement."""
    return Action(type=action_type)
