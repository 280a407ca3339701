"""
Todo App - Slices and selectors registered while the app is running.

Demonstrates:
- create_store: One store, created by the app and provided to widgets
- add_reducers: Each widget registers the slice it owns on mount
- Pending queue: Actions dispatched before a slice exists are replayed
- add_selector: Memoized derived values built from slices
- use_store / @effect: React to selector changes
"""

from typing import Literal

from pydantic import BaseModel
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header, Input, Label, Static

from reactive_store import (
    Action,
    StoreProvider,
    create_store,
    effect,
    use_store,
)


# --- Models ---


class TodoItem(BaseModel):
    id: int
    text: str
    completed: bool = False


class TodoState(BaseModel):
    items: list[TodoItem] = []
    next_id: int = 1


Filter = Literal["all", "active", "completed"]


# --- Actions ---


class AddTodo(Action):
    type: Literal["todos/add"] = "todos/add"
    text: str


class ToggleTodo(Action):
    type: Literal["todos/toggle"] = "todos/toggle"
    id: int


class DeleteTodo(Action):
    type: Literal["todos/delete"] = "todos/delete"
    id: int


class ClearCompleted(Action):
    type: Literal["todos/clear_completed"] = "todos/clear_completed"


class SetFilter(Action):
    type: Literal["filter/set"] = "filter/set"
    filter: Filter


# --- Reducers ---


def todos_reducer(state: TodoState | None = None, action=None) -> TodoState:
    if state is None:
        state = TodoState()

    match action:
        case AddTodo(text=text) if text.strip():
            new_item = TodoItem(id=state.next_id, text=text.strip())
            return state.model_copy(update={
                "items": [*state.items, new_item],
                "next_id": state.next_id + 1,
            })

        case ToggleTodo(id=id):
            items = [
                item.model_copy(update={"completed": not item.completed})
                if item.id == id else item
                for item in state.items
            ]
            return state.model_copy(update={"items": items})

        case DeleteTodo(id=id):
            items = [item for item in state.items if item.id != id]
            return state.model_copy(update={"items": items})

        case ClearCompleted():
            items = [item for item in state.items if not item.completed]
            return state.model_copy(update={"items": items})

    return state


def filter_reducer(state: Filter = "all", action=None) -> Filter:
    match action:
        case SetFilter(filter=value):
            return value
    return state


# --- Selectors ---


def visible_items(todos: TodoState | None, current: Filter | None) -> list[TodoItem]:
    if todos is None:
        return []
    match current:
        case "active":
            return [i for i in todos.items if not i.completed]
        case "completed":
            return [i for i in todos.items if i.completed]
    return todos.items


def active_count(todos: TodoState | None) -> int:
    if todos is None:
        return 0
    return sum(1 for i in todos.items if not i.completed)


# --- Components ---


class TodoInput(Static):
    """Input for adding new todos."""

    DEFAULT_CSS = """
    TodoInput {
        height: 3;
        margin: 1;
    }
    TodoInput Horizontal {
        width: 100%;
    }
    TodoInput Input {
        width: 1fr;
    }
    TodoInput Button {
        width: 12;
    }
    """

    def on_mount(self) -> None:
        self.todos = use_store(self, subscribe=False)

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Input(placeholder="What needs to be done?", id="new-todo")
            yield Button("Add", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self._add_todo()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._add_todo()

    def _add_todo(self) -> None:
        input_widget = self.query_one("#new-todo", Input)
        if input_widget.value.strip():
            self.todos.dispatch(AddTodo(text=input_widget.value))
            input_widget.value = ""


class TodoItemView(Static):
    """Single todo item view."""

    DEFAULT_CSS = """
    TodoItemView {
        height: 3;
        padding: 0 1;
    }
    TodoItemView Horizontal {
        width: 100%;
    }
    TodoItemView .completed {
        text-style: strike;
        color: $text-muted;
    }
    TodoItemView Label {
        width: 1fr;
    }
    TodoItemView Button {
        width: 3;
        min-width: 3;
    }
    """

    def __init__(self, item: TodoItem) -> None:
        super().__init__()
        self.item = item

    def on_mount(self) -> None:
        self.todos = use_store(self, subscribe=False)

    def compose(self) -> ComposeResult:
        with Horizontal():
            check = "✓" if self.item.completed else "○"
            yield Button(check, id="toggle")
            label = Label(self.item.text)
            if self.item.completed:
                label.add_class("completed")
            yield label
            yield Button("×", id="delete", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "toggle":
            self.todos.dispatch(ToggleTodo(id=self.item.id))
        elif event.button.id == "delete":
            self.todos.dispatch(DeleteTodo(id=self.item.id))


class TodoList(Static):
    """List of visible todos. Owns the todos slice."""

    DEFAULT_CSS = """
    TodoList {
        height: auto;
        max-height: 15;
        margin: 1;
        border: solid $primary;
        padding: 1;
    }
    """

    def on_mount(self) -> None:
        store = use_store(self, subscribe=False).store
        store.add_selector("visible_items", ["todos", "filter"], visible_items)
        self.todos = use_store(self, store)
        store.add_reducers({"todos": todos_reducer})

    def compose(self) -> ComposeResult:
        yield Label("Loading...", id="empty")

    @effect("visible_items")
    def on_visible_change(self, old: list[TodoItem], new: list[TodoItem]) -> None:
        for child in list(self.children):
            child.remove()

        if not new:
            self.mount(Label("No items to show"))
        else:
            for item in new:
                self.mount(TodoItemView(item))


class FilterBar(Static):
    """Filter buttons and stats. Owns the filter slice."""

    DEFAULT_CSS = """
    FilterBar {
        height: 3;
        margin: 1;
    }
    FilterBar Horizontal {
        width: 100%;
        align: center middle;
    }
    FilterBar Button {
        margin: 0 1;
    }
    FilterBar #stats {
        width: 1fr;
    }
    """

    def on_mount(self) -> None:
        store = use_store(self, subscribe=False).store
        store.add_selector("active_count", ["todos"], active_count)
        self.todos = use_store(self, store)
        store.add_reducers({"filter": filter_reducer})

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Label("", id="stats")
            yield Button("All", id="all")
            yield Button("Active", id="active")
            yield Button("Completed", id="completed")
            yield Button("Clear Done", id="clear", variant="warning")

    @effect("active_count")
    def on_count_change(self, old: int, new: int) -> None:
        todos = self.todos.state.get("todos")
        total = len(todos.items) if todos else 0
        self.query_one("#stats", Label).update(f"{new} active / {total} total")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "all" | "active" | "completed" as value:
                self.todos.dispatch(SetFilter(filter=value))
            case "clear":
                self.todos.dispatch(ClearCompleted())


class TodoApp(App):
    """Main todo application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #title {
        text-align: center;
        text-style: bold;
        color: $primary;
        height: 3;
        margin: 1;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.store = create_store(name="todos")
        # Queued until TodoList registers the todos slice
        self.store.dispatch(AddTodo(text="Learn Textual"))
        self.store.dispatch(AddTodo(text="Register slices on mount"))

    def compose(self) -> ComposeResult:
        yield Header()
        yield StoreProvider(
            self.store,
            Static("Todo App", id="title"),
            TodoInput(),
            TodoList(),
            FilterBar(),
        )
        yield Footer()


if __name__ == "__main__":
    TodoApp().run()
