"""Pure projection of a TodoState into display items and markup.

Nothing here mutates the state it is given; rendering the same state twice
yields equal output.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from html import escape

from todoapp.client.state import TodoState
from todoapp.models.todos import FilterMode, Todo

EMPTY_MESSAGES = {
    FilterMode.ALL: "No todos yet. Add one above to get started!",
    FilterMode.ACTIVE: "No active todos. Great job!",
    FilterMode.COMPLETED: "No completed todos yet.",
}

Dispatch = Callable[..., object]


@dataclass(frozen=True)
class Command:
    """A user action bound to one todo id."""

    name: str
    todo_id: int
    dispatch: Dispatch | None = field(default=None, compare=False, repr=False)

    def __call__(self, *args):
        if self.dispatch is None:
            raise RuntimeError(f"No dispatcher bound for command {self.name!r}")
        return self.dispatch(self.name, self.todo_id, *args)


@dataclass
class RenderedItem:
    todo_id: int
    title: str  # already HTML-escaped
    completed: bool
    checked: bool  # checkbox display state; diverges from completed while a toggle is in flight
    created: str
    commands: dict[str, Command] = field(default_factory=dict)

    @property
    def html(self) -> str:
        classes = "todo-item completed" if self.completed else "todo-item"
        checked = " checked" if self.checked else ""
        return (
            f'<div class="{classes}" data-id="{self.todo_id}">'
            f'<div class="todo-header"><h3 class="todo-title">{self.title}</h3></div>'
            '<div class="todo-footer">'
            '<div class="todo-actions">'
            f'<button class="btn btn-edit" data-command="edit" data-id="{self.todo_id}">Edit</button>'
            f'<button class="btn btn-danger" data-command="delete" data-id="{self.todo_id}">Delete</button>'
            "</div>"
            '<label class="checkbox-label">'
            f'<input type="checkbox" data-command="toggle" data-id="{self.todo_id}"{checked}>'
            "<span>Completed</span></label>"
            f'<span class="todo-date">Created: {self.created}</span>'
            "</div></div>"
        )


@dataclass
class RenderedView:
    mode: FilterMode
    items: list[RenderedItem]
    empty_message: str | None = None

    def item(self, todo_id: int) -> RenderedItem | None:
        return next((i for i in self.items if i.todo_id == todo_id), None)

    @property
    def html(self) -> str:
        if self.empty_message is not None:
            return f'<div class="empty-state">{escape(self.empty_message)}</div>'
        return "".join(item.html for item in self.items)


def filter_todos(todos: list[Todo], mode: FilterMode | str) -> list[Todo]:
    mode = FilterMode(mode)
    if mode is FilterMode.ACTIVE:
        return [t for t in todos if not t.completed]
    if mode is FilterMode.COMPLETED:
        return [t for t in todos if t.completed]
    return list(todos)


def format_date(value: datetime) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def render_item(todo: Todo, dispatch: Dispatch | None = None) -> RenderedItem:
    return RenderedItem(
        todo_id=todo.id,
        title=escape(todo.title),
        completed=todo.completed,
        checked=todo.completed,
        created=format_date(todo.created_at),
        commands={
            name: Command(name, todo.id, dispatch)
            for name in ("edit", "delete", "toggle")
        },
    )


def render(state: TodoState, dispatch: Dispatch | None = None) -> RenderedView:
    visible = filter_todos(state.todos, state.filter)
    return RenderedView(
        mode=state.filter,
        items=[render_item(t, dispatch) for t in visible],
        empty_message=None if visible else EMPTY_MESSAGES[state.filter],
    )


def render_page(view: RenderedView) -> str:
    """Wrap a rendered list in the minimal page served at the site root."""
    links = "".join(
        f'<a class="filter-btn{" active" if mode is view.mode else ""}" '
        f'href="/?filter={mode.value}" data-filter="{mode.value}">{mode.value.title()}</a>'
        for mode in FilterMode
    )
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8"><title>Todo List</title></head>'
        "<body><main>"
        "<h1>Todo List</h1>"
        f'<nav class="filters">{links}</nav>'
        f'<section id="todoList">{view.html}</section>'
        "</main></body></html>"
    )
