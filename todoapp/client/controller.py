import logging
from collections.abc import Callable

from todoapp.client.api import TodoApiClient, TodoApiError
from todoapp.client.render import RenderedView, render
from todoapp.client.state import TodoState
from todoapp.models.todos import FilterMode, Todo

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this todo?"


class TodoController:
    """Drives a TodoState from user actions and API responses.

    State is only patched after the server confirms a change. Failures are
    logged and handed to ``notify``; the one visual state changed ahead of
    confirmation, a toggled checkbox, is put back when its request fails.
    """

    def __init__(
        self,
        api: TodoApiClient,
        notify: Callable[[str], None],
        confirm: Callable[[str], bool] | None = None,
        state: TodoState | None = None,
    ):
        self.api = api
        self.notify = notify
        self.confirm = confirm
        self.state = state if state is not None else TodoState()
        self.editing: Todo | None = None
        self.view: RenderedView = render(self.state, self.dispatch)

    def dispatch(self, command: str, todo_id: int, *args):
        handlers = {
            "edit": self.open_edit,
            "delete": self.delete,
            "toggle": self.toggle,
        }
        return handlers[command](todo_id, *args)

    def refresh(self) -> RenderedView:
        self.view = render(self.state, self.dispatch)
        return self.view

    def _fail(self, action: str, error: TodoApiError, message: str) -> None:
        logger.error("Error %s: %s", action, error)
        self.notify(message)

    # --- Actions ---

    def load(self) -> RenderedView:
        try:
            todos = self.api.list_todos()
        except TodoApiError as e:
            self._fail("fetching todos", e, "Failed to load todos. Please refresh the page.")
        else:
            self.state.replace_all(todos)
        return self.refresh()

    def create(self, title: str) -> Todo | None:
        try:
            todo = self.api.create_todo(title, completed=False)
        except TodoApiError as e:
            self._fail("creating todo", e, "Failed to create todo. Please try again.")
            return None
        self.state.apply_created(todo)
        self.refresh()
        return todo

    def update(self, todo_id: int, title: str | None = None, completed: bool | None = None) -> Todo | None:
        try:
            todo = self.api.update_todo(todo_id, title=title, completed=completed)
        except TodoApiError as e:
            self._fail("updating todo", e, "Failed to update todo. Please try again.")
            return None
        self.state.apply_updated(todo)
        if self.editing is not None and self.editing.id == todo_id:
            self.close_edit()
        self.refresh()
        return todo

    def toggle(self, todo_id: int, checked: bool) -> Todo | None:
        if self.state.find(todo_id) is None:
            return None
        item = self.view.item(todo_id)
        if item is not None:
            item.checked = checked
        try:
            todo = self.api.update_todo(todo_id, completed=checked)
        except TodoApiError as e:
            self._fail("updating todo", e, "Failed to update todo. Please try again.")
            if item is not None:
                item.checked = not checked
            return None
        self.state.apply_updated(todo)
        self.refresh()
        return todo

    def delete(self, todo_id: int) -> bool:
        if self.confirm is not None and not self.confirm(DELETE_PROMPT):
            return False
        try:
            self.api.delete_todo(todo_id)
        except TodoApiError as e:
            self._fail("deleting todo", e, "Failed to delete todo. Please try again.")
            return False
        self.state.apply_deleted(todo_id)
        if self.editing is not None and self.editing.id == todo_id:
            self.close_edit()
        self.refresh()
        return True

    def set_filter(self, mode: FilterMode | str) -> RenderedView:
        self.state.set_filter(mode)
        return self.refresh()

    # --- Edit dialog ---

    def open_edit(self, todo_id: int) -> Todo | None:
        self.editing = self.state.find(todo_id)
        return self.editing

    def close_edit(self) -> None:
        self.editing = None

    def submit_edit(self, title: str, completed: bool) -> Todo | None:
        if self.editing is None:
            return None
        return self.update(self.editing.id, title=title, completed=completed)
