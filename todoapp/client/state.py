from dataclasses import dataclass, field

from todoapp.models.todos import FilterMode, Todo


def _newest_first(todos: list[Todo]) -> list[Todo]:
    return sorted(todos, key=lambda t: (t.created_at, t.id), reverse=True)


@dataclass
class TodoState:
    """In-memory mirror of the server's todo list plus the active filter.

    Only server-confirmed records are ever stored here; callers apply a
    change after the corresponding request succeeded.
    """

    todos: list[Todo] = field(default_factory=list)
    filter: FilterMode = FilterMode.ALL

    def replace_all(self, todos: list[Todo]) -> None:
        self.todos = list(todos)

    def apply_created(self, todo: Todo) -> None:
        # Re-sort so the new item lands where the server would list it
        remaining = [t for t in self.todos if t.id != todo.id]
        self.todos = _newest_first([*remaining, todo])

    def apply_updated(self, todo: Todo) -> None:
        for index, current in enumerate(self.todos):
            if current.id == todo.id:
                self.todos[index] = todo
                return

    def apply_deleted(self, todo_id: int) -> None:
        self.todos = [t for t in self.todos if t.id != todo_id]

    def find(self, todo_id: int) -> Todo | None:
        return next((t for t in self.todos if t.id == todo_id), None)

    def set_filter(self, mode: FilterMode | str) -> None:
        self.filter = FilterMode(mode)
