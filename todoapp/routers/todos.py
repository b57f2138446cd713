from fastapi import APIRouter

from todoapp.exceptions import NotFoundError
from todoapp.models.todos import CreateTodoRequest, Todo, UpdateTodoRequest
from todoapp.services import todos as todos_service

router = APIRouter(prefix="/api/todos", tags=["todos"])

# Largest value an INTEGER id column can hold on PostgreSQL
_MAX_ID = 2**31 - 1


def _parse_id(todo_id: str) -> int:
    """Malformed ids are reported the same way as ids that do not exist."""
    if not (todo_id.isascii() and todo_id.isdigit()):
        raise NotFoundError("Todo not found")
    value = int(todo_id)
    if value > _MAX_ID:
        raise NotFoundError("Todo not found")
    return value


@router.get("")
def list_todos() -> list[Todo]:
    return todos_service.list_todos()


@router.get("/{todo_id}")
def get_todo(todo_id: str) -> Todo:
    return todos_service.get_todo(_parse_id(todo_id))


@router.post("", status_code=201)
def create_todo(request: CreateTodoRequest) -> Todo:
    return todos_service.create_todo(request.title, bool(request.completed))


@router.put("/{todo_id}")
def update_todo(todo_id: str, request: UpdateTodoRequest) -> Todo:
    return todos_service.update_todo(_parse_id(todo_id), request.title, request.completed)


@router.delete("/{todo_id}", status_code=204)
def delete_todo(todo_id: str):
    todos_service.delete_todo(_parse_id(todo_id))
