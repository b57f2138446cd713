import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from todoapp.db import TITLE_MAX_LENGTH, get_engine, todos_table
from todoapp.exceptions import NotFoundError, StorageError, ValidationError
from todoapp.models.todos import StoreStatus, Todo

logger = logging.getLogger(__name__)

_TIMESTAMP_STEP = timedelta(microseconds=1)


def _now() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns hand back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _handle_db_error(e: SQLAlchemyError, action: str):
    detail = str(getattr(e, "orig", None) or e)
    logger.error("Error %s: %s", action, detail)
    raise StorageError(detail) from e


def _clean_title(title: str | None) -> str:
    if title is None or not title.strip():
        raise ValidationError("Title is required")
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def _parse_todo(row) -> Todo:
    return Todo(
        id=row.id,
        title=row.title,
        completed=row.completed,
        created_at=row.createdAt,
        updated_at=row.updatedAt,
    )


def _select_one(conn, todo_id: int, for_update: bool = False):
    stmt = select(todos_table).where(todos_table.c.id == todo_id)
    if for_update:
        stmt = stmt.with_for_update()
    row = conn.execute(stmt).first()
    if row is None:
        raise NotFoundError("Todo not found")
    return row


def list_todos() -> list[Todo]:
    """Return every todo, newest first."""
    stmt = select(todos_table).order_by(todos_table.c.createdAt.desc(), todos_table.c.id.desc())
    try:
        with get_engine().connect() as conn:
            return [_parse_todo(row) for row in conn.execute(stmt)]
    except SQLAlchemyError as e:
        _handle_db_error(e, "fetching todos")


def get_todo(todo_id: int) -> Todo:
    """Get a single todo by id."""
    try:
        with get_engine().connect() as conn:
            return _parse_todo(_select_one(conn, todo_id))
    except SQLAlchemyError as e:
        _handle_db_error(e, "fetching todo")


def create_todo(title: str | None, completed: bool = False) -> Todo:
    """Create a todo. The title is trimmed and must not be blank."""
    title = _clean_title(title)
    try:
        with get_engine().begin() as conn:
            result = conn.execute(
                insert(todos_table).values(title=title, completed=bool(completed), createdAt=_now())
            )
            todo = _parse_todo(_select_one(conn, result.inserted_primary_key[0]))
    except SQLAlchemyError as e:
        _handle_db_error(e, "creating todo")
    logger.info("Created todo id=%s", todo.id)
    return todo


def update_todo(todo_id: int, title: str | None = None, completed: bool | None = None) -> Todo:
    """Update an existing todo. Only provided fields are changed.

    updatedAt is refreshed on every call, even when neither field changes,
    and never moves backwards relative to the stored timestamps.
    """
    if title is not None:
        title = _clean_title(title)
    try:
        with get_engine().begin() as conn:
            current = _select_one(conn, todo_id, for_update=True)
            floor = current.updatedAt or current.createdAt
            stamp = max(_now(), floor + _TIMESTAMP_STEP)
            conn.execute(
                update(todos_table)
                .where(todos_table.c.id == todo_id)
                .values(
                    title=current.title if title is None else title,
                    completed=current.completed if completed is None else bool(completed),
                    updatedAt=stamp,
                )
            )
            todo = _parse_todo(_select_one(conn, todo_id))
    except SQLAlchemyError as e:
        _handle_db_error(e, "updating todo")
    logger.info("Updated todo id=%s", todo_id)
    return todo


def delete_todo(todo_id: int) -> None:
    """Delete a todo."""
    try:
        with get_engine().begin() as conn:
            result = conn.execute(delete(todos_table).where(todos_table.c.id == todo_id))
            if result.rowcount == 0:
                raise NotFoundError("Todo not found")
    except SQLAlchemyError as e:
        _handle_db_error(e, "deleting todo")
    logger.info("Deleted todo id=%s", todo_id)


def store_status() -> StoreStatus:
    """Report whether the store is reachable and how many todos it holds."""
    try:
        with get_engine().connect() as conn:
            count = conn.execute(select(func.count()).select_from(todos_table)).scalar_one()
    except SQLAlchemyError as e:
        logger.warning("Store status check failed: %s", e)
        return StoreStatus(ready=False, message=str(getattr(e, "orig", None) or e))
    return StoreStatus(ready=True, todo_count=count)
