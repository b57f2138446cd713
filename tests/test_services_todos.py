import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from todoapp.exceptions import NotFoundError, StorageError, ValidationError
from todoapp.models.todos import Todo
from todoapp.services import todos as todos_service


class TestCreateTodo:
    def test_assigns_id_and_defaults(self):
        todo = todos_service.create_todo("Buy milk")
        assert isinstance(todo, Todo)
        assert todo.id == 1
        assert todo.title == "Buy milk"
        assert todo.completed is False
        assert todo.created_at is not None
        assert todo.updated_at is None

    def test_ids_are_unique(self):
        a = todos_service.create_todo("A")
        b = todos_service.create_todo("B")
        assert a.id != b.id

    def test_trims_title(self):
        todo = todos_service.create_todo("   Call mom  ")
        assert todo.title == "Call mom"

    def test_respects_completed(self):
        todo = todos_service.create_todo("Done already", completed=True)
        assert todo.completed is True

    @pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValidationError):
            todos_service.create_todo(title)
        assert todos_service.list_todos() == []

    def test_overlong_title_rejected(self):
        with pytest.raises(ValidationError):
            todos_service.create_todo("x" * 256)
        assert todos_service.list_todos() == []

    def test_ids_not_reused_after_delete(self):
        first = todos_service.create_todo("First")
        todos_service.delete_todo(first.id)
        second = todos_service.create_todo("Second")
        assert second.id > first.id


class TestListTodos:
    def test_empty(self):
        assert todos_service.list_todos() == []

    def test_newest_first(self):
        a = todos_service.create_todo("A")
        b = todos_service.create_todo("B")
        c = todos_service.create_todo("C")
        assert [t.id for t in todos_service.list_todos()] == [c.id, b.id, a.id]

    def test_repeated_calls_identical(self):
        for title in ("A", "B", "C"):
            todos_service.create_todo(title)
        assert todos_service.list_todos() == todos_service.list_todos()


class TestGetTodo:
    def test_returns_todo(self):
        created = todos_service.create_todo("Buy milk")
        assert todos_service.get_todo(created.id) == created

    def test_missing(self):
        with pytest.raises(NotFoundError):
            todos_service.get_todo(999)


class TestUpdateTodo:
    def test_title_only(self):
        created = todos_service.create_todo("Old", completed=True)
        updated = todos_service.update_todo(created.id, title="X")
        assert updated.title == "X"
        assert updated.completed is True
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.created_at

    def test_completed_only(self):
        created = todos_service.create_todo("Buy milk")
        updated = todos_service.update_todo(created.id, completed=True)
        assert updated.title == "Buy milk"
        assert updated.completed is True
        assert updated.updated_at is not None

    def test_no_fields_still_touches_updated_at(self):
        created = todos_service.create_todo("Buy milk")
        first = todos_service.update_todo(created.id)
        second = todos_service.update_todo(created.id)
        assert first.title == second.title == "Buy milk"
        assert second.updated_at > first.updated_at > created.created_at

    def test_trims_title(self):
        created = todos_service.create_todo("Buy milk")
        assert todos_service.update_todo(created.id, title="  Buy bread ").title == "Buy bread"

    def test_blank_title_rejected(self):
        created = todos_service.create_todo("Buy milk")
        with pytest.raises(ValidationError):
            todos_service.update_todo(created.id, title="   ")
        assert todos_service.get_todo(created.id) == created

    def test_missing(self):
        todos_service.create_todo("Buy milk")
        before = todos_service.list_todos()
        with pytest.raises(NotFoundError):
            todos_service.update_todo(42, title="X")
        assert todos_service.list_todos() == before


class TestDeleteTodo:
    def test_removes_exactly_one(self):
        keep = todos_service.create_todo("Keep")
        drop = todos_service.create_todo("Drop")
        todos_service.delete_todo(drop.id)
        assert [t.id for t in todos_service.list_todos()] == [keep.id]

    def test_repeat_delete_not_found(self):
        todo = todos_service.create_todo("Once")
        todos_service.delete_todo(todo.id)
        with pytest.raises(NotFoundError):
            todos_service.delete_todo(todo.id)

    def test_missing(self):
        todos_service.create_todo("Keep")
        with pytest.raises(NotFoundError):
            todos_service.delete_todo(7)
        assert len(todos_service.list_todos()) == 1


class TestStorageErrors:
    @pytest.fixture
    def broken_engine(self, mocker):
        engine = MagicMock()
        engine.connect.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        engine.begin.side_effect = OperationalError("INSERT", {}, Exception("connection refused"))
        mocker.patch("todoapp.services.todos.get_engine", return_value=engine)
        return engine

    def test_list_raises_storage_error(self, broken_engine):
        with pytest.raises(StorageError, match="connection refused"):
            todos_service.list_todos()

    def test_create_raises_storage_error(self, broken_engine):
        with pytest.raises(StorageError):
            todos_service.create_todo("Buy milk")

    def test_validation_checked_before_storage(self, broken_engine):
        with pytest.raises(ValidationError):
            todos_service.create_todo("  ")

    def test_status_reports_not_ready(self, broken_engine):
        status = todos_service.store_status()
        assert status.ready is False
        assert "connection refused" in status.message


class TestStoreStatus:
    def test_counts_todos(self):
        todos_service.create_todo("A")
        todos_service.create_todo("B")
        status = todos_service.store_status()
        assert status.ready is True
        assert status.todo_count == 2
