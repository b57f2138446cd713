from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FilterMode(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class Todo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    completed: bool = False
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class CreateTodoRequest(BaseModel):
    # title stays optional here so a missing title is reported as a 400 by the store
    title: str | None = None
    completed: bool | None = None


class UpdateTodoRequest(BaseModel):
    title: str | None = None
    completed: bool | None = None


class StoreStatus(BaseModel):
    ready: bool
    todo_count: int | None = None
    message: str | None = None
