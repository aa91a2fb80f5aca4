from typing import Literal

from pydantic import Field, field_validator
from shared_todos.schemas.base import CamelModel, UtcDatetime
from shared_todos.utils.sanitization import sanitize_string, trim_string

TaskStatus = Literal["new", "open", "closed"]


# ── Task schemas ────────────────────────────────────────

class Task(CamelModel):
    id: str
    text: str
    status: TaskStatus
    created_by: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime
    last_updated_by: str | None = None
    deadline: UtcDatetime | None = None


class TasksCreate(CamelModel):
    tasks: list[str] = Field(default_factory=list)
    username: str | None = None

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class TaskUpdate(CamelModel):
    # Only the fields present in the request body are applied
    status: TaskStatus | None = None
    deadline: UtcDatetime | None = None
    text: str | None = Field(None, max_length=2000)
    username: str | None = None

    @field_validator("deadline", mode="before")
    @classmethod
    def blank_deadline(cls, v):
        # Clients clear a deadline by sending an empty string
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("text", mode="before")
    @classmethod
    def trim(cls, v):
        return trim_string(v)

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


# ── Member schemas ──────────────────────────────────────

class Member(CamelModel):
    user_id: str
    username: str | None = None
    is_guest: bool
    joined_at: UtcDatetime


class MemberCreate(CamelModel):
    username: str | None = Field(None, max_length=50)

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class Roster(CamelModel):
    todo_list_id: str
    todo_list_title: str
    users: list[Member] = []
    total_users: int


# ── List schemas ────────────────────────────────────────

class TodoListCreate(CamelModel):
    title: str | None = Field(None, max_length=200)
    username: str | None = None

    @field_validator("title", "username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class TodoListUpdate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)

    @field_validator("title", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class TodoList(CamelModel):
    id: str
    title: str
    created_by: str
    created_by_username: str | None = None
    tasks: list[Task] = []
    users: list[Member] = []
    created_at: UtcDatetime
    updated_at: UtcDatetime
    version: int


class JoinedTodoList(TodoList):
    generated_user_id: str | None = None
    access_token: str | None = None


class TodoListSummary(CamelModel):
    id: str
    title: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
    task_count: int
    user_count: int
    created_by: str
    created_by_username: str | None = None


class TodoListOverview(CamelModel):
    created: list[TodoListSummary] = []
    shared: list[TodoListSummary] = []


class ListAccessResponse(CamelModel):
    is_creator: bool
    is_member: bool
    can_edit: bool


class Message(CamelModel):
    message: str
