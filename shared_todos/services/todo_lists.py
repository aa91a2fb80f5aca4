import logging
import random
import string
import time
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from shared_todos.models.todo_list import TodoList, ListMember, ListTask
from shared_todos.schemas.todo import (
    MemberCreate, TasksCreate, TaskUpdate, TodoListCreate, TodoListOverview, TodoListSummary,
)
from shared_todos.services.users import get_user_by_id
from shared_todos.utils.sanitization import clean_lines

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Todo List"
_GUEST_ALPHABET = string.ascii_lowercase + string.digits


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_guest_id() -> str:
    suffix = "".join(random.choices(_GUEST_ALPHABET, k=9))
    return f"user-{int(time.time() * 1000)}-{suffix}"


async def get_list_by_id(db: AsyncSession, list_id: str) -> TodoList:
    result = await db.execute(
        select(TodoList).options(
            joinedload(TodoList.tasks),
            joinedload(TodoList.users)
        ).filter(TodoList.id == list_id)
    )
    todo_list = result.scalars().unique().first()
    if not todo_list:
        raise HTTPException(status_code=404, detail="Todo list not found")
    return todo_list


def check_version(todo_list: TodoList, expected: str | None):
    """Reject the write when the client edited a stale copy (If-Match)."""
    if expected is None:
        return
    if expected.strip().strip('"') != str(todo_list.version):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Todo list was modified by someone else, reload and retry",
        )


def find_member(todo_list: TodoList, identity: str | None) -> ListMember | None:
    return next((m for m in todo_list.users if m.user_id == identity), None)


async def resolve_username(db: AsyncSession, todo_list: TodoList, identity: str | None) -> str | None:
    """Display name for a requester: account name first, then roster entry."""
    user = await get_user_by_id(db, identity)
    if user:
        return user.username
    member = find_member(todo_list, identity)
    if member:
        return member.username
    if todo_list.created_by == identity:
        return todo_list.created_by_username
    return None


# ── Lists ───────────────────────────────────────────────

async def create_list(db: AsyncSession, data: TodoListCreate, identity: str) -> TodoList:
    user = await get_user_by_id(db, identity)
    now = utcnow()

    todo_list = TodoList(
        id=str(uuid.uuid4()),
        title=data.title or DEFAULT_TITLE,
        created_by=identity,
        created_by_username=user.username if user else data.username,
        created_at=now,
        updated_at=now,
        tasks=[],
        users=[],
    )
    db.add(todo_list)
    logger.info("Created list %s for %s", todo_list.id, identity)
    return todo_list


def rename_list(todo_list: TodoList, title: str):
    todo_list.title = title
    todo_list.updated_at = utcnow()


async def list_overview(db: AsyncSession, identity: str) -> TodoListOverview:
    task_count = (
        select(func.count(ListTask.id))
        .where(ListTask.list_id == TodoList.id)
        .correlate(TodoList)
        .scalar_subquery()
    )
    user_count = (
        select(func.count(ListMember.id))
        .where(ListMember.list_id == TodoList.id)
        .correlate(TodoList)
        .scalar_subquery()
    )
    base = select(
        TodoList,
        task_count.label("task_count"),
        user_count.label("user_count"),
    ).order_by(TodoList.updated_at.desc())

    created = await db.execute(base.filter(TodoList.created_by == identity))

    member_list_ids = select(ListMember.list_id).filter(ListMember.user_id == identity)
    shared = await db.execute(
        base.filter(TodoList.id.in_(member_list_ids), TodoList.created_by != identity)
    )

    return TodoListOverview(
        created=[_summarize(row) for row in created.all()],
        shared=[_summarize(row) for row in shared.all()],
    )


def _summarize(row) -> TodoListSummary:
    todo_list, task_count, user_count = row
    return TodoListSummary(
        id=todo_list.id,
        title=todo_list.title,
        created_at=todo_list.created_at,
        updated_at=todo_list.updated_at,
        task_count=task_count,
        user_count=user_count,
        created_by=todo_list.created_by,
        created_by_username=todo_list.created_by_username,
    )


# ── Members ─────────────────────────────────────────────

async def add_member(db: AsyncSession, todo_list: TodoList, data: MemberCreate, identity: str | None) -> str | None:
    """
    Add the requester to the roster. Returns the guest id minted for an
    anonymous requester, or None when the caller brought an identity.
    """
    generated = None
    if identity and find_member(todo_list, identity):
        return None

    user = await get_user_by_id(db, identity)
    if user:
        username, is_guest = user.username, False
    else:
        if not data.username:
            raise HTTPException(status_code=400, detail="Username required")
        username, is_guest = data.username, True
        if not identity:
            identity = generated = generate_guest_id()

    now = utcnow()
    todo_list.users.append(ListMember(
        user_id=identity,
        username=username,
        is_guest=is_guest,
        joined_at=now,
    ))
    todo_list.updated_at = now
    logger.info("%s %s joined list %s", "Guest" if is_guest else "User", identity, todo_list.id)
    return generated


# ── Tasks ───────────────────────────────────────────────

async def add_tasks(db: AsyncSession, todo_list: TodoList, data: TasksCreate, identity: str) -> list[ListTask]:
    texts = clean_lines(data.tasks)
    if not texts:
        raise HTTPException(status_code=400, detail="At least one non-empty task is required")

    created_by = data.username or await resolve_username(db, todo_list, identity)
    next_position = max((t.position for t in todo_list.tasks), default=0) + 1
    now = utcnow()

    new_tasks = []
    for offset, text in enumerate(texts):
        new_tasks.append(ListTask(
            id=str(uuid.uuid4()),
            position=next_position + offset,
            text=text,
            status="new",
            created_by=created_by,
            created_at=now,
            updated_at=now,
        ))
    todo_list.tasks.extend(new_tasks)
    todo_list.updated_at = now
    return new_tasks


async def update_task(db: AsyncSession, todo_list: TodoList, task_id: str, data: TaskUpdate, identity: str) -> ListTask:
    task = next((t for t in todo_list.tasks if t.id == task_id), None)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    provided = data.model_fields_set

    if "status" in provided:
        if data.status is None:
            raise HTTPException(status_code=400, detail="Status cannot be empty")
        task.status = data.status
    if "deadline" in provided:
        # An explicit null clears the deadline
        task.deadline = data.deadline
    if "text" in provided:
        if not data.text:
            raise HTTPException(status_code=400, detail="Task text cannot be empty")
        task.text = data.text

    now = utcnow()
    task.last_updated_by = data.username or await resolve_username(db, todo_list, identity)
    task.updated_at = now
    todo_list.updated_at = now
    return task


def delete_task(todo_list: TodoList, task_id: str) -> bool:
    """Remove a task by id. Returns False when there was nothing to remove."""
    task = next((t for t in todo_list.tasks if t.id == task_id), None)
    if not task:
        return False
    todo_list.tasks.remove(task)
    todo_list.updated_at = utcnow()
    return True
