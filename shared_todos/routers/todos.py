from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared_todos.config import settings
from shared_todos.database import get_db
from shared_todos.dependencies import get_identity, require_identity
from shared_todos.models.todo_list import TodoList as TodoListModel
from shared_todos.schemas.todo import (
    JoinedTodoList, ListAccessResponse, Member, MemberCreate, Message, Roster, TasksCreate, TaskUpdate,
    TodoList, TodoListCreate, TodoListOverview, TodoListUpdate,
)
from shared_todos.services import todo_lists as list_service
from shared_todos.services.access import (
    ListAccess, evaluate_access, require_creator, require_member, require_read,
)
from shared_todos.utils.security import create_access_token

router = APIRouter(prefix="/todos", tags=["todos"])


def _access(todo_list: TodoListModel, identity: str | None) -> ListAccess:
    return evaluate_access(
        todo_list, identity, public_read_fallback=settings.PUBLIC_READ_FALLBACK
    )


# ── Lists ───────────────────────────────────────────────

@router.get("", response_model=TodoListOverview)
async def list_todo_lists(
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    return await list_service.list_overview(db, identity)


@router.post("", response_model=TodoList, status_code=status.HTTP_201_CREATED, response_model_exclude_none=True)
async def create_todo_list(
    data: TodoListCreate,
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    todo_list = await list_service.create_list(db, data, identity)
    await db.commit()
    return todo_list


@router.get("/{list_id}", response_model=TodoList, response_model_exclude_none=True)
async def get_todo_list(
    list_id: str,
    db: AsyncSession = Depends(get_db),
    identity: str | None = Depends(get_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    require_read(_access(todo_list, identity), list_id)
    return todo_list


@router.get("/{list_id}/access", response_model=ListAccessResponse)
async def get_list_access(
    list_id: str,
    db: AsyncSession = Depends(get_db),
    identity: str | None = Depends(get_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    access = _access(todo_list, identity)
    return ListAccessResponse(
        is_creator=access.is_creator,
        is_member=access.is_member,
        can_edit=access.can_edit,
    )


@router.put("/{list_id}", response_model=TodoList, response_model_exclude_none=True)
async def rename_todo_list(
    list_id: str,
    data: TodoListUpdate,
    if_match: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    require_creator(_access(todo_list, identity), list_id, "update")
    list_service.check_version(todo_list, if_match)

    list_service.rename_list(todo_list, data.title)
    await db.commit()
    return todo_list


@router.delete("/{list_id}", response_model=Message)
async def delete_todo_list(
    list_id: str,
    if_match: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    require_creator(_access(todo_list, identity), list_id, "delete")
    list_service.check_version(todo_list, if_match)

    await db.delete(todo_list)
    await db.commit()
    return Message(message="Todo list deleted successfully")


# ── Members ─────────────────────────────────────────────

@router.post("/{list_id}/users", response_model=JoinedTodoList, response_model_exclude_none=True)
async def join_todo_list(
    list_id: str,
    data: MemberCreate,
    db: AsyncSession = Depends(get_db),
    identity: str | None = Depends(get_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    generated_id = await list_service.add_member(db, todo_list, data, identity)
    await db.commit()

    response = JoinedTodoList.model_validate(todo_list)
    if generated_id:
        response.generated_user_id = generated_id
        response.access_token = create_access_token(data={"sub": generated_id})
    return response


@router.get("/{list_id}/users", response_model=Roster, response_model_exclude_none=True)
async def list_members(
    list_id: str,
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    require_member(_access(todo_list, identity), list_id)
    return Roster(
        todo_list_id=todo_list.id,
        todo_list_title=todo_list.title,
        users=[Member.model_validate(m) for m in todo_list.users],
        total_users=len(todo_list.users),
    )


# ── Tasks ───────────────────────────────────────────────

@router.post("/{list_id}/tasks", response_model=TodoList, response_model_exclude_none=True)
async def add_tasks(
    list_id: str,
    data: TasksCreate,
    if_match: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    require_member(_access(todo_list, identity), list_id)
    list_service.check_version(todo_list, if_match)

    await list_service.add_tasks(db, todo_list, data, identity)
    await db.commit()
    return todo_list


@router.put("/{list_id}/tasks/{task_id}", response_model=TodoList, response_model_exclude_none=True)
async def update_task(
    list_id: str,
    task_id: str,
    data: TaskUpdate,
    if_match: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    require_member(_access(todo_list, identity), list_id)
    list_service.check_version(todo_list, if_match)

    await list_service.update_task(db, todo_list, task_id, data, identity)
    await db.commit()
    return todo_list


@router.delete("/{list_id}/tasks/{task_id}", response_model=TodoList, response_model_exclude_none=True)
async def delete_task(
    list_id: str,
    task_id: str,
    if_match: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
):
    todo_list = await list_service.get_list_by_id(db, list_id)
    require_member(_access(todo_list, identity), list_id)
    list_service.check_version(todo_list, if_match)

    if list_service.delete_task(todo_list, task_id):
        await db.commit()
    return todo_list
