"""
Access rules for shared lists.

Everything here is a pure function of a list record and the requester's
identity so the rules can be checked without a database or a request.
"""
import logging
from dataclasses import dataclass
from enum import Enum

from fastapi import HTTPException, status

from shared_todos.models.todo_list import TodoList

logger = logging.getLogger(__name__)


class AccessLevel(str, Enum):
    DENIED = "denied"
    PUBLIC = "public"
    MEMBER = "member"


@dataclass(frozen=True)
class ListAccess:
    level: AccessLevel
    is_creator: bool = False
    is_member: bool = False

    @property
    def can_read(self) -> bool:
        return self.level != AccessLevel.DENIED

    @property
    def can_edit(self) -> bool:
        return self.level == AccessLevel.MEMBER


def is_member(todo_list: TodoList, identity: str | None) -> bool:
    if not identity:
        return False
    return any(m.user_id == identity for m in todo_list.users)


def evaluate_access(
    todo_list: TodoList,
    identity: str | None,
    *,
    public_read_fallback: bool = True,
) -> ListAccess:
    if not identity:
        return ListAccess(AccessLevel.PUBLIC)

    creator = todo_list.created_by == identity
    member = is_member(todo_list, identity)
    if creator or member:
        return ListAccess(AccessLevel.MEMBER, is_creator=creator, is_member=member)

    # Known identity outside the roster: shared links keep working only while
    # the fallback is on.
    if public_read_fallback:
        return ListAccess(AccessLevel.PUBLIC)
    return ListAccess(AccessLevel.DENIED)


def require_read(access: ListAccess, list_id: str):
    if not access.can_read:
        logger.warning("Read denied on list %s", list_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


def require_member(access: ListAccess, list_id: str):
    if not access.can_edit:
        logger.warning("Write denied on list %s", list_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


def require_creator(access: ListAccess, list_id: str, action: str = "modify"):
    if not access.is_creator:
        logger.warning("Non-creator tried to %s list %s", action, list_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only the creator can {action} the list",
        )
