from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from shared_todos.database import get_db
from shared_todos.config import settings
from shared_todos.models.user import User as UserModel
from shared_todos.services.users import get_user_by_id
from shared_todos.utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)

# Values older clients send when they have no stored identity
_EMPTY_IDENTITIES = {"", "undefined", "null"}


def get_identity(
    x_user_id: str | None = Header(default=None),
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """
    Who the request claims to be, or None for anonymous access.

    A bearer token is verified; the plain X-User-Id header is taken at face value
    unless signed identities are required.
    """
    if creds and creds.credentials:
        subject = decode_access_token(creds.credentials)
        if subject is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return subject

    if settings.REQUIRE_SIGNED_IDENTITY or x_user_id is None:
        return None
    identity = x_user_id.strip()
    if identity in _EMPTY_IDENTITIES:
        return None
    return identity


def require_identity(identity: str | None = Depends(get_identity)) -> str:
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User ID required")
    return identity


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(require_identity),
) -> UserModel:
    user = await get_user_by_id(db, identity)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return user
