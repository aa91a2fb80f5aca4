from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from shared_todos.database import get_db
from shared_todos.dependencies import get_current_user
from shared_todos.models.user import User as UserModel
from shared_todos.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from shared_todos.services import users as user_service
from shared_todos.utils.security import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: UserModel) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        username=user.username,
        created_at=user.created_at,
        access_token=create_access_token(data={"sub": user.id}),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db: AsyncSession = Depends(get_db)):
    new_user = await user_service.create_user(db, user)
    return _auth_response(new_user)


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await user_service.authenticate(db, credentials)
    return _auth_response(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserModel = Depends(get_current_user)):
    return current_user
