from pydantic import Field, field_validator
from shared_todos.schemas.base import CamelModel, UtcDatetime
from shared_todos.utils.sanitization import sanitize_string


class UserBase(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserLogin(CamelModel):
    username: str
    password: str

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class UserResponse(UserBase):
    id: str
    created_at: UtcDatetime


class AuthResponse(UserResponse):
    access_token: str
    token_type: str = "bearer"
