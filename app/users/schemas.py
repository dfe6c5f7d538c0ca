# app/users/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

class UserCreate(BaseModel):
    # blank values are rejected by CredentialStore.register; absent ones by
    # the request validation handler in app.main, with the same error shape
    username: str = Field(..., max_length=50)
    password: str = Field(..., max_length=128)
    first_name: str
    last_name: str
    phone: str


class LoginIn(BaseModel):
    username: str
    password: str


class UserSummary(BaseModel):
    """Public profile as listed: no timestamps, no credentials."""
    model_config = ConfigDict(from_attributes=True)

    username: str
    first_name: str
    last_name: str
    phone: str


class UserOut(UserSummary):
    join_at: datetime


class UserDetail(UserOut):
    last_login_at: datetime | None = None


class TokenOut(BaseModel):
    token: str


class RegisterOut(TokenOut):
    user: UserOut


class UserListOut(BaseModel):
    users: list[UserSummary]


class UserDetailOut(BaseModel):
    user: UserDetail
