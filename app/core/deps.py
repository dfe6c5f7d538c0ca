# app/core/deps.py
from fastapi import Depends, Header, Query
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Unauthorized
from app.core.security import decode_access_token
from app.db.session import get_session
from app.messages.service import MessageQuery
from app.users.service import CredentialStore, UserDirectory


def get_credential_store(db: AsyncSession = Depends(get_session)) -> CredentialStore:
    return CredentialStore(db)


def get_user_directory(db: AsyncSession = Depends(get_session)) -> UserDirectory:
    return UserDirectory(db)


def get_message_query(db: AsyncSession = Depends(get_session)) -> MessageQuery:
    return MessageQuery(db)


def get_current_username(
    token: str | None = Query(None),
    authorization: str | None = Header(None),
) -> str:
    # token by query or Authorization: Bearer XXX
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
    if not token:
        raise Unauthorized("missing token")
    try:
        return decode_access_token(token)
    except JWTError:
        raise Unauthorized("invalid token")


def ensure_correct_user(
    username: str,
    current: str = Depends(get_current_username),
) -> str:
    """Only the user named in the path may go on."""
    if current != username:
        raise Unauthorized("unauthorized")
    return current
