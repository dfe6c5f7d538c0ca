# app/auth/router.py
from fastapi import APIRouter, Depends, status

from app.core.deps import get_credential_store
from app.core.errors import Unauthorized
from app.core.security import create_access_token
from app.users.schemas import UserCreate, LoginIn, TokenOut, RegisterOut
from app.users.service import CredentialStore

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    store: CredentialStore = Depends(get_credential_store),
):
    """
    {username, password, first_name, last_name, phone} => {token, user}

    The new user counts as logged in: join_at == last_login_at.
    """
    user = await store.register(payload)
    token = create_access_token(sub=user.username)
    return {"token": token, "user": user}


@router.post("/login", response_model=TokenOut)
async def login(
    payload: LoginIn,
    store: CredentialStore = Depends(get_credential_store),
):
    if not await store.authenticate(payload.username, payload.password):
        raise Unauthorized("invalid username/password")
    await store.update_login_timestamp(payload.username)
    return {"token": create_access_token(sub=payload.username)}
