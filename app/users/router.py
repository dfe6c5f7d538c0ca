# app/users/router.py
from fastapi import APIRouter, Depends

from app.core.deps import (
    get_current_username,
    ensure_correct_user,
    get_user_directory,
    get_message_query,
)
from app.messages.schemas import SentMessagesOut, ReceivedMessagesOut
from app.messages.service import MessageQuery
from app.users.schemas import UserListOut, UserDetailOut
from app.users.service import UserDirectory

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/", response_model=UserListOut)
async def list_users(
    _: str = Depends(get_current_username),
    directory: UserDirectory = Depends(get_user_directory),
):
    return {"users": await directory.list_all()}


@router.get("/{username}", response_model=UserDetailOut)
async def user_detail(
    username: str,
    _: str = Depends(get_current_username),
    directory: UserDirectory = Depends(get_user_directory),
):
    return {"user": await directory.get(username)}


@router.get("/{username}/to", response_model=ReceivedMessagesOut)
async def messages_to_user(
    username: str = Depends(ensure_correct_user),
    messages: MessageQuery = Depends(get_message_query),
):
    return {"messages": await messages.messages_to(username)}


@router.get("/{username}/from", response_model=SentMessagesOut)
async def messages_from_user(
    username: str = Depends(ensure_correct_user),
    messages: MessageQuery = Depends(get_message_query),
):
    return {"messages": await messages.messages_from(username)}
