# app/messages/repository.py
from __future__ import annotations

from typing import Sequence

from sqlalchemy import select, Row
from sqlalchemy.ext.asyncio import AsyncSession

from app.messages.models import Message
from app.users.models import User


def _with_counterpart(match_column, counterpart_column, username: str):
    # message columns + the other party's public profile, oldest first
    return (
        select(
            Message.id,
            Message.body,
            Message.sent_at,
            Message.read_at,
            User.username,
            User.first_name,
            User.last_name,
            User.phone,
        )
        .join(User, User.username == counterpart_column)
        .where(match_column == username)
        .order_by(Message.sent_at.asc(), Message.id.asc())
    )


async def list_sent_by(db: AsyncSession, username: str) -> Sequence[Row]:
    res = await db.execute(
        _with_counterpart(Message.from_username, Message.to_username, username)
    )
    return res.all()


async def list_received_by(db: AsyncSession, username: str) -> Sequence[Row]:
    res = await db.execute(
        _with_counterpart(Message.to_username, Message.from_username, username)
    )
    return res.all()
