# app/messages/service.py
from __future__ import annotations

from sqlalchemy import Row
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import store_errors
from app.messages import repository as repo
from app.messages.schemas import CounterpartProfile, SentMessage, ReceivedMessage


def _counterpart(row: Row) -> CounterpartProfile:
    return CounterpartProfile(
        username=row.username,
        first_name=row.first_name,
        last_name=row.last_name,
        phone=row.phone,
    )


class MessageQuery:
    """
    Messages joined with the profile of the other party.

    An unknown username is not an error here: the join simply comes back
    empty, same as for a user with no messages.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def messages_from(self, username: str) -> list[SentMessage]:
        with store_errors("listing sent messages"):
            rows = await repo.list_sent_by(self.db, username)
        return [
            SentMessage(
                id=r.id,
                body=r.body,
                sent_at=r.sent_at,
                read_at=r.read_at,
                to_user=_counterpart(r),
            )
            for r in rows
        ]

    async def messages_to(self, username: str) -> list[ReceivedMessage]:
        with store_errors("listing received messages"):
            rows = await repo.list_received_by(self.db, username)
        return [
            ReceivedMessage(
                id=r.id,
                body=r.body,
                sent_at=r.sent_at,
                read_at=r.read_at,
                from_user=_counterpart(r),
            )
            for r in rows
        ]
