# app/users/repository.py
from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import select, insert, update, case, Row
from sqlalchemy.ext.asyncio import AsyncSession
from app.users.models import User

# columns safe to hand out; User.password is never part of these
SUMMARY_COLUMNS = (User.username, User.first_name, User.last_name, User.phone)
DETAIL_COLUMNS = SUMMARY_COLUMNS + (User.join_at, User.last_login_at)


async def get_password_hash(db: AsyncSession, username: str) -> str | None:
    res = await db.execute(select(User.password).where(User.username == username))
    return res.scalar_one_or_none()


async def insert_user(
    db: AsyncSession,
    *,
    username: str,
    hashed_password: str,
    first_name: str,
    last_name: str,
    phone: str,
    now: datetime,
) -> None:
    # Core insert: a duplicate username reaches the PK constraint and
    # comes back as IntegrityError
    await db.execute(
        insert(User).values(
            username=username,
            password=hashed_password,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            join_at=now,
            last_login_at=now,
        )
    )


async def touch_last_login(db: AsyncSession, username: str, now: datetime) -> int:
    """
    Sets last_login_at to max(stored, now). Returns the number of matched rows.
    """
    res = await db.execute(
        update(User)
        .where(User.username == username)
        .values(
            last_login_at=case(
                (User.last_login_at > now, User.last_login_at),
                else_=now,
            )
        )
        .execution_options(synchronize_session=False)
    )
    return res.rowcount


async def list_summaries(db: AsyncSession) -> Sequence[Row]:
    res = await db.execute(select(*SUMMARY_COLUMNS).order_by(User.username.asc()))
    return res.all()


async def get_detail(db: AsyncSession, username: str) -> Row | None:
    res = await db.execute(select(*DETAIL_COLUMNS).where(User.username == username))
    return res.one_or_none()
