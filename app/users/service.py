# app/users/service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, NotFound, ValidationError, store_errors
from app.core.security import hash_password, verify_password, dummy_verify
from app.users import repository as repo
from app.users.schemas import UserCreate, UserOut, UserSummary, UserDetail

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("username", "password", "first_name", "last_name", "phone")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CredentialStore:
    """
    Owns password hashing, login checks and the last-login timestamp.

    Hashing runs in the threadpool so a slow argon2 round never holds up
    the event loop.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, data: UserCreate) -> UserOut:
        missing = [f for f in REQUIRED_FIELDS if not (getattr(data, f, None) or "").strip()]
        if missing:
            raise ValidationError(f"missing required fields: {', '.join(missing)}")

        hashed = await run_in_threadpool(hash_password, data.password)
        now = _now()

        with store_errors("registering user"):
            try:
                await repo.insert_user(
                    self.db,
                    username=data.username,
                    hashed_password=hashed,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    phone=data.phone,
                    now=now,
                )
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                log.info("registration conflict for username %r", data.username)
                raise Conflict(f"username {data.username!r} is taken, please pick another")
            except SQLAlchemyError:
                await self.db.rollback()
                raise

        log.info("registered user %r", data.username)
        return UserOut(
            username=data.username,
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            join_at=now,
        )

    async def authenticate(self, username: str, password: str) -> bool:
        if not username or not password:
            await run_in_threadpool(dummy_verify)
            return False

        with store_errors("looking up credentials"):
            hashed = await repo.get_password_hash(self.db, username)

        if hashed is None:
            # same amount of hashing work as a wrong password
            await run_in_threadpool(dummy_verify)
            return False
        return await run_in_threadpool(verify_password, password, hashed)

    async def update_login_timestamp(self, username: str) -> None:
        with store_errors("updating login timestamp"):
            try:
                matched = await repo.touch_last_login(self.db, username, _now())
                if not matched:
                    await self.db.rollback()
                    raise NotFound(f"no user {username!r} could be found")
                await self.db.commit()
            except SQLAlchemyError:
                await self.db.rollback()
                raise
        log.debug("last_login_at updated for %r", username)


class UserDirectory:
    """Read-only public profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[UserSummary]:
        with store_errors("listing users"):
            rows = await repo.list_summaries(self.db)
        return [UserSummary.model_validate(r) for r in rows]

    async def get(self, username: str) -> UserDetail:
        with store_errors("fetching user"):
            row = await repo.get_detail(self.db, username)
        if row is None:
            raise NotFound(f"user {username!r} not found")
        return UserDetail.model_validate(row)
