import os
from datetime import datetime, timezone

# must be set before anything under app/ reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["HASH_WORK_FACTOR"] = "1"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_session
from app.main import app
from app.messages.models import Message
from app.users.schemas import UserCreate
from app.users.service import CredentialStore


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """
    Fresh in-memory database per test.
    """
    eng = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def make_user(username: str, password: str, **overrides) -> UserCreate:
    fields = {
        "username": username,
        "password": password,
        "first_name": username.capitalize(),
        "last_name": "Testy",
        "phone": "+14155550000",
    }
    fields.update(overrides)
    return UserCreate(**fields)


async def add_message(session_factory, from_username, to_username, body, sent_at=None) -> int:
    async with session_factory() as session:
        msg = Message(
            from_username=from_username,
            to_username=to_username,
            body=body,
            sent_at=sent_at or datetime.now(timezone.utc),
        )
        session.add(msg)
        await session.commit()
        return msg.id


@pytest.fixture
async def alice_and_bob(session_factory):
    """alice/secret1 and bob/secret2, committed."""
    async with session_factory() as session:
        store = CredentialStore(session)
        await store.register(make_user("alice", "secret1", phone="+14155551111"))
        await store.register(make_user("bob", "secret2", phone="+14155552222"))
