import asyncio
import time
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import OperationalError

from app.core.errors import Conflict, NotFound, StoreUnavailable, ValidationError
from app.users.models import User
from app.users.schemas import UserCreate
from app.users.service import CredentialStore, UserDirectory
from tests.conftest import make_user


async def test_register_then_authenticate(db):
    store = CredentialStore(db)
    out = await store.register(make_user("alice", "secret1"))

    assert out.username == "alice"
    assert await store.authenticate("alice", "secret1") is True


async def test_register_response_has_no_credentials(db):
    store = CredentialStore(db)
    out = await store.register(make_user("alice", "secret1"))

    dumped = out.model_dump()
    assert set(dumped) == {"username", "first_name", "last_name", "phone", "join_at"}
    assert "secret1" not in {str(v) for v in dumped.values()}


async def test_password_is_stored_hashed(db):
    await CredentialStore(db).register(make_user("alice", "secret1"))

    stored = (await db.execute(select(User.password).where(User.username == "alice"))).scalar_one()
    assert stored != "secret1"
    assert stored.startswith("$argon2")


async def test_register_sets_join_and_last_login(db):
    await CredentialStore(db).register(make_user("alice", "secret1"))

    user = (await db.execute(select(User).where(User.username == "alice"))).scalar_one()
    assert user.join_at is not None
    assert user.last_login_at == user.join_at


async def test_duplicate_username_conflicts_and_keeps_first(db):
    store = CredentialStore(db)
    await store.register(make_user("alice", "secret1", first_name="Original"))

    with pytest.raises(Conflict) as exc:
        await store.register(make_user("alice", "other", first_name="Impostor"))
    assert exc.value.kind == "conflict"

    profile = await UserDirectory(db).get("alice")
    assert profile.first_name == "Original"
    assert await store.authenticate("alice", "secret1") is True
    assert await store.authenticate("alice", "other") is False


@pytest.mark.parametrize("field", ["username", "password", "first_name", "last_name", "phone"])
async def test_register_rejects_blank_fields(db, field):
    fields = make_user("alice", "secret1").model_dump()
    fields[field] = "" if field == "password" else "   "
    with pytest.raises(ValidationError) as exc:
        await CredentialStore(db).register(UserCreate(**fields))
    assert field in exc.value.message


async def test_authenticate_wrong_password_is_false(db):
    store = CredentialStore(db)
    await store.register(make_user("alice", "secret1"))

    assert await store.authenticate("alice", "wrong") is False


async def test_authenticate_unknown_user_is_false(db):
    assert await CredentialStore(db).authenticate("nobody", "whatever") is False


async def test_authenticate_unknown_user_still_hashes(db, monkeypatch):
    calls = []

    def fake_dummy_verify():
        calls.append(True)
        return False

    monkeypatch.setattr("app.users.service.dummy_verify", fake_dummy_verify)

    assert await CredentialStore(db).authenticate("nobody", "whatever") is False
    assert calls == [True]


async def test_unknown_user_and_wrong_password_take_comparable_time(db):
    store = CredentialStore(db)
    await store.register(make_user("alice", "secret1"))

    async def timed(username, password):
        samples = []
        for _ in range(3):
            start = time.perf_counter()
            await store.authenticate(username, password)
            samples.append(time.perf_counter() - start)
        return sorted(samples)[1]

    wrong = await timed("alice", "wrong")
    missing = await timed("nobody", "wrong")

    # same hash work on both paths; only a loose bound to stay stable on CI
    assert missing > wrong * 0.25
    assert wrong > missing * 0.25


async def test_update_login_timestamp_is_monotonic(db):
    store = CredentialStore(db)
    directory = UserDirectory(db)
    await store.register(make_user("alice", "secret1"))

    await store.update_login_timestamp("alice")
    first = (await directory.get("alice")).last_login_at
    await asyncio.sleep(0.01)
    await store.update_login_timestamp("alice")
    second = (await directory.get("alice")).last_login_at

    assert second > first


async def test_update_login_timestamp_never_moves_backwards(db):
    store = CredentialStore(db)
    await store.register(make_user("alice", "secret1"))

    future = datetime.now(timezone.utc) + timedelta(days=365)
    await db.execute(update(User).where(User.username == "alice").values(last_login_at=future))
    await db.commit()

    await store.update_login_timestamp("alice")

    stored = (await UserDirectory(db).get("alice")).last_login_at
    assert stored.replace(tzinfo=None) == future.replace(tzinfo=None)


async def test_update_login_timestamp_unknown_user(db):
    with pytest.raises(NotFound):
        await CredentialStore(db).update_login_timestamp("nobody")


async def test_authenticate_with_corrupt_stored_hash_is_false(db):
    store = CredentialStore(db)
    await store.register(make_user("alice", "secret1"))
    await db.execute(update(User).where(User.username == "alice").values(password="not-a-hash"))
    await db.commit()

    assert await store.authenticate("alice", "secret1") is False


async def test_hashing_does_not_block_the_event_loop(db, monkeypatch):
    def slow_hash(password):
        time.sleep(0.5)
        return "$argon2id$fake"

    monkeypatch.setattr("app.users.service.hash_password", slow_hash)
    register = asyncio.create_task(CredentialStore(db).register(make_user("alice", "secret1")))

    ticks = [time.perf_counter()]
    while not register.done():
        await asyncio.sleep(0.05)
        ticks.append(time.perf_counter())
    await register

    # a hash run on the loop itself would stall it for the full 0.5s
    gaps = [b - a for a, b in zip(ticks, ticks[1:])]
    assert len(ticks) >= 5
    assert max(gaps) < 0.3


async def test_failed_commit_rolls_back(db, monkeypatch):
    store = CredentialStore(db)
    await store.register(make_user("alice", "secret1"))

    rollbacks = []
    real_rollback = db.rollback

    async def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("connection lost"))

    async def spy_rollback():
        rollbacks.append(True)
        await real_rollback()

    monkeypatch.setattr(db, "commit", failing_commit)
    monkeypatch.setattr(db, "rollback", spy_rollback)

    with pytest.raises(StoreUnavailable):
        await store.update_login_timestamp("alice")
    assert rollbacks == [True]

    with pytest.raises(StoreUnavailable):
        await store.register(make_user("bob", "secret2"))
    assert rollbacks == [True, True]
