# app/core/security.py
import logging

from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from app.core.config import settings

log = logging.getLogger(__name__)


def build_password_context(work_factor: int) -> CryptContext:
    # argon2 only; time_cost is the tunable work factor
    return CryptContext(
        schemes=["argon2"],
        default="argon2",
        deprecated="auto",
        argon2__time_cost=work_factor,
    )


pwd_context = build_password_context(settings.HASH_WORK_FACTOR)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # unrecognized or malformed stored hash: a failed login, not a crash
        log.warning("stored password hash could not be verified")
        return False


def dummy_verify() -> bool:
    # Burns roughly the time of a real verify so a missing user and a wrong
    # password take the same path length.
    return pwd_context.dummy_verify()


def create_access_token(sub: str, expires_minutes: int | None = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MIN
    )
    payload = {"sub": sub, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def decode_access_token(token: str) -> str:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    sub = payload.get("sub")
    if not sub:
        raise JWTError("missing sub")
    return sub
