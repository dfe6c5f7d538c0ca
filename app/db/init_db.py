import logging
from app.db.session import engine
from app.db.base import Base

# every model that must exist in the DB
from app.users.models import User  # noqa: F401
from app.messages.models import Message  # noqa: F401

log = logging.getLogger("uvicorn")


async def init_models():
    """
    Create/verify every table declared on Base.metadata.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("✅ DB init: tables created/verified.")
