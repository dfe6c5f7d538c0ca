"""
Messagely: users and the direct messages they exchange.

On Windows, force the Proactor event loop for every process that imports
`app` (uvicorn reload children, alembic, tests); the selector loop there
breaks socket writes under reload.
"""

import sys
import asyncio

if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())
