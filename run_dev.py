# run_dev.py
import os
import sys

from dotenv import load_dotenv

APP_MODULE = os.getenv("APP_MODULE", "app.main:app")


def _reload_flag() -> bool:
    reload_env = os.getenv("RELOAD")
    if reload_env is not None:
        return reload_env.strip() in ("1", "true", "True", "yes", "on")
    # Windows: reload children lose the Proactor loop
    return not sys.platform.startswith("win")


def main():
    import uvicorn

    if os.path.exists(".env"):
        load_dotenv(".env")

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload_flag = _reload_flag()

    print(f"🔗 API local: http://127.0.0.1:{port}")
    print(f"🌀 reload={'ON' if reload_flag else 'OFF'}")

    uvicorn.run(
        APP_MODULE,
        host=host,
        port=port,
        loop="asyncio",
        reload=reload_flag,
        reload_dirs=["app"],
        timeout_keep_alive=30,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
