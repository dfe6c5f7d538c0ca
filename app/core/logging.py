# app/core/logging.py
import logging
import os


def setup_logging(level: str = "INFO", log_path: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    # already installed by an earlier call (re-import, reload)
    if any(getattr(h, "_app_handler", False) for h in root.handlers):
        return

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch._app_handler = True
    root.addHandler(ch)

    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setFormatter(fmt)
        fh._app_handler = True
        root.addHandler(fh)
