# todo_api/core/logging.py
import logging

from todo_api.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    global _configured
    if _configured:
        return
    logging.basicConfig(
        format=LOG_FORMAT,
        level=level or settings.LOG_LEVEL,
        handlers=[logging.StreamHandler()],
    )
    _configured = True
