import logging
import os
from logging import Logger

from pythonjsonlogger.json import JsonFormatter


def setup_logging(level: str = None, json: bool = True) -> None:
    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(lvl)

    handler = logging.StreamHandler()
    if json:
        handler.setFormatter(JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(filename)s %(lineno)d",
            json_ensure_ascii=False,
        ))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    root.addHandler(handler)


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)
