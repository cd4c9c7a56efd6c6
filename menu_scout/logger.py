# === FILE: menu_scout/logger.py ===
"""Логирование MenuScout.

Все модули пишут в один логгер ``MenuScout``::

    from menu_scout.logger import logger
    logger.info("Старт сканирования")

Сообщения идут в stderr: stdout команды ``scan`` занят JSON-отчётом, и его
можно перенаправить в файл или ``jq`` без примеси логов. При желании
добавляется файл с ротацией (5 МБ, три архива).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOGGER_NAME: Final[str] = "MenuScout"
DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Заново настраивает обработчики логгера MenuScout (вызывается из CLI)."""
    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


init_logging()

__all__ = ["logger", "init_logging", "LOGGER_NAME"]
