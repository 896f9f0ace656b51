"""
Настройка логирования сервиса

- Пишем в файл LOGS_DIR/orders.log с ротацией
- Если нет прав на запись (например, bind mount в Docker), остаёмся только на консоли
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.config import Config


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "orders.log"


def setup_logging(level: str | None = None, logs_dir: str | None = None) -> int:
    """
    Настройка root logger

    Args:
        level: Уровень логирования (по умолчанию Config.LOG_LEVEL)
        logs_dir: Директория логов (по умолчанию Config.LOGS_DIR)

    Returns:
        Установленный числовой уровень
    """
    log_formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    if hasattr(console_handler.stream, "reconfigure"):
        console_handler.stream.reconfigure(encoding="utf-8")

    handlers: list[logging.Handler] = [console_handler]

    log_file_path = Path(logs_dir or Config.LOGS_DIR) / LOG_FILE_NAME
    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_file_path),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(log_formatter)
        handlers.insert(0, file_handler)
    except OSError as e:
        sys.stderr.write(f"[logging] WARNING: cannot use file logging at {log_file_path}: {e}\n")

    log_level = getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    logging.getLogger("app").setLevel(log_level)
    # SQL пишет только при DATABASE_ECHO
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if Config.DATABASE_ECHO else logging.WARNING
    )

    if log_level == logging.DEBUG:
        logging.getLogger(__name__).info("DEBUG режим включен (LOG_LEVEL=DEBUG)")

    return log_level
