"""
Централизованная конфигурация логирования.

Строки действий имеют вид "📝 [SCHEDULE] ...": в терминале тег раздела
подсвечивается, в остальных средах используется простой формат через "|".
"""

import logging
import re
import sys
from typing import Optional

# Тег раздела в начале сообщения, например [POS] или [AUTH]
TAG_PATTERN = re.compile(r"\[([A-Z_]+)\]")

PLAIN_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s'
BOX_LINE = "═" * 59


class ColoredFormatter(logging.Formatter):
    """
    Форматер для терминала: цвет уровня, символ уровня и жирный тег раздела.
    """

    LEVEL_STYLES = {
        'DEBUG': ('\033[36m', '🔍'),
        'INFO': ('\033[32m', 'ℹ️'),
        'WARNING': ('\033[33m', '⚠️'),
        'ERROR': ('\033[31m', '❌'),
        'CRITICAL': ('\033[35m', '🚨'),
    }
    BOLD = '\033[1m'
    RESET = '\033[0m'

    def format(self, record):
        color, symbol = self.LEVEL_STYLES.get(record.levelname, (self.RESET, '📝'))
        message = TAG_PATTERN.sub(lambda m: f"{self.BOLD}[{m.group(1)}]{self.RESET}", record.getMessage(), count=1)

        line = (
            f"{color}{symbol}{self.RESET} {self.formatTime(record, self.datefmt)} | "
            f"{color}{record.levelname:8}{self.RESET} | {record.name:32} | {message}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: Optional[str] = None, enable_colors: Optional[bool] = None) -> None:
    """
    Настраивает корневой логгер приложения.

    Args:
        level: Уровень логирования; по умолчанию LOG_LEVEL из настроек
        enable_colors: Цвета в терминале; по умолчанию LOG_COLORS из настроек
    """
    if level is None or enable_colors is None:
        from alphaflow.core.config import settings
        level = level or settings.LOG_LEVEL
        enable_colors = settings.LOG_COLORS if enable_colors is None else enable_colors

    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if enable_colors and sys.stdout.isatty():
        handler.setFormatter(ColoredFormatter(datefmt='%H:%M:%S'))
    else:
        handler.setFormatter(logging.Formatter(fmt=PLAIN_FORMAT, datefmt='%H:%M:%S'))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    _configure_module_levels()

    logging.getLogger(__name__).info(
        f"🎨 [LOGGING] Логирование настроено: уровень={level.upper()}, цвета={'да' if enable_colors else 'нет'}"
    )


def _configure_module_levels() -> None:
    """Приглушает шумные внешние библиотеки"""
    for name in ('httpx', 'httpcore', 'urllib3', 'google', 'grpc', 'faker', 'uvicorn.access'):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_action_start(logger: logging.Logger, action: str, actor: str, details: str = "") -> None:
    """
    Логирует важное действие пользователя в рамке.

    Args:
        logger: Логгер для записи
        action: Название действия
        actor: Кто выполняет действие
        details: Дополнительные детали
    """
    logger.info(f"╔{BOX_LINE}")
    logger.info(f"║ 🚀 {action}")
    logger.info(f"║ 👤 Usuário: {actor}")
    if details:
        logger.info(f"║ 📋 {details}")
    logger.info(f"╚{BOX_LINE}")


def log_error(logger: logging.Logger, error: Exception, context: str = "") -> None:
    """Логирует непредвиденную ошибку в рамке вместе со стеком"""
    logger.error(f"╔{BOX_LINE}")
    logger.error(f"║ ❌ ОШИБКА: {type(error).__name__}")
    if context:
        logger.error(f"║ 📍 Контекст: {context}")
    logger.error(f"║ 💥 {error}")
    logger.error(f"╚{BOX_LINE}", exc_info=error)
