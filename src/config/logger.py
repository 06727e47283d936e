import json
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from src.config.settings import settings

_BASE_LOGGER_NAME = "uvicorn.error"
_CONFIGURED = False
_DEBUG_FILE_HANDLER_MARK = "_symptom_checker_debug_file"


def _level_or_none(level_name: str) -> int | None:
    level = getattr(logging, (level_name or "").strip().upper(), None)
    return level if isinstance(level, int) else None


def _ensure_debug_file_handler(base_logger: logging.Logger) -> None:
    if any(getattr(h, _DEBUG_FILE_HANDLER_MARK, False) for h in base_logger.handlers):
        return

    backup_count = settings.LOG_FILE_BACKUP_COUNT
    if backup_count < 0:
        base_logger.warning(
            "[logger] Invalid LOG_FILE_BACKUP_COUNT '%s', fallback to 7",
            backup_count,
        )
        backup_count = 7

    file_level = _level_or_none(settings.LOG_FILE_LEVEL)
    if file_level is None:
        base_logger.warning(
            "[logger] Invalid LOG_FILE_LEVEL '%s', fallback to DEBUG",
            settings.LOG_FILE_LEVEL,
        )
        file_level = logging.DEBUG

    try:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=str(log_dir / settings.LOG_FILE_NAME),
            when=settings.LOG_FILE_WHEN,
            interval=settings.LOG_FILE_INTERVAL,
            backupCount=backup_count,
            encoding=settings.LOG_FILE_ENCODING,
        )
    except Exception as exc:
        base_logger.warning(
            "[logger] Failed to configure debug file logging at '%s': %s",
            settings.LOG_DIR,
            exc,
        )
        return

    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    setattr(file_handler, _DEBUG_FILE_HANDLER_MARK, True)
    base_logger.addHandler(file_handler)


def configure_logging() -> None:
    """Attach console and rotating debug-file handlers to the base logger once."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    base_logger = logging.getLogger(_BASE_LOGGER_NAME)
    console_level = _level_or_none(settings.LOG_LEVEL)

    if not base_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        handler.setLevel(console_level or logging.INFO)
        base_logger.addHandler(handler)
        base_logger.propagate = False
    base_logger.setLevel(console_level or logging.INFO)

    if console_level is None:
        base_logger.warning(
            "[logger] Invalid LOG_LEVEL '%s', fallback to INFO",
            settings.LOG_LEVEL,
        )

    _ensure_debug_file_handler(base_logger)
    _CONFIGURED = True


def get_logger(name: str | None = None) -> logging.Logger:
    configure_logging()
    base_logger = logging.getLogger(_BASE_LOGGER_NAME)
    if not name:
        return base_logger
    return base_logger.getChild(name)


def _stringify_log_content(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, BaseModel):
        try:
            return json.dumps(content.model_dump(mode="json", by_alias=True), ensure_ascii=False)
        except Exception:
            return str(content)
    return str(content)


def log_stage(logger: logging.Logger, stage: str, content: Any) -> None:
    """Log an LLM input/output blob, truncated to AGENT_LOG_TRUNCATE chars."""
    text = _stringify_log_content(content)
    if not text:
        logger.info("[%s] output:\n[EMPTY]", stage)
        return

    limit = settings.AGENT_LOG_TRUNCATE
    if len(text) > limit:
        text = f"{text[:limit]} ...[truncated {len(text) - limit} chars]"
    logger.info("[%s] output:\n%s", stage, text)
