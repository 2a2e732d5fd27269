"""Configuración del logging estándar de Python para toda la API."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from app.core.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5

_HANDLER_MARK = "_cooked_handler"


def _level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings) -> None:
    """Instala los handlers en el logger raíz (idempotente).

    - Consola: nivel `LOG_LEVEL`, como mínimo WARNING en producción.
    - Si `log_dir` está definido, `combined.log` y `error.log` rotativos.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    level = _level(settings.log_level)
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console.setLevel(max(level, logging.WARNING) if settings.is_production else level)
    handlers: list[logging.Handler] = [console]

    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        combined = RotatingFileHandler(
            settings.log_dir / "combined.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        combined.setLevel(level)
        errors = RotatingFileHandler(
            settings.log_dir / "error.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        errors.setLevel(logging.ERROR)
        handlers.extend([combined, errors])

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
    root.setLevel(level)


def log_slow_operation(
    logger: logging.Logger, operation: str, duration_ms: float, **meta: object
) -> None:
    """Registra la duración de una operación con nivel según lo lenta que fue."""
    extra = " ".join(f"{k}={v}" for k, v in meta.items())
    message = "%s took %.0fms %s"
    if duration_ms > 1000:
        logger.warning("Slow operation detected: " + message, operation, duration_ms, extra)
    elif duration_ms > 500:
        logger.info(message, operation, duration_ms, extra)
    else:
        logger.debug(message, operation, duration_ms, extra)
