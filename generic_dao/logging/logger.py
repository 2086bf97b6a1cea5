import sys
from pathlib import Path
from typing import Optional
from loguru import logger
from generic_dao.config import settings


class LogConfig:
    """Global logging configuration using Loguru."""
    @classmethod
    def setup_logging(cls, level: Optional[str] = None, log_to_file: Optional[bool] = None):
        level = level or settings.LOG_LEVEL
        if log_to_file is None:
            log_to_file = settings.LOG_TO_FILE

        logger.remove()

        logger.add(
            sys.stdout,
            enqueue=True,
            backtrace=True,
            diagnose=settings.DEBUG,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<magenta>Trace:{extra[trace_id]}</magenta> - <level>{message}</level>"
            ),
            level=level,
        )

        if log_to_file:
            log_dir = Path(settings.LOG_DIR)
            log_dir.mkdir(parents=True, exist_ok=True)

            logger.add(
                log_dir / "dao_{time:YYYY-MM-DD}.log",
                rotation="00:00",
                retention="30 days",
                compression="zip",
                enqueue=True,
                format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | Trace:{extra[trace_id]} - {message}",
                level="DEBUG",
            )

            logger.add(
                log_dir / "error_{time:YYYY-MM-DD}.log",
                level="ERROR",
                rotation="100 MB",
                enqueue=True,
            )

        logger.configure(extra={"trace_id": "system"})


def trace_context(trace_id: str):
    """Context manager tagging every record logged inside it with trace_id."""
    return logger.contextualize(trace_id=trace_id)


def get_logger(name: str = None, trace_id: Optional[str] = None):
    """Get logger instance; trace_id comes from the active trace_context() unless passed explicitly."""
    extra = {}
    if name:
        extra["name"] = name
    if trace_id:
        extra["trace_id"] = trace_id
    return logger.bind(**extra)
