"""Logger configuration for the coaching session scheduler."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> <level>{level: <7}</level> "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} {name}:{line} | {message}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    *,
    json_file: bool = False,
    rotation: str = "5 MB",
    retention: int = 3,
) -> None:
    """Configure loguru sinks for the scheduler.

    Args:
        level: Minimum level for every sink
        log_file: Optional path of a rotating file sink
        json_file: Serialize file records as JSON lines (one record per line)
        rotation: Size or age at which the file rotates
        retention: Number of rotated files kept
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            serialize=json_file,
            rotation=rotation,
            retention=retention,
        )

    logger.debug(f"Scheduler logging at {level}" + (f", file sink {log_file}" if log_file else ""))


def setup_logger_from_settings(log_file: str | None = None) -> None:
    """Configure the logger from LOG_LEVEL, LOG_FILE and LOG_JSON.

    An explicit log_file overrides LOG_FILE.
    """
    from coach_scheduler.config.settings import settings

    setup_logger(
        level=settings.log_level,
        log_file=log_file or settings.log_file,
        json_file=settings.log_json,
    )
