"""Process-wide logging configuration."""

import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5


def configure_logging(level: str | int = "INFO", log_dir: Path | str | None = None) -> None:
    """Configure the root logger.

    Always logs to the console. With ``log_dir``, also writes everything to
    ``combined.log`` and errors to ``error.log``, each rotated at 5 MB with
    five backups.

    Args:
        level: Root log level name or number.
        log_dir: Directory for the log files, or None for console only.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        combined = logging.handlers.RotatingFileHandler(
            log_dir / "combined.log", maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS
        )
        errors = logging.handlers.RotatingFileHandler(
            log_dir / "error.log", maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS
        )
        errors.setLevel(logging.ERROR)
        handlers.extend([combined, errors])

    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    # HTTP client request lines only at WARNING and above
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
