import logging
import logging.config
from pathlib import Path
from typing import Dict, Optional


LOG_DIR = Path(__file__).resolve().parent / "logs"

# One file per browsing session lives here
SESSION_LOG_DIR = LOG_DIR / "sessions"

SESSION_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Loggers stay cached for the lifetime of their session
_session_loggers: Dict[str, logging.Logger] = {}


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> logging.Logger:
    """Configure app-wide logging: console plus a rotating file, uvicorn included."""

    target_dir = log_dir or LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "default",
                "filename": str(target_dir / "app.log"),
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 3,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "uvicorn.error": {"level": level, "handlers": ["console", "file"], "propagate": False},
            "uvicorn.access": {"level": level, "handlers": ["console", "file"], "propagate": False},
            "httpx": {"level": "WARNING", "handlers": ["console", "file"], "propagate": False},
        },
        "root": {
            "level": level,
            "handlers": ["console", "file"],
        },
    }

    logging.config.dictConfig(logging_config)
    return logging.getLogger("roi_first")


def get_session_logger(session_id: str, level: str = "INFO") -> logging.Logger:
    """
    Get or create the logger of one ROI session.

    The logger writes to logs/sessions/<session_id>.log and to the console,
    and does not propagate to the root logger.

    Args:
        session_id: Unique session identifier
        level: Logging level (default: INFO)

    Returns:
        Logger instance for the session
    """
    if session_id in _session_loggers:
        return _session_loggers[session_id]

    SESSION_LOG_DIR.mkdir(parents=True, exist_ok=True)

    session_logger = logging.getLogger(f"roi_first.session.{session_id}")
    session_logger.setLevel(level)
    session_logger.propagate = False

    formatter = logging.Formatter(SESSION_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = logging.FileHandler(str(SESSION_LOG_DIR / f"{session_id}.log"), mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    session_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    session_logger.addHandler(console_handler)

    _session_loggers[session_id] = session_logger
    session_logger.info(f"=== ROI session {session_id} opened ===")

    return session_logger


def close_session_logger(session_id: str) -> None:
    """
    Flush, detach and forget the handlers of a session logger.

    Called when a session expires or is dropped explicitly.
    """
    session_logger = _session_loggers.pop(session_id, None)
    if session_logger is None:
        return

    session_logger.info(f"=== ROI session {session_id} closed ===")
    for handler in session_logger.handlers[:]:
        handler.close()
        session_logger.removeHandler(handler)
