from __future__ import annotations

import logging
import os
import re
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_DEFAULT_LEVEL = "INFO"
_PREVIEW_CHARS = 80
_CONFIGURED = False


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


def _configure_logger() -> None:
    """Configure the shared agent logger once."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    level_name = os.getenv("AGENT_LOG_LEVEL", _DEFAULT_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger("agent")
    logger.setLevel(level)
    logger.propagate = False

    if _truthy(os.getenv("AGENT_FILE_LOG", "true")):
        log_dir = Path(os.getenv("AGENT_LOG_DIR") or _DEFAULT_LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            log_dir / "rule-agent.log",
            when="midnight",
            backupCount=int(os.getenv("AGENT_LOG_RETENTION_DAYS", "14")),
            encoding="utf-8",
        )
        handler.suffix = "%Y-%m-%d.log"
        handler.extMatch = re.compile(r"^\d{4}-\d{2}-\d{2}\.log$")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if _truthy(os.getenv("AGENT_STDOUT_LOG", "false")):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    _CONFIGURED = True


def get_agent_logger(name: str | None = None) -> logging.Logger:
    """Return a scoped agent logger."""
    _configure_logger()
    base = logging.getLogger("agent")
    return base if not name else base.getChild(name)


def preview(text: object, limit: int = _PREVIEW_CHARS) -> str:
    """Single-line, truncated rendering of user text for log lines."""
    flat = " ".join(str(text or "").split())
    return flat if len(flat) <= limit else f"{flat[:limit]}..."
