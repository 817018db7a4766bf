from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_REDACTED_KEYS = ("prompt", "messages", "api_key", "authorization", "raw_payload", "body")


def logging_config(level: str = "INFO") -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }


def configure_logging(level: Optional[str] = None) -> None:
    if level is None:
        from llmcore.config import get_settings

        level = get_settings().log_level
    dictConfig(logging_config(level))


def safe_redact(event: Dict[str, Any]) -> Dict[str, Any]:
    # Shallow redact prompt content and credentials
    redacted = dict(event) if isinstance(event, dict) else {}
    for key in _REDACTED_KEYS:
        if key in redacted:
            redacted.pop(key)
    return redacted


def structured_log(event: Dict[str, Any]) -> None:
    try:
        safe_event = safe_redact(event)
        logger.info(json.dumps(safe_event, separators=(",", ":"), default=str))
    except Exception:
        # logging must never break the completion path
        return


__all__ = ["configure_logging", "logging_config", "structured_log", "safe_redact"]
