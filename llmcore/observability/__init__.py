from __future__ import annotations

from .logging import configure_logging, logging_config, safe_redact, structured_log
from .metrics import counter, event, histogram

__all__ = [
    "configure_logging",
    "logging_config",
    "safe_redact",
    "structured_log",
    "counter",
    "event",
    "histogram",
]
