"""
Logging configuration for the kubechat process.

Access logs of health probes are dropped, anonymized command reports get a
handler of their own so they can be shipped separately, and everything
else under ``kubechat`` follows LOG_LEVEL.
"""

import logging
import os
from typing import Any, Dict, Optional

PROBE_PATHS = ("/health",)

ANALYTICS_LOGGER = "kubechat.analytics"


class HealthCheckFilter(logging.Filter):
    """Drops uvicorn access lines for liveness/readiness probes."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        return not ("GET" in message and any(path in message for path in PROBE_PATHS))


def _stream_handler(formatter: str, **extra) -> Dict[str, Any]:
    return {"class": "logging.StreamHandler", "formatter": formatter, "stream": "ext://sys.stdout", **extra}


def get_logging_config(level: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the dictConfig mapping.

    Args:
        level: Level of the kubechat loggers; defaults to LOG_LEVEL or INFO
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    loggers: Dict[str, Any] = {
        name: {"handlers": ["default"], "level": "INFO", "propagate": False}
        for name in ("uvicorn", "uvicorn.error")
    }
    loggers["uvicorn.access"] = {"handlers": ["access"], "level": "INFO", "propagate": False}
    loggers["kubechat"] = {"handlers": ["default"], "level": level, "propagate": False}
    # command reports are emitted at INFO regardless of LOG_LEVEL
    loggers[ANALYTICS_LOGGER] = {"handlers": ["analytics"], "level": "INFO", "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(message)s"},
            "analytics": {"format": "%(asctime)s - analytics - %(message)s"},
        },
        "handlers": {
            "default": _stream_handler("default"),
            "access": _stream_handler("access", filters=["health_check_filter"]),
            "analytics": _stream_handler("analytics"),
        },
        "loggers": loggers,
        "root": {"level": "INFO", "handlers": ["default"]},
    }
