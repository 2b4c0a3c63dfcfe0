"""
Logging configuration for the terminal UI.

Records are routed to Textual's log (visible with ``textual console``) so
nothing is written over the rendered frame.
"""

import logging
import logging.config
from typing import Any, Dict


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration that sends everything to the Textual log."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "textual": {
                "class": "textual.logging.TextualHandler",
                "formatter": "default",
            }
        },
        "loggers": {
            "thttp": {
                "handlers": ["textual"],
                "level": level,
                "propagate": False,
            },
            "httpx": {
                "handlers": ["textual"],
                "level": "WARNING",
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["textual"],
        },
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(get_logging_config(level))
