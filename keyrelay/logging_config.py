import logging
import logging.config

from keyrelay.config import get_settings


def setup_logging():
    """
    Configure global log format
    Route the relay's own loggers and uvicorn's through one console handler.
    """
    settings = get_settings()
    log_level = "DEBUG" if settings.DEBUG else "INFO"

    console = {
        "handlers": ["console"],
        "level": "INFO",
        "propagate": False,
    }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "root": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": True,
            },
            "uvicorn": dict(console),
            "uvicorn.error": dict(console),
            "uvicorn.access": dict(console),
            # httpx logs every request URL at INFO, including Gemini query strings
            "httpx": dict(console, level="WARNING"),
            "keyrelay": dict(console, level=log_level),
        },
    }

    logging.config.dictConfig(logging_config)
