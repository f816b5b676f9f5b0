"""
Logging helpers
"""
import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_level_str: str = "INFO") -> int:
    """Configure the root logger once and route library loggers through it"""
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True
    )

    # httpx logs every request at INFO
    httpx_logger = logging.getLogger("httpx")
    httpx_logger.setLevel(logging.WARNING)
    httpx_logger.propagate = True

    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error", "txproof", "main"]:
        logger_instance = logging.getLogger(logger_name)
        logger_instance.setLevel(log_level)
        logger_instance.propagate = True
        logger_instance.handlers.clear()

    return log_level


def uvicorn_log_config(log_level_str: str) -> dict:
    """dictConfig for uvicorn using the same line format as the application"""
    return {
        "version": 1, "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": LOG_DATEFMT},
        },
        "handlers": {
            "default": {"formatter": "default", "class": "logging.StreamHandler", "stream": "ext://sys.stdout"},
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": log_level_str, "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": log_level_str, "propagate": False},
            "uvicorn.access": {"handlers": ["default"], "level": log_level_str, "propagate": False},
        },
    }
