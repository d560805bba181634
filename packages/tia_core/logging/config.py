import logging
import logging.config
import os


# Define base directories
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../../"))
LOG_DIR = os.environ.get("TIA_LOG_DIR", os.path.join(BASE_DIR, "logs"))
APP_LOG_DIR = os.path.join(LOG_DIR, "app")

# Log file paths
APP_LOG_FILE = os.path.join(APP_LOG_DIR, "app.log")
APP_ERROR_LOG_FILE = os.path.join(APP_LOG_DIR, "app.error.log")

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "[%(asctime)s] [%(levelname)s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
        "file_app": {
            "level": "DEBUG",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": APP_LOG_FILE,
            "when": "midnight",
            "interval": 1,
            "backupCount": 30,
            "encoding": "utf-8",
            "formatter": "standard",
        },
        "file_error": {
            "level": "ERROR",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": APP_ERROR_LOG_FILE,
            "when": "midnight",
            "interval": 1,
            "backupCount": 30,
            "encoding": "utf-8",
            "formatter": "standard",
        },
    },
    "loggers": {
        "tia": {
            "handlers": ["console", "file_app", "file_error"],
            "level": "DEBUG",
            "propagate": False,
        },
    },
}

_configured = False


def setup_logging():
    """Apply default logging configuration."""
    global _configured
    os.makedirs(APP_LOG_DIR, exist_ok=True)
    logging.config.dictConfig(LOGGING_CONFIG)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the 'tia' hierarchy with standard configuration."""
    if not _configured:
        setup_logging()

    if not name.startswith("tia"):
        name = f"tia.{name}"
    return logging.getLogger(name)
