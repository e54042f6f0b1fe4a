"""Process-wide logging setup for the league API and its CLIs."""

import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", access_log: bool = True, sql_echo: bool = False) -> None:
    """Configure root, league and uvicorn loggers.

    ``sql_echo`` raises ``sqlalchemy.engine`` to INFO so statements show up
    through the same console handler instead of SQLAlchemy's own.
    """
    level = level.upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            # Uvicorn pre-formats access log lines
            "access_simple": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
            "access": {"class": "logging.StreamHandler", "formatter": "access_simple"},
        },
        "loggers": {
            "app": {"level": level},
            "sqlalchemy.engine": {"level": "INFO" if sql_echo else "WARNING"},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {
                "level": "INFO" if access_log else "WARNING",
                "handlers": ["access"],
                "propagate": False,
            },
        },
        "root": {"level": level, "handlers": ["console"]},
    })
