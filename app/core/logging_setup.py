import logging
import logging.config

"""Process-wide logging configuration.
"""

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Install a single console handler on the root logger.

    Safe to call more than once; later calls replace the earlier config.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"console": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {"handlers": ["console"], "level": level.upper()},
            # botocore is chatty at DEBUG
            "loggers": {"botocore": {"level": "WARNING"}},
        }
    )
