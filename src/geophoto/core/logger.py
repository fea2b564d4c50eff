import json
import logging
import logging.config
import sys

from geophoto.core.config import configs

# Attributes passed through ``extra=`` that are promoted to top-level JSON keys
CONTEXT_FIELDS = ("user_id", "photo_id", "comment_id", "storage_path", "upload_state", "gps_source")


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line, tagged with the service name.

    Upload and feed code attach identifiers via ``extra={...}``; any of
    ``CONTEXT_FIELDS`` present on the record are emitted as their own keys.
    """

    def __init__(self, *args, service: str = configs.APP_NAME, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "service": self.service,
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = str(value)
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def build_logging_config(log_level: str, log_format: str, log_sql: bool = False) -> dict:
    handler = "json" if log_format == "json" else "plain"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "json": {
                "()": JsonFormatter,
                "datefmt": "%Y-%m-%dT%H:%M:%S%z",
            },
        },
        "handlers": {
            "plain": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "plain",
            },
            "json": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "json",
            },
        },
        "loggers": {
            "geophoto": {"level": log_level, "handlers": [handler], "propagate": False},
            # signing and upload chatter from the GCS client
            "google.cloud.storage": {"level": "WARNING", "handlers": [handler], "propagate": False},
            "PIL": {"level": "WARNING", "handlers": [handler], "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": [handler], "propagate": False},
            "uvicorn.error": {"level": "ERROR", "handlers": [handler], "propagate": False},
            "sqlalchemy.engine": {
                "level": "INFO" if log_sql else "WARNING",
                "handlers": [handler],
                "propagate": False,
            },
        },
        "root": {"level": "WARNING", "handlers": [handler]},
    }


def setup_logging():
    log_level = configs.LOG_LEVEL.upper()
    logging.config.dictConfig(build_logging_config(log_level, configs.log_format, configs.LOG_SQL))
    logging.getLogger(__name__).info(
        f"Logging ready ({configs.log_format}, level {log_level}, sql={'on' if configs.LOG_SQL else 'off'})"
    )
