"""Logging setup for the IDRHub client, driven by LOG_* environment variables."""

import os
import logging
import sys
from pythonjsonlogger import jsonlogger

# Supabase sub-clients and their transports log every request at INFO
QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "hpack",
    "websockets",
    "supabase",
    "postgrest",
    "realtime",
    "storage3",
    "gotrue",
)


class LoggingConfig:
    """Log level, output format and privacy switches."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    # Message bodies are user content; previews stay out of logs unless enabled
    LOG_MESSAGE_CONTENT = os.environ.get("LOG_MESSAGE_CONTENT", "false").lower() == "true"
    LOG_MASK_SENSITIVE = os.environ.get("LOG_MASK_SENSITIVE", "true").lower() == "true"
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "1000"))

    @classmethod
    def level(cls) -> int:
        return getattr(logging, cls.LOG_LEVEL, logging.INFO)

    @classmethod
    def build_formatter(cls) -> logging.Formatter:
        if cls.LOG_FORMAT == "json":
            return jsonlogger.JsonFormatter(
                "%(timestamp)s %(levelname)s %(name)s %(message)s",
                timestamp=True
            )
        return logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    @classmethod
    def setup_logging(cls) -> None:
        """Send all records to stdout with the configured formatter."""
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(cls.level())
        handler.setFormatter(cls.build_formatter())

        root_logger = logging.getLogger()
        root_logger.handlers = [handler]
        root_logger.setLevel(cls.level())

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
