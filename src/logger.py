"""
Application Logging Module.

Builds the application logger used across the collector. Log calls pass either
plain strings or dictionaries of structured fields::

    logger.info({"message": "Collecting merged PRs", "repository": "owner/name"})

Dictionary messages are rendered as a single JSON line so that log files can be
parsed by downstream tooling. In development mode the console output switches
to a human-readable format.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human readable formatter for development runs."""

    def __init__(self):
        super().__init__("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            fields = dict(record.msg)
            message = fields.pop("message", "")
            extras = " ".join(f"{key}={value}" for key, value in fields.items())
            record = logging.makeLogRecord(record.__dict__)
            record.msg = f"{message} {extras}".strip()
            record.args = None
        return super().format(record)


class LogManager:
    """
    Configure and hand out the application logger.

    Attributes:
        logger (logging.Logger): Configured application logger.
    """

    def __init__(
        self,
        app_name: str,
        log_dir: str = "logs",
        development: bool = False,
        level: int = logging.INFO,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ):
        """Set up console and rotating file handlers.

        Args:
            app_name (str): Logger name, also used for the log file name.
            log_dir (str): Directory for the rotating log file.
            development (bool): Use the readable console format instead of JSON.
            level (int): Logging level.
            max_bytes (int): Size at which the log file rotates.
            backup_count (int): Number of rotated files to keep.
        """
        self.logger = logging.getLogger(app_name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Re-initialising must not stack duplicate handlers
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        console = logging.StreamHandler()
        console.setFormatter(ConsoleFormatter() if development else JsonFormatter())
        self.logger.addHandler(console)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, f"{app_name}.log"),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(JsonFormatter())
            self.logger.addHandler(file_handler)
