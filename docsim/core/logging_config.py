"""
Logging setup for the document similarity pipeline.

Records are JSON lines carrying document and page context, so a skipped
OCR page can be traced back to the file it came from.
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
import json


# Context attributes callers may attach through ``extra=``
CONTEXT_FIELDS = ('document', 'page', 'operation', 'method', 'duration')


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        # OCR output may contain any script, keep it readable
        return json.dumps(log_entry, ensure_ascii=False, separators=(',', ':'), default=str)


class ProductionLogger:
    """
    Root logger setup shared by the CLI and long-running callers.

    Records go to stderr and, when enabled, to ``app.log`` plus an
    ``errors.log`` that keeps WARNING and above (skipped pages, OCR outages).
    """

    def __init__(self,
                 log_level: str = "INFO",
                 log_dir: str = "logs",
                 max_file_size: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 enable_console: bool = True,
                 enable_file: bool = True,
                 structured_logging: bool = True):
        self.log_level = getattr(logging, log_level.upper())
        self.log_dir = Path(log_dir)
        self.max_file_size = max_file_size
        self.backup_count = backup_count

        if structured_logging:
            self.formatter = StructuredFormatter()
        else:
            self.formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
            )

        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        root_logger.setLevel(self.log_level)

        if enable_console:
            # stderr keeps stdout free for reports
            root_logger.addHandler(self._configure(logging.StreamHandler(sys.stderr), self.log_level))

        if enable_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            root_logger.addHandler(self._configure(self._rotating_handler("app.log"), self.log_level))
            root_logger.addHandler(self._configure(self._rotating_handler("errors.log"), logging.WARNING))

    def _rotating_handler(self, filename: str) -> logging.Handler:
        return logging.handlers.RotatingFileHandler(
            self.log_dir / filename,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count,
            encoding='utf-8'
        )

    def _configure(self, handler: logging.Handler, level: int) -> logging.Handler:
        handler.setLevel(level)
        handler.setFormatter(self.formatter)
        return handler


class LoggerMixin:
    """Mixin class to add logging capabilities to any class."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger instance for this class."""
        if not hasattr(self, '_logger'):
            self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
        return self._logger

    def log_operation(self, operation: str, **context):
        """Time a block of work and log its start and outcome with ``context``."""
        return OperationLogger(self.logger, {'operation': operation, **context})


class OperationLogger:
    """Context manager for logging operations with timing."""

    def __init__(self, logger: logging.Logger, extra: dict):
        self.logger = logger
        self.extra = extra
        self.operation = extra.get('operation', 'unknown')
        self.start_time = None

    def __enter__(self):
        self.start_time = datetime.now(timezone.utc)
        self.logger.info(f"Starting operation: {self.operation}", extra=self.extra)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.extra['duration'] = (datetime.now(timezone.utc) - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"Completed operation: {self.operation}", extra=self.extra)
        else:
            self.logger.error(f"Failed operation: {self.operation}: {exc_val}", extra=self.extra)
        return False


def setup_logging(log_level: str = "INFO",
                  log_dir: str = "logs",
                  structured_logging: bool = True,
                  **kwargs) -> ProductionLogger:
    """
    Configure root logging for the process.

    Args:
        log_level: Logging level name
        log_dir: Directory for ``app.log`` and ``errors.log``
        structured_logging: Emit JSON records instead of plain text
        **kwargs: ``enable_console``, ``enable_file`` and rotation settings

    Returns:
        ProductionLogger instance
    """
    return ProductionLogger(
        log_level=log_level,
        log_dir=log_dir,
        structured_logging=structured_logging,
        **kwargs
    )
