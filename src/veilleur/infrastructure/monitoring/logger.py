"""
Structured JSON logging configuration.

Every record emitted inside a tracking flow carries the transaction hash
of that flow, taken from a context variable set by the tracker.
"""

import json
import logging
import sys
from contextvars import ContextVar, Token
from typing import Any, Optional

# Context variable for the transaction currently being tracked
operation_id_ctx: ContextVar[Optional[str]] = ContextVar(
    "operation_id", default=None
)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in JSON format with consistent schema.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        operation_id = operation_id_ctx.get()
        if operation_id:
            log_data["transaction_hash"] = operation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in ("phase", "attempt", "block_number", "indexed_block"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)


class OperationContextFilter(logging.Filter):
    """Prefix plain-text records with the tracked transaction hash."""

    def filter(self, record: logging.LogRecord) -> bool:
        operation_id = operation_id_ctx.get()
        record.operation = operation_id[:10] if operation_id else "-"
        return True


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure application logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Use JSON format (True) or plain text (False)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_logs:
        formatter = JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        handler.addFilter(OperationContextFilter())
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(operation)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Silence noisy loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get logger with given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def bind_operation(operation_id: str) -> Token:
    """
    Tag log records in the current context with a transaction hash.

    Args:
        operation_id: Transaction hash

    Returns:
        Token for unbind_operation()
    """
    return operation_id_ctx.set(operation_id)


def unbind_operation(token: Token) -> None:
    """Restore the previous transaction tag."""
    operation_id_ctx.reset(token)


def get_operation_id() -> Optional[str]:
    """
    Get transaction hash bound to the current context.

    Returns:
        Transaction hash or None
    """
    return operation_id_ctx.get()
