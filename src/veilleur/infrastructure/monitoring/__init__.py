"""
Logging and metrics.
"""

from veilleur.infrastructure.monitoring.logger import (
    bind_operation,
    get_logger,
    get_operation_id,
    setup_logging,
    unbind_operation,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "bind_operation",
    "unbind_operation",
    "get_operation_id",
]
