"""
Utility modules for the GDScript style checker.
"""

from gdstyle.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_file_result,
    log_error_with_context,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_file_result",
    "log_error_with_context",
]
