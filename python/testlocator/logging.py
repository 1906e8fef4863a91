"""
Structured logging configuration for testlocator.

This module provides centralized logging configuration using structlog,
plus the leveled diagnostic sink handed to resolvers and readers.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    add_timestamp: bool = True,
    colorize: bool = None,
) -> None:
    """
    Configure structured logging for testlocator.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Output logs as JSON for machine parsing
        add_timestamp: Include timestamps in log output
        colorize: Colorize output (auto-detect if None)
    """
    # Logs go to stderr, stdout belongs to command output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    if colorize is None:
        colorize = sys.stderr.isatty() and not json_output

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (defaults to module name)

    Returns:
        Configured structlog BoundLogger
    """
    return structlog.get_logger(name)


class LogContext:
    """Context manager for temporary logging context."""

    def __init__(self, **kwargs):
        self.context = kwargs

    def __enter__(self):
        bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        unbind_contextvars(*self.context.keys())


def log_binary_scan(binary_path: str, pdb_path: str = None):
    """
    Create logging context for scanning one binary.

    Args:
        binary_path: Path to the binary being scanned
        pdb_path: Program database paired with the binary
    """
    context = {"binary_path": binary_path}
    if pdb_path:
        context["pdb_path"] = pdb_path
    return LogContext(**context)


class DiagnosticLogger:
    """
    Leveled sink used by the resolver and the format readers.

    The ``debug_*`` methods are only emitted in debug mode, at the level their
    name suggests, so a user can turn on verbose diagnostics of the symbol
    search without lowering the global log level.
    """

    def __init__(self, name: Optional[str] = None, debug_mode: bool = False):
        self._logger = get_logger(name or "testlocator")
        self.debug_mode = debug_mode

    def info(self, message: str, **kw) -> None:
        self._logger.info(message, **kw)

    def warning(self, message: str, **kw) -> None:
        self._logger.warning(message, **kw)

    def error(self, message: str, **kw) -> None:
        self._logger.error(message, **kw)

    def debug_info(self, message: str, **kw) -> None:
        if self.debug_mode:
            self._logger.info(message, **kw)

    def debug_warning(self, message: str, **kw) -> None:
        if self.debug_mode:
            self._logger.warning(message, **kw)

    def debug_error(self, message: str, **kw) -> None:
        if self.debug_mode:
            self._logger.error(message, **kw)


# Example usage in docstring
"""
Example usage:

    from testlocator.logging import configure_logging, DiagnosticLogger

    # Configure logging at startup
    configure_logging(level="DEBUG", json_output=False)

    log = DiagnosticLogger(__name__, debug_mode=True)
    log.warning("Additional PDB pattern matches no files", pattern="*.pdb")

    with log_binary_scan("/path/to/tests.exe", "/path/to/tests.pdb"):
        log.debug_info("Enumerating symbols")
"""
