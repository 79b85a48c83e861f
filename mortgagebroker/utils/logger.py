"""
structlog setup for the MortgageBroker tool server.

Every record carries the logger name, level, an ISO timestamp and the
process and thread ids. Output is one JSON object per line in production
and a colored console line during local development. The ``log_*``
helpers return loggers pre-bound with the fields a layer always reports.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Route structlog through the stdlib root logger on stdout.

    Args:
        log_level: Root level name, such as "DEBUG" or "WARNING"
        log_format: "json" for machine-readable lines, anything else for console
    """
    # force=True so the configured level replaces the import-time default
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.PROCESS,
                    structlog.processors.CallsiteParameter.THREAD,
                ]
            ),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggerMixin:
    """Gives services a ``logger`` named after their class."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)


def log_api_request(
    method: str, path: str, **context: Any
) -> structlog.stdlib.BoundLogger:
    """Logger for one tool call, bound to its HTTP method and route."""
    return get_logger("api_request").bind(method=method, path=path, **context)


def log_indicator_fetch(
    series_id: str, intent: str, **context: Any
) -> structlog.stdlib.BoundLogger:
    """Logger for a single FRED series request."""
    return get_logger("indicator_fetch").bind(
        series_id=series_id, intent=intent, **context
    )


def log_llm_interaction(
    model: str, response_time_ms: float, **context: Any
) -> structlog.stdlib.BoundLogger:
    """
    Logger for a finished chat model call.

    Args:
        model: Chat model name sent to OpenAI
        response_time_ms: Wall time of the call, failed calls included
        **context: Extra fields such as the answer length
    """
    return get_logger("llm_interaction").bind(
        model=model, response_time_ms=response_time_ms, **context
    )


configure_logging()
