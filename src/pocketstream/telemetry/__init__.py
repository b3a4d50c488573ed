"""
Telemetry module for pocketstream.

Structured logging goes through structlog and tracing through OpenTelemetry.
Until :func:`configure_telemetry` installs an SDK tracer provider, the
OpenTelemetry API hands out non-recording tracers, so instrumented code is
safe to run unconfigured.
"""

from typing import Any, Tuple

import structlog
from opentelemetry import trace

from pocketstream.telemetry.config import configure_telemetry


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def get_telemetry(name: str) -> Tuple[trace.Tracer, Any]:
    """
    Get tracer and logger instances for the given name.

    Args:
        name: The name to use for the tracer and logger

    Returns:
        A tuple containing a tracer and logger
    """
    return trace.get_tracer(name), get_logger(name)


__all__ = ["configure_telemetry", "get_logger", "get_telemetry"]
