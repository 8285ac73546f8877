"""Structured logging of store failures.

A failure is logged once as a ``structured_error`` record. Its
``structured_error`` extra carries the error code, the store location, the
failed operation, a context dict and the stack trace. Credentials embedded
in URLs (redis://user:pw@host) are masked in the message and context.
"""

from __future__ import annotations

import logging
import re
import traceback
from dataclasses import asdict, dataclass, field
from typing import Any

# user:password@ part of a URL
_URL_CREDENTIALS = re.compile(r"(?<=://)[^/@\s]+@")


def _mask(value: Any) -> Any:
    if isinstance(value, str):
        return _URL_CREDENTIALS.sub("[REDACTED]@", value)
    return value


@dataclass(frozen=True)
class StructuredError:
    """One store failure, ready for JSON log output."""

    error_code: str
    message: str
    location: str
    operation: str
    context: dict[str, Any] = field(default_factory=dict)
    stack_trace: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def create_structured_error(
    exc: BaseException,
    *,
    location: str,
    operation: str = "",
    context: dict[str, Any] | None = None,
) -> StructuredError:
    """Describe an exception.

    The error code is ``exc.code`` for MapDBError subclasses, else the
    exception class name. The operation defaults to ``exc.operation`` when
    the exception carries one (DurableIOError).
    """
    stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return StructuredError(
        error_code=getattr(exc, "code", type(exc).__name__),
        message=_mask(str(exc)),
        location=location,
        operation=operation or getattr(exc, "operation", ""),
        context={key: _mask(value) for key, value in (context or {}).items()},
        stack_trace="".join(stack),
    )


def log_structured_error(
    logger: logging.Logger,
    exc: BaseException,
    *,
    location: str,
    operation: str = "",
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> StructuredError:
    """Log an exception as a structured error and return the payload."""
    structured = create_structured_error(
        exc, location=location, operation=operation, context=context
    )
    logger.log(level, "structured_error", extra={"structured_error": structured.to_dict()})
    return structured
