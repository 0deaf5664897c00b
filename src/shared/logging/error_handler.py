"""Structured logging of storage failures.

One record per failure, message ``"structured_error"``, carrying a flat dict
in ``extra["structured_error"]``:

- ``error_code``: ``ActorStoreError.code``, else the exception class name
- the storage attributes the exception itself carries (table_name,
  operation, aws_code, attempts, ...)
- caller context (connection_id, document_key, ...)

Credential-bearing keys are redacted. The traceback travels as exc_info.
"""

from __future__ import annotations

import logging
from typing import Any

_REDACTED = "[REDACTED]"

# Attributes set by ActorStoreError subclasses, copied when present.
_ERROR_ATTRIBUTES = (
    "table_name",
    "operation",
    "aws_code",
    "attempts",
    "setting",
    "state_type",
    "field",
    "extension_name",
)

_SECRET_KEYS = frozenset(
    {
        "access_key",
        "aws_access_key_id",
        "aws_secret_access_key",
        "aws_session_token",
        "secret_key",
        "session_token",
    }
)


def error_fields(exc: BaseException, **context: Any) -> dict[str, Any]:
    """Flatten ``exc`` and caller context into one log-safe dict.

    Context wins over exception attributes of the same name. None and empty
    string values are dropped.
    """
    fields: dict[str, Any] = {
        "error_code": getattr(exc, "code", type(exc).__name__),
        "error_type": type(exc).__name__,
        "message": str(exc),
    }
    for name in _ERROR_ATTRIBUTES:
        value = getattr(exc, name, None)
        if value is not None and value != "":
            fields[name] = value
    fields.update({k: v for k, v in context.items() if v is not None and v != ""})
    return {k: _REDACTED if k.lower() in _SECRET_KEYS else v for k, v in fields.items()}


def log_structured_error(
    logger: logging.Logger,
    exc: BaseException,
    *,
    level: int = logging.ERROR,
    **context: Any,
) -> dict[str, Any]:
    """Log ``exc`` with its storage fields; return the logged dict."""
    fields = error_fields(exc, **context)
    logger.log(level, "structured_error", exc_info=exc, extra={"structured_error": fields})
    return fields
