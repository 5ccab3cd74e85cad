"""
Exception formatting and logging helpers that never raise themselves.
"""

import logging


def _safe_str(obj) -> str:
    """
    Safely convert an object to string, handling cases where __str__ or __repr__ might fail.
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def _safe_get_exceptions(exception_group) -> list:
    try:
        return list(exception_group.exceptions)
    except Exception:
        return []


def format_exception_message(exception: BaseException) -> str:
    """
    Format an exception for a client-facing error body.

    Falls back to the exception type name when the message is empty
    (httpx timeouts are raised without one) and lists sub-exceptions
    of exception groups.

    Args:
        exception: The exception to format

    Returns:
        A non-empty string describing the exception
    """
    if exception is None:
        return "None"
    try:
        message = _safe_str(exception).strip() or type(exception).__name__
        sub_exceptions = (
            _safe_get_exceptions(exception) if hasattr(exception, "exceptions") else []
        )
        if not sub_exceptions:
            return message
        details = "; ".join(
            f"{type(sub).__name__}: {format_exception_message(sub)}"
            for sub in sub_exceptions
        )
        return f"{message} (Sub-exceptions: {details})"
    except Exception:
        return "<exception (formatting failed)>"


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: BaseException,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception and, for exception groups, each sub-exception.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g. "[Proxy]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    try:
        sub_exceptions = (
            _safe_get_exceptions(exception)
            if exception is not None and hasattr(exception, "exceptions")
            else []
        )
        if not sub_exceptions:
            logger.log(
                level,
                f"{prefix} {type(exception).__name__}: {format_exception_message(exception)}",
                exc_info=exception if exception is not None else False,
            )
            return

        logger.log(
            level,
            f"{prefix} Exception with {len(sub_exceptions)} sub-exceptions: "
            f"{_safe_str(exception)}",
        )
        for i, sub_exc in enumerate(sub_exceptions):
            logger.log(
                level,
                f"{prefix} Sub-exception {i+1}: {type(sub_exc).__name__}: "
                f"{format_exception_message(sub_exc)}",
                exc_info=sub_exc,
            )
    except Exception:
        # Logging failures must not replace the original error
        try:
            logger.log(logging.ERROR, f"{prefix} Exception (logging failed)")
        except Exception:
            pass
