"""
Helpers for turning upstream failures into log lines and client messages.

httpx and anyio may surface exception groups, and several httpx errors carry
an empty message, so both helpers fall back to the exception type name.
"""

import logging


def _safe_str(obj) -> str:
    try:
        text = str(obj)
    except Exception:
        text = ""
    return text or type(obj).__name__


def _sub_exceptions(exception) -> list:
    try:
        return list(getattr(exception, "exceptions", None) or [])
    except Exception:
        return []


def format_exception_message(exception: BaseException) -> str:
    """
    Format an exception message, including sub-exceptions of exception groups.

    Never raises.
    """
    if exception is None:
        return "None"

    subs = _sub_exceptions(exception)
    if not subs:
        return _safe_str(exception)

    joined = "; ".join(f"{type(sub).__name__}: {_safe_str(sub)}" for sub in subs)
    return f"{_safe_str(exception)} (Sub-exceptions: {joined})"


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: BaseException,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception, one line per sub-exception for exception groups.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g. "[Proxy]", "[WebSocket]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    subs = _sub_exceptions(exception)
    if not subs:
        logger.log(
            level, f"{prefix} {type(exception).__name__}: {_safe_str(exception)}"
        )
        return

    logger.log(
        level,
        f"{prefix} Exception with {len(subs)} sub-exceptions: {_safe_str(exception)}",
    )
    for i, sub in enumerate(subs):
        logger.log(
            level,
            f"{prefix} Sub-exception {i + 1}: {type(sub).__name__}: {_safe_str(sub)}",
            exc_info=sub,
        )
