from __future__ import annotations
from typing import Any, Awaitable, Callable
import structlog

log = structlog.get_logger()


async def best_effort(label: str, fn: Callable[..., Awaitable[Any]], *args, **context) -> bool:
    """
    Run a side effect whose failure must never fail or roll back the caller
    (storage cleanup, denial emails). Failures are logged as `<label>_failed`
    and swallowed. Keyword arguments are log context only.
    Returns True when the side effect completed.
    """
    try:
        await fn(*args)
    except Exception:
        log.exception(f"{label}_failed", **context)
        return False
    return True
