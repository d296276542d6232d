from __future__ import annotations

import logging
import reprlib
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, MutableMapping, Optional, Sequence, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 160
_repr.maxlist = 10
_repr.maxtuple = 10


def _safe_repr(value: Any, *, max_items: int = 5, max_length: int = 400) -> str:
    if isinstance(value, np.ndarray):
        size = int(value.size)
        parts = [f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype})"]
        if 0 < size <= max_items:
            parts.append(f"values={_repr.repr(value.tolist())}")
        elif size > max_items and value.dtype.kind == "f":
            parts.append(f"min={float(np.nanmin(value)):.6g}")
            parts.append(f"max={float(np.nanmax(value)):.6g}")
        return ", ".join(parts)

    if isinstance(value, (list, tuple)) and len(value) > max_items:
        head = ", ".join(_safe_repr(item) for item in value[:max_items])
        return f"[{head}, ... ({len(value)} items)]"

    rendered = _repr.repr(value)
    if len(rendered) > max_length:
        return rendered[:max_length] + "... (truncated)"
    return rendered


def _format_arguments(args: Sequence[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = []
    if args:
        parts.append("args=[" + ", ".join(_safe_repr(arg) for arg in args) + "]")
    if kwargs:
        parts.append(
            "kwargs={" + ", ".join(f"{key}={_safe_repr(value)}" for key, value in kwargs.items()) + "}"
        )
    return ", ".join(parts) if parts else "no-args"


def debug_log_call(
    logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True
) -> Callable[[F], F]:
    """Return a decorator that emits DEBUG logs on entry and exit of a call."""

    def decorator(func: F) -> F:
        qualname = name or getattr(func, "__qualname__", getattr(func, "__name__", "<callable>"))

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Entering %s (%s)", qualname, _format_arguments(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.exception("Exception in %s", qualname)
                raise
            if logger.isEnabledFor(logging.DEBUG):
                if log_result:
                    logger.debug("Exiting %s -> %s", qualname, _safe_repr(result))
                else:
                    logger.debug("Exiting %s", qualname)
            return result

        return cast(F, wrapper)

    return decorator


class _Elapsed:
    __slots__ = ("start", "elapsed_s")

    def __init__(self) -> None:
        self.start = time.perf_counter()
        self.elapsed_s = 0.0


@contextmanager
def log_elapsed(logger: logging.Logger, label: str) -> Iterator[_Elapsed]:
    """Time the enclosed block and log the wall time at INFO."""

    timer = _Elapsed()
    try:
        yield timer
    finally:
        timer.elapsed_s = time.perf_counter() - timer.start
        logger.info("%s took %.1f ms", label, timer.elapsed_s * 1000.0)
