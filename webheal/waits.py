# webheal/waits.py
"""
@file waits.py
@brief Polling wait utilities used by driver facades and page objects.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, TypeVar

from .eventlogger import EventLogger
from .exceptions import TimeoutError

T = TypeVar("T")


def _now() -> float:
    """Monotonic time source for deterministic timeout calculations."""
    return time.monotonic()


def _set_timeout_metadata(
    error: TimeoutError,
    *,
    description: str,
    timeout: float,
    attempt_count: int,
    elapsed: float,
) -> None:
    error.description = description
    error.timeout = timeout
    error.attempt_count = attempt_count
    error.elapsed_time = elapsed


def _emit(events: Optional[EventLogger], event: str, description: str, status: str = "ok", **metadata: Any) -> None:
    if events is not None and events.is_enabled():
        events.log(event=event, status=status, metadata={"description": description, **metadata})


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
    events: Optional[EventLogger] = None,
) -> T:
    """
    Repeatedly runs predicate until it returns a truthy value,
    or until timeout. The predicate always runs at least once.
    """
    start_time = _now()
    last_exception: Optional[BaseException] = None
    attempt_count = 0

    _emit(events, "wait_start", description, timeout_s=timeout, interval_s=interval)

    while True:
        attempt_count += 1
        try:
            result = predicate()
            if result:
                elapsed = _now() - start_time
                _emit(events, "wait_success", description, attempts=attempt_count, elapsed_s=round(elapsed, 3))
                return result
        except Exception as e:
            last_exception = e

        elapsed = _now() - start_time
        time_left = timeout - elapsed
        if time_left <= 0:
            break
        time.sleep(min(interval, time_left))

    elapsed = _now() - start_time
    _emit(events, "wait_timeout", description, status="error", attempts=attempt_count, elapsed_s=round(elapsed, 3))

    if last_exception:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s: "
            f"{type(last_exception).__name__}: {last_exception}"
        )
        error.original_exception = last_exception
    else:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s "
            f"(condition kept returning falsy)"
        )

    _set_timeout_metadata(
        error,
        description=description,
        timeout=timeout,
        attempt_count=attempt_count,
        elapsed=elapsed,
    )
    raise error


def wait_until_not(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition to become false",
    events: Optional[EventLogger] = None,
) -> None:
    """
    Wait until predicate returns a falsy value.
    """
    start_time = _now()
    attempt_count = 0

    _emit(events, "wait_start", description, timeout_s=timeout, interval_s=interval)

    while True:
        attempt_count += 1
        if not predicate():
            elapsed = _now() - start_time
            _emit(events, "wait_success", description, attempts=attempt_count, elapsed_s=round(elapsed, 3))
            return

        elapsed = _now() - start_time
        time_left = timeout - elapsed
        if time_left <= 0:
            break
        time.sleep(min(interval, time_left))

    elapsed = _now() - start_time
    _emit(events, "wait_timeout", description, status="error", attempts=attempt_count, elapsed_s=round(elapsed, 3))
    error = TimeoutError(
        f"Timed out waiting for {description} after {timeout}s "
        f"(condition kept returning truthy)"
    )
    _set_timeout_metadata(
        error,
        description=description,
        timeout=timeout,
        attempt_count=attempt_count,
        elapsed=elapsed,
    )
    raise error
