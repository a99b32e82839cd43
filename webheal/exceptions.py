# webheal/exceptions.py
"""
@file exceptions.py
@brief Custom exception classes for the self-healing locator engine.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from .locator import LocatorDescriptor


class WebHealError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(WebHealError):
    """Raised when a YAML settings source is invalid."""
    pass


class ConfigLoadWarning(UserWarning):
    """Settings source missing or malformed; defaults were applied."""
    pass


class InvalidStrategyError(WebHealError, ValueError):
    """Raised when a locator strategy token is not one of the supported strategies."""

    def __init__(self, token: str, supported: Iterable[str] = ()):
        self.token = token
        self.supported = sorted(supported)
        msg = f"Unsupported locator strategy: '{token}'"
        if self.supported:
            msg += f" (supported: {', '.join(self.supported)})"
        super().__init__(msg)


class ElementLookupError(WebHealError):
    """Raised by a driver facade when a single lookup finds nothing."""

    def __init__(self, descriptor: LocatorDescriptor, message: Optional[str] = None):
        self.descriptor = descriptor
        msg = f"No element matches {descriptor}"
        if message:
            msg += f": {message}"
        super().__init__(msg)


class TimeoutError(WebHealError):
    """
    Raised when a wait times out.

    Attributes:
        original_exception: The last exception that was raised before timeout
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        attempt_count: Number of attempts made (if applicable)
        elapsed_time: Actual elapsed time in seconds (if applicable)
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            if getattr(current, "original_exception", None) is not None:
                current = current.original_exception
            else:
                return current
        return None


@dataclass(frozen=True)
class LocatorAttempt:
    """Records a single locator attempt for debugging."""
    kind: str
    descriptor: LocatorDescriptor
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ElementNotFoundError(WebHealError):
    """
    Raised when neither the primary locator nor any healing candidate resolves.

    Contains every attempt made, direct lookup first.
    """

    def __init__(
        self,
        descriptor: LocatorDescriptor,
        attempts: List[LocatorAttempt],
        timeout: float,
        healing_enabled: bool = True,
        last_error: Optional[str] = None,
    ):
        self.descriptor = descriptor
        self.attempts = list(attempts)
        self.timeout = timeout
        self.healing_enabled = healing_enabled
        self.last_error = last_error
        super().__init__(self.__str__())

    @property
    def tried(self) -> List[LocatorDescriptor]:
        return [a.descriptor for a in self.attempts]

    def __str__(self) -> str:
        lines = [
            f"ElementNotFoundError: locator={self.descriptor} timeout={self.timeout}s "
            f"healing={'on' if self.healing_enabled else 'off'}",
        ]
        if self.last_error:
            lines.append(f"Last error: {self.last_error}")
        lines.append("Attempts:")
        for i, a in enumerate(self.attempts, start=1):
            lines.append(f"  {i}. {a.kind}: {a.descriptor} err={a.error}")
        return "\n".join(lines)


class BrowserStartError(WebHealError):
    """Describes why a browser session could not be created."""

    def __init__(self, browser: str, kind: str, cause: Optional[BaseException] = None):
        self.browser = browser
        self.kind = kind
        self.cause = cause
        msg = f"Could not start {browser} ({kind})"
        if cause is not None:
            msg += f": {type(cause).__name__}: {cause}"
        super().__init__(msg)
