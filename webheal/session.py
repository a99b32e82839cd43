# webheal/session.py
"""
@file session.py
@brief Resolution session: direct lookup first, healing on failure.

Every lookup a test performs goes through a ResolutionSession wrapping a
driver facade. Nothing is patched into the driver itself.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .config import ResolutionConfig
from .driver import DriverFacade
from .eventlogger import EventLogger
from .exceptions import (ElementLookupError, ElementNotFoundError,
                         LocatorAttempt, TimeoutError)
from .healer import HealingResolver
from .locator import LocatorDescriptor
from .service import HealingService


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of one resolve() call."""
    element: Any
    used_descriptor: LocatorDescriptor
    healed: bool
    attempts: Tuple[LocatorDescriptor, ...]
    records: Tuple[LocatorAttempt, ...] = field(default=(), compare=False)
    elapsed: float = field(default=0.0, compare=False)

    def to_dict(self) -> dict:
        return {
            "found": self.element is not None,
            "healed": self.healed,
            "used": self.used_descriptor.to_dict(),
            "attempts": [
                {"kind": r.kind, **r.descriptor.to_dict(), "error": r.error}
                for r in self.records
            ],
            "elapsed_sec": round(self.elapsed, 3),
        }


class ResolutionSession:
    """
    Resolves locator descriptors against one driver facade.

    Calls are serialized on the facade's lock, so concurrent callers sharing
    a browser never run duplicate healing for the same request.
    """

    def __init__(
        self,
        driver: DriverFacade,
        config: ResolutionConfig,
        events: Optional[EventLogger] = None,
        service: Optional[HealingService] = None,
    ):
        """
        @param driver Facade over a live browser; borrowed, never closed here
        @param config Immutable resolution settings
        @param events Structured event sink for resolve/heal events
        @param service Optional external healing service
        """
        self.driver = driver
        self.config = config
        self.events = events
        self.healer = HealingResolver(driver, config, events=events, service=service)

    def resolve(self, descriptor: LocatorDescriptor, timeout_ms: Optional[int] = None) -> ResolutionOutcome:
        """
        Resolve descriptor to an element, healing if the direct lookup fails.

        @param descriptor Primary locator
        @param timeout_ms Override for the direct lookup deadline
        @return ResolutionOutcome with the full attempt trail
        @throws ElementNotFoundError after direct lookup and all healing attempts fail
        """
        effective_timeout = self.config.timeout_ms if timeout_ms is None else timeout_ms
        started = time.monotonic()

        with self.driver.lock:
            records: List[LocatorAttempt] = []
            try:
                element = self.driver.wait_for_presence(descriptor, effective_timeout, interval=self.config.interval)
            except (TimeoutError, ElementLookupError) as e:
                last_error = f"{type(e).__name__}: {e}"
                records.append(LocatorAttempt(kind="direct", descriptor=descriptor, error=last_error))
            else:
                records.append(LocatorAttempt(kind="direct", descriptor=descriptor))
                return self._finish(descriptor, element, descriptor, False, records, started)

            if self.config.healing_enabled:
                healing = self.healer.heal(descriptor)
                records.extend(healing.attempts)
                if healing.healed:
                    return self._finish(descriptor, healing.element, healing.used, True, records, started)
                if healing.attempts and healing.attempts[-1].error:
                    last_error = healing.attempts[-1].error

            self._log_resolve(descriptor, None, "not_found", records, started)
            raise ElementNotFoundError(
                descriptor,
                attempts=records,
                timeout=effective_timeout / 1000.0,
                healing_enabled=self.config.healing_enabled,
                last_error=last_error,
            )

    def resolve_all(self, descriptor: LocatorDescriptor) -> List[Any]:
        """
        Find every element matching descriptor. No healing; empty list for no matches.
        """
        with self.driver.lock:
            return list(self.driver.find_all(descriptor))

    def exists(self, descriptor: LocatorDescriptor, timeout_ms: int = 0) -> bool:
        """Check whether descriptor (or a healed alternate) resolves."""
        try:
            self.resolve(descriptor, timeout_ms=timeout_ms)
            return True
        except ElementNotFoundError:
            return False

    def _finish(
        self,
        original: LocatorDescriptor,
        element: Any,
        used: LocatorDescriptor,
        healed: bool,
        records: List[LocatorAttempt],
        started: float,
    ) -> ResolutionOutcome:
        outcome = ResolutionOutcome(
            element=element,
            used_descriptor=used,
            healed=healed,
            attempts=tuple(r.descriptor for r in records),
            records=tuple(records),
            elapsed=time.monotonic() - started,
        )
        self._log_resolve(original, used, "healed" if healed else "ok", records, started)
        return outcome

    def _log_resolve(
        self,
        original: LocatorDescriptor,
        used: Optional[LocatorDescriptor],
        status: str,
        records: List[LocatorAttempt],
        started: float,
    ) -> None:
        if self.events is None:
            return
        self.events.log(
            event="resolve",
            status=status,
            locator=str(original),
            candidate=str(used) if used is not None else None,
            attempt=len(records),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
