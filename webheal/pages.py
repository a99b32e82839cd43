# webheal/pages.py
"""
@file pages.py
@brief Page-object base class whose lookups go through a resolution session.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .context import HealContext
from .locator import LocatorDescriptor
from .session import ResolutionOutcome
from .waits import wait_until_not


class BasePage:
    """
    Base for page objects.

    Subclasses set `url` and expose page actions; all element lookups go
    through the heal context so they get healing for free.
    """

    url: Optional[str] = None

    def __init__(self, context: HealContext, driver: Any):
        self.context = context
        self.driver = driver
        self.session = context.session_for(driver)

    def open(self, url: Optional[str] = None) -> None:
        target = url or self.url
        if not target:
            raise ValueError(f"{type(self).__name__} has no url to open")
        self.session.driver.navigate(target)

    def by(self, strategy: str, value: str) -> Any:
        """
        Find an element by strategy token and value, healing if needed.

        @throws InvalidStrategyError for an unknown strategy token
        @throws ElementNotFoundError if no locator resolves
        """
        return self.locate(LocatorDescriptor.of(strategy, value)).element

    def locate(self, descriptor: LocatorDescriptor, timeout_ms: Optional[int] = None) -> ResolutionOutcome:
        return self.session.resolve(descriptor, timeout_ms=timeout_ms)

    def find_with_wait(self, descriptor: LocatorDescriptor, timeout_ms: int = 10000) -> Any:
        """Wait up to timeout_ms for descriptor, then heal if it never appears."""
        return self.session.resolve(descriptor, timeout_ms=timeout_ms).element

    def find_all(self, descriptor: LocatorDescriptor) -> List[Any]:
        return self.session.resolve_all(descriptor)

    def is_present(self, descriptor: LocatorDescriptor) -> bool:
        return self.session.exists(descriptor)

    def wait_until_gone(self, descriptor: LocatorDescriptor, timeout_ms: Optional[int] = None) -> None:
        """
        Wait for every element matching descriptor to disappear.

        @throws TimeoutError if matches remain after the timeout
        """
        config = self.session.config
        effective = config.timeout_ms if timeout_ms is None else timeout_ms
        wait_until_not(
            lambda: self.session.resolve_all(descriptor),
            timeout=effective / 1000.0,
            interval=config.interval,
            description=f"{descriptor} to disappear",
            events=self.context.events,
        )
