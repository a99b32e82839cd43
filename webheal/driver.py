# webheal/driver.py
"""
@file driver.py
@brief Driver facade: the lookup surface the resolution engine consumes.

Defines the abstract facade plus a Selenium WebDriver adapter. The facade
never creates or quits browsers; see browser.py for that.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from selenium.common.exceptions import (InvalidSelectorException,
                                        NoSuchElementException,
                                        TimeoutException)
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from .exceptions import ElementLookupError, TimeoutError
from .locator import LocatorDescriptor
from .waits import wait_until


class DriverFacade(ABC):
    """
    Abstract lookup interface over one live browser session.

    Each facade carries a re-entrant lock; resolution sessions hold it so
    that only one resolution runs against a browser at a time.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()

    @abstractmethod
    def find_one(self, descriptor: LocatorDescriptor) -> Any:
        """
        Find a single element.

        @throws ElementLookupError if nothing matches
        """
        pass

    @abstractmethod
    def find_all(self, descriptor: LocatorDescriptor) -> List[Any]:
        """Find all matching elements; empty list when nothing matches."""
        pass

    @abstractmethod
    def navigate(self, url: str) -> None:
        pass

    @property
    def current_url(self) -> Optional[str]:
        return None

    def wait_for_presence(self, descriptor: LocatorDescriptor, timeout_ms: int, interval: float = 0.2) -> Any:
        """
        Wait up to timeout_ms for the element to be present.

        @throws TimeoutError when the deadline passes
        """
        if timeout_ms <= 0:
            try:
                return self.find_one(descriptor)
            except ElementLookupError as e:
                error = TimeoutError(f"Element {descriptor} not present (no wait)")
                error.original_exception = e
                error.timeout = 0.0
                error.attempt_count = 1
                raise error from e

        def present():
            found = self.find_all(descriptor)
            return found[0] if found else None

        return wait_until(
            present,
            timeout=timeout_ms / 1000.0,
            interval=interval,
            description=f"presence of {descriptor}",
        )


class SeleniumDriver(DriverFacade):
    """Adapts a selenium WebDriver instance (local or Remote)."""

    def __init__(self, webdriver: Any):
        super().__init__()
        self.webdriver = webdriver

    def find_one(self, descriptor: LocatorDescriptor) -> Any:
        try:
            return self.webdriver.find_element(*descriptor.to_by())
        except NoSuchElementException as e:
            raise ElementLookupError(descriptor, e.msg) from e
        except InvalidSelectorException as e:
            raise ElementLookupError(descriptor, f"invalid selector: {e.msg}") from e

    def find_all(self, descriptor: LocatorDescriptor) -> List[Any]:
        try:
            return list(self.webdriver.find_elements(*descriptor.to_by()))
        except InvalidSelectorException:
            return []

    def navigate(self, url: str) -> None:
        self.webdriver.get(url)

    @property
    def current_url(self) -> Optional[str]:
        return self.webdriver.current_url

    def wait_for_presence(self, descriptor: LocatorDescriptor, timeout_ms: int, interval: float = 0.2) -> Any:
        if timeout_ms <= 0:
            return super().wait_for_presence(descriptor, timeout_ms, interval)

        timeout = timeout_ms / 1000.0
        wait = WebDriverWait(self.webdriver, timeout, poll_frequency=interval)
        try:
            return wait.until(EC.presence_of_element_located(descriptor.to_by()))
        except InvalidSelectorException as e:
            raise ElementLookupError(descriptor, f"invalid selector: {e.msg}") from e
        except TimeoutException as e:
            error = TimeoutError(f"Timed out waiting for presence of {descriptor} after {timeout}s")
            error.original_exception = e
            error.description = f"presence of {descriptor}"
            error.timeout = timeout
            raise error from e
