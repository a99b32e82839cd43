# tests/conftest.py
"""
Shared fixtures: an in-memory driver facade standing in for a browser.
"""

import pytest

from webheal.config import ResolutionConfig
from webheal.driver import DriverFacade
from webheal.eventlogger import EventLogger
from webheal.exceptions import ElementLookupError


class FakeElement:
    def __init__(self, label):
        self.label = label

    def __repr__(self):
        return f"FakeElement({self.label!r})"


class FakeDriver(DriverFacade):
    """Resolves only descriptors registered in `present`."""

    def __init__(self, present=None, url="https://example.test/"):
        super().__init__()
        self.present = dict(present or {})
        self.url = url
        self.find_one_calls = []
        self.find_all_calls = []
        self.visited = []

    def add(self, descriptor, *labels):
        self.present[descriptor] = [FakeElement(label) for label in labels]

    def remove(self, descriptor):
        self.present.pop(descriptor, None)

    def find_one(self, descriptor):
        self.find_one_calls.append(descriptor)
        found = self.present.get(descriptor)
        if not found:
            raise ElementLookupError(descriptor)
        return found[0]

    def find_all(self, descriptor):
        self.find_all_calls.append(descriptor)
        return list(self.present.get(descriptor, []))

    def navigate(self, url):
        self.visited.append(url)
        self.url = url

    @property
    def current_url(self):
        return self.url


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def config():
    """Healing on, no direct-lookup wait, room for every candidate."""
    return ResolutionConfig(timeout_ms=0, max_healing_attempts=5)


@pytest.fixture
def events():
    logger = EventLogger()
    logger.configure(console=False, keep_history=True)
    logger.enable()
    return logger
