"""
webheal - Self-healing element location for Selenium-based UI tests.

This package provides:
- LocatorDescriptor: strategy + value locators with case-insensitive parsing
- DriverFacade / SeleniumDriver: the lookup surface over a live browser
- HealingResolver: alternate-locator candidates tried in a fixed order
- ResolutionSession: direct lookup first, healing on failure
- HealContext: per-test-session config, events and session wiring
- BasePage, BrowserSession: page objects and browser lifecycle helpers
"""

from webheal.browser import BrowserSession, BrowserStartResult, start_browser
from webheal.config import ConfigStore, ResolutionConfig
from webheal.context import HealContext
from webheal.driver import DriverFacade, SeleniumDriver
from webheal.eventlogger import EventLogger
from webheal.exceptions import (
    WebHealError,
    ConfigError,
    ConfigLoadWarning,
    InvalidStrategyError,
    ElementLookupError,
    ElementNotFoundError,
    TimeoutError,
    BrowserStartError,
    LocatorAttempt,
)
from webheal.healer import HealingResolver, HealingResult, candidates_for
from webheal.locator import LocatorDescriptor, Strategy
from webheal.pages import BasePage
from webheal.service import HealingService
from webheal.session import ResolutionOutcome, ResolutionSession

__all__ = [
    "BrowserSession",
    "BrowserStartResult",
    "start_browser",
    "ConfigStore",
    "ResolutionConfig",
    "HealContext",
    "DriverFacade",
    "SeleniumDriver",
    "EventLogger",
    "WebHealError",
    "ConfigError",
    "ConfigLoadWarning",
    "InvalidStrategyError",
    "ElementLookupError",
    "ElementNotFoundError",
    "TimeoutError",
    "BrowserStartError",
    "LocatorAttempt",
    "HealingResolver",
    "HealingResult",
    "candidates_for",
    "LocatorDescriptor",
    "Strategy",
    "BasePage",
    "HealingService",
    "ResolutionOutcome",
    "ResolutionSession",
]

__version__ = "1.0.0"
