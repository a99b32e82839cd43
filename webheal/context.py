# webheal/context.py
"""
@file context.py
@brief Per-test-session context wiring config, events and healing service.

Build one HealContext per test session and pass it to page objects and
fixtures. Nothing in the package keeps process-wide state.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional, Tuple

from .config import ConfigStore, ResolutionConfig, SettingsSource
from .driver import DriverFacade, SeleniumDriver
from .eventlogger import EventLogger
from .locator import LocatorDescriptor
from .service import HealingService
from .session import ResolutionOutcome, ResolutionSession


class HealContext:
    """Owns the config store and hands out one ResolutionSession per driver."""

    def __init__(
        self,
        settings: SettingsSource = None,
        *,
        preset: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        events: Optional[EventLogger] = None,
    ):
        self.store = ConfigStore(settings, preset=preset, overrides=overrides)
        self.events = events or EventLogger()
        self._lock = threading.Lock()
        self._sessions: Dict[int, Tuple[Any, ResolutionSession]] = {}
        self._service: Optional[HealingService] = None

    @property
    def config(self) -> ResolutionConfig:
        return self.store.load()

    def session_for(self, driver: Any) -> ResolutionSession:
        """
        Get the resolution session for a driver.

        @param driver A DriverFacade or a raw selenium WebDriver
        """
        key = id(driver)
        with self._lock:
            entry = self._sessions.get(key)
            if entry is not None and entry[0] is driver:
                return entry[1]

            facade = driver if isinstance(driver, DriverFacade) else SeleniumDriver(driver)
            config = self.store.load()
            if config.log_healing_events:
                self.events.enable()
            session = ResolutionSession(facade, config, events=self.events, service=self._healing_service(config))
            self._sessions[key] = (driver, session)
            return session

    def resolve(self, driver: Any, descriptor: LocatorDescriptor) -> ResolutionOutcome:
        return self.session_for(driver).resolve(descriptor)

    def resolve_all(self, driver: Any, descriptor: LocatorDescriptor) -> list:
        return self.session_for(driver).resolve_all(descriptor)

    def release(self, driver: Any) -> None:
        """Forget the session bound to driver (call when the browser quits)."""
        with self._lock:
            self._sessions.pop(id(driver), None)

    def configure(self, settings: SettingsSource, *, preset: Optional[str] = None) -> ResolutionConfig:
        """Load new settings; sessions created afterwards use them."""
        with self._lock:
            self._sessions.clear()
            self._close_service()
        return self.store.configure(settings, preset=preset)

    def reset(self) -> None:
        """Drop cached config and sessions; the next lookup re-reads settings."""
        with self._lock:
            self._sessions.clear()
            self._close_service()
        self.store.reset()

    def _healing_service(self, config: ResolutionConfig) -> Optional[HealingService]:
        if not config.service_url:
            return None
        if self._service is None:
            self._service = HealingService(
                config.service_url,
                api_key=config.service_api_key,
                timeout=max(config.timeout, 1.0),
            )
        return self._service

    def _close_service(self) -> None:
        if self._service is not None:
            self._service.close()
            self._service = None
