# webheal/browser.py
"""
@file browser.py
@brief Browser startup and teardown for test sessions.

start_browser() reports failure as a typed result instead of raising, and
BrowserSession quits the browser on teardown and at interpreter exit.
"""

from __future__ import annotations

import atexit
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.firefox.options import Options as FirefoxOptions

from .context import HealContext
from .exceptions import BrowserStartError
from .session import ResolutionSession

log = logging.getLogger("webheal")

SUPPORTED_BROWSERS = ("chrome", "firefox")


@dataclass(frozen=True)
class BrowserStartResult:
    """Either a live driver or the reason there is none."""
    driver: Optional[Any] = None
    error: Optional[BrowserStartError] = None

    @property
    def ok(self) -> bool:
        return self.driver is not None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.driver


def _chrome_options(headless: bool, window_size: str, arguments: List[str]) -> ChromeOptions:
    options = ChromeOptions()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")
    options.add_argument(f"--window-size={window_size}")
    for arg in arguments:
        options.add_argument(arg)
    options.add_experimental_option("excludeSwitches", ["enable-automation"])
    return options


def _firefox_options(headless: bool, window_size: str, arguments: List[str]) -> FirefoxOptions:
    options = FirefoxOptions()
    if headless:
        options.add_argument("-headless")
    width, _, height = window_size.partition(",")
    options.add_argument(f"--width={width}")
    if height:
        options.add_argument(f"--height={height}")
    for arg in arguments:
        options.add_argument(arg)
    return options


_FACTORIES: Dict[str, Callable[..., Any]] = {
    "chrome": lambda options: webdriver.Chrome(options=options),
    "firefox": lambda options: webdriver.Firefox(options=options),
}


def start_browser(
    browser: str = "chrome",
    *,
    headless: bool = True,
    window_size: str = "1920,1080",
    arguments: Optional[List[str]] = None,
    remote_url: Optional[str] = None,
) -> BrowserStartResult:
    """
    Start a local (or Remote) WebDriver session.

    @param browser "chrome" or "firefox"
    @param headless Run without a visible window
    @param window_size "width,height"
    @param arguments Extra browser command-line arguments
    @param remote_url Selenium Grid URL; starts a Remote session when set
    @return BrowserStartResult with driver or error
    """
    name = (browser or "").lower()
    if name not in SUPPORTED_BROWSERS:
        return BrowserStartResult(error=BrowserStartError(browser, "unsupported_browser"))

    build = _chrome_options if name == "chrome" else _firefox_options
    options = build(headless, window_size, list(arguments or []))

    try:
        if remote_url:
            driver = webdriver.Remote(command_executor=remote_url, options=options)
        else:
            driver = _FACTORIES[name](options)
    except WebDriverException as e:
        log.error("Browser start failed: %s", e.msg)
        return BrowserStartResult(error=BrowserStartError(name, "driver_error", e))
    except OSError as e:
        log.error("Browser binary could not be launched: %s", e)
        return BrowserStartResult(error=BrowserStartError(name, "launch_error", e))

    log.info("Started %s (headless=%s)", name, headless)
    return BrowserStartResult(driver=driver)


class BrowserSession:
    """
    Context manager tying a browser to a HealContext for one test scenario.

        with BrowserSession(ctx, browser="chrome") as session:
            session.resolve(by_id("submit-btn"))
    """

    def __init__(self, context: HealContext, browser: str = "chrome", **start_kwargs: Any):
        self.context = context
        self.browser = browser
        self.start_kwargs = start_kwargs
        self.driver: Optional[Any] = None

    def start(self) -> ResolutionSession:
        if self.driver is None:
            self.driver = start_browser(self.browser, **self.start_kwargs).unwrap()
            atexit.register(self.quit)
        return self.context.session_for(self.driver)

    def quit(self) -> None:
        driver, self.driver = self.driver, None
        if driver is None:
            return
        atexit.unregister(self.quit)
        self.context.release(driver)
        try:
            driver.quit()
            log.info("Browser closed")
        except WebDriverException as e:
            log.error("Error closing browser: %s", e.msg)

    def __enter__(self) -> ResolutionSession:
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.quit()
