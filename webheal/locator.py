# webheal/locator.py
"""
@file locator.py
@brief Locator descriptors: a strategy plus a value string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from selenium.webdriver.common.by import By

from .exceptions import InvalidStrategyError


class Strategy(str, Enum):
    ID = "id"
    NAME = "name"
    CLASS_NAME = "classname"
    CSS = "css"
    XPATH = "xpath"
    LINK_TEXT = "linktext"
    PARTIAL_LINK_TEXT = "partiallinktext"
    TAG_NAME = "tagname"

    @property
    def by(self) -> str:
        return _BY[self]


_BY: Dict[Strategy, str] = {
    Strategy.ID: By.ID,
    Strategy.NAME: By.NAME,
    Strategy.CLASS_NAME: By.CLASS_NAME,
    Strategy.CSS: By.CSS_SELECTOR,
    Strategy.XPATH: By.XPATH,
    Strategy.LINK_TEXT: By.LINK_TEXT,
    Strategy.PARTIAL_LINK_TEXT: By.PARTIAL_LINK_TEXT,
    Strategy.TAG_NAME: By.TAG_NAME,
}

_LABELS: Dict[Strategy, str] = {
    Strategy.ID: "Id",
    Strategy.NAME: "Name",
    Strategy.CLASS_NAME: "ClassName",
    Strategy.CSS: "Css",
    Strategy.XPATH: "XPath",
    Strategy.LINK_TEXT: "LinkText",
    Strategy.PARTIAL_LINK_TEXT: "PartialLinkText",
    Strategy.TAG_NAME: "TagName",
}

# Tokens accepted by step bindings and settings files, lower-cased.
_ALIASES: Dict[str, Strategy] = {
    "id": Strategy.ID,
    "name": Strategy.NAME,
    "classname": Strategy.CLASS_NAME,
    "class": Strategy.CLASS_NAME,
    "css": Strategy.CSS,
    "cssselector": Strategy.CSS,
    "xpath": Strategy.XPATH,
    "linktext": Strategy.LINK_TEXT,
    "link": Strategy.LINK_TEXT,
    "partiallinktext": Strategy.PARTIAL_LINK_TEXT,
    "partiallink": Strategy.PARTIAL_LINK_TEXT,
    "tagname": Strategy.TAG_NAME,
    "tag": Strategy.TAG_NAME,
}


def parse_strategy(token: Any) -> Strategy:
    """
    Map a case-insensitive strategy token to a Strategy.

    Separators are ignored, so "link_text", "Link Text" and "LinkText" all match.

    @throws InvalidStrategyError for unknown tokens
    """
    if isinstance(token, Strategy):
        return token
    if not isinstance(token, str):
        raise InvalidStrategyError(repr(token), _ALIASES)
    key = token.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
    try:
        return _ALIASES[key]
    except KeyError:
        raise InvalidStrategyError(token, _ALIASES) from None


@dataclass(frozen=True)
class LocatorDescriptor:
    """How to find one UI element. Equal when strategy and value are equal."""
    strategy: Strategy
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.strategy, Strategy):
            object.__setattr__(self, "strategy", parse_strategy(self.strategy))
        if not isinstance(self.value, str):
            raise TypeError(f"Locator value must be a string, got {type(self.value).__name__}")

    @classmethod
    def of(cls, strategy: Any, value: str) -> LocatorDescriptor:
        return cls(parse_strategy(strategy), value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LocatorDescriptor:
        """Build from {"strategy": ..., "value": ...}; "by" is accepted for "strategy"."""
        strategy = data.get("strategy", data.get("by"))
        if "value" not in data:
            raise ValueError(f"Locator mapping has no 'value': {data}")
        return cls.of(strategy, str(data["value"]))

    def to_by(self) -> Tuple[str, str]:
        """Selenium (By, value) pair."""
        return self.strategy.by, self.value

    def to_dict(self) -> Dict[str, str]:
        return {"strategy": self.strategy.value, "value": self.value}

    def __str__(self) -> str:
        return f"{_LABELS[self.strategy]}({self.value!r})"


def by_id(value: str) -> LocatorDescriptor:
    return LocatorDescriptor(Strategy.ID, value)


def by_name(value: str) -> LocatorDescriptor:
    return LocatorDescriptor(Strategy.NAME, value)


def by_css(value: str) -> LocatorDescriptor:
    return LocatorDescriptor(Strategy.CSS, value)


def by_xpath(value: str) -> LocatorDescriptor:
    return LocatorDescriptor(Strategy.XPATH, value)


def by_link_text(value: str) -> LocatorDescriptor:
    return LocatorDescriptor(Strategy.LINK_TEXT, value)


def by_partial_link_text(value: str) -> LocatorDescriptor:
    return LocatorDescriptor(Strategy.PARTIAL_LINK_TEXT, value)
