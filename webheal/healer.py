# webheal/healer.py
"""
@file healer.py
@brief Proposes alternate locators for a failed one and tries them in order.

Candidate policy:
  Id(v)        -> Css("#v"), Name(v)
  XPath(expr)  -> Css translation when expr is a simple attribute equality
  LinkText(v)  -> PartialLinkText(v)
  any          -> visible-text XPath when v reads like human text (best effort)
  service      -> candidates from an external healing service, if configured
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .config import ResolutionConfig
from .driver import DriverFacade
from .eventlogger import EventLogger
from .exceptions import ElementLookupError, LocatorAttempt
from .locator import LocatorDescriptor, Strategy
from .service import HealingService

# //tag[@attr='value'] or //*[@attr="value"]
_SIMPLE_XPATH = re.compile(
    r"""^\s*//(?P<tag>[A-Za-z][\w-]*|\*)\s*\[\s*@(?P<attr>[A-Za-z_][\w:.-]*)\s*=\s*(?P<q>['"])(?P<value>[^'"]*)(?P=q)\s*\]\s*$"""
)
_CSS_IDENT = re.compile(r"^-?[A-Za-z_][\w-]*$")
_SELECTOR_CHARS = set("#.[]/=@:>*()\"{}$^|~+")


def _css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _id_selector(value: str) -> str:
    """CSS for an exact id match; attribute form when value is not a plain identifier."""
    if _CSS_IDENT.match(value):
        return f"#{value}"
    return f"[id={_css_string(value)}]"


def xpath_to_css(expression: str) -> Optional[str]:
    """
    Translate a simple attribute-equality XPath to CSS, or return None.

    @class compares the whole attribute string, so it maps to tag[class="v"].
    """
    m = _SIMPLE_XPATH.match(expression)
    if not m:
        return None
    tag = "" if m.group("tag") == "*" else m.group("tag")
    attr = m.group("attr")
    value = m.group("value")

    if attr == "id" and _CSS_IDENT.match(value):
        return f"{tag}#{value}"
    if ":" in attr:
        return None
    return f'{tag}[{attr}={_css_string(value)}]'


def looks_like_text(value: str) -> bool:
    """
    Heuristic: does value read like visible text rather than a selector or identifier?

    True for "Sign in" or "Contact", false for "submit-btn", "#main" or "//div".
    """
    text = value.strip()
    if not text or not any(c.isalpha() for c in text):
        return False
    if any(c in _SELECTOR_CHARS for c in text):
        return False
    if any(c.isspace() for c in text):
        return True
    return text.isalpha() and text[0].isupper()


def xpath_literal(text: str) -> str:
    """Quote text as an XPath 1.0 string literal."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


def builtin_candidates(descriptor: LocatorDescriptor) -> List[LocatorDescriptor]:
    """Candidates from the fixed policy, in try order."""
    strategy, value = descriptor.strategy, descriptor.value
    out: List[LocatorDescriptor] = []

    if strategy is Strategy.ID:
        out.append(LocatorDescriptor(Strategy.CSS, _id_selector(value)))
        out.append(LocatorDescriptor(Strategy.NAME, value))
    elif strategy is Strategy.XPATH:
        css = xpath_to_css(value)
        if css:
            out.append(LocatorDescriptor(Strategy.CSS, css))
    elif strategy is Strategy.LINK_TEXT:
        out.append(LocatorDescriptor(Strategy.PARTIAL_LINK_TEXT, value))

    if looks_like_text(value):
        literal = xpath_literal(" ".join(value.split()))
        out.append(LocatorDescriptor(Strategy.XPATH, f"//*[normalize-space(text())={literal}]"))
    return out


def candidates_for(
    descriptor: LocatorDescriptor,
    service: Optional[HealingService] = None,
    page_url: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[LocatorDescriptor]:
    """
    Ordered, de-duplicated candidates, never including descriptor itself.

    @param limit Maximum number of candidates; the service is only asked
                 when the built-in candidates leave room under it
    """
    ordered = _dedupe(descriptor, builtin_candidates(descriptor))
    if service is not None and (limit is None or len(ordered) < limit):
        ordered = _dedupe(descriptor, ordered + service.propose(descriptor, page_url=page_url))
    return ordered if limit is None else ordered[:limit]


def _dedupe(original: LocatorDescriptor, proposed: List[LocatorDescriptor]) -> List[LocatorDescriptor]:
    seen = {original}
    ordered: List[LocatorDescriptor] = []
    for candidate in proposed:
        if candidate not in seen:
            seen.add(candidate)
            ordered.append(candidate)
    return ordered


@dataclass
class HealingResult:
    """What one healing run produced."""
    original: LocatorDescriptor
    element: Optional[object] = None
    used: Optional[LocatorDescriptor] = None
    attempts: List[LocatorAttempt] = field(default_factory=list)

    @property
    def healed(self) -> bool:
        return self.used is not None


class HealingResolver:
    """
    Tries alternate locators against a driver facade.

    At most config.max_healing_attempts candidates are tried per call.
    """

    def __init__(
        self,
        driver: DriverFacade,
        config: ResolutionConfig,
        events: Optional[EventLogger] = None,
        service: Optional[HealingService] = None,
    ):
        self.driver = driver
        self.config = config
        self.events = events
        self.service = service

    def heal(self, original: LocatorDescriptor) -> HealingResult:
        result = HealingResult(original=original)
        limit = max(0, self.config.max_healing_attempts)
        if limit == 0:
            return result

        service = self.service if len(builtin_candidates(original)) < limit else None
        page_url = _safe_current_url(self.driver) if service is not None else None
        candidates = candidates_for(original, service, page_url=page_url, limit=limit)

        for index, candidate in enumerate(candidates, start=1):
            started = time.monotonic()
            try:
                element = self.driver.find_one(candidate)
            except ElementLookupError as e:
                result.attempts.append(LocatorAttempt(kind="heal", descriptor=candidate, error=str(e)))
                self._log(original, candidate, index, "failed", started)
                continue

            result.attempts.append(LocatorAttempt(kind="heal", descriptor=candidate))
            result.element = element
            result.used = candidate
            self._log(original, candidate, index, "healed", started)
            return result

        return result

    def _log(self, original: LocatorDescriptor, candidate: LocatorDescriptor, attempt: int, status: str, started: float) -> None:
        if not self.config.log_healing_events or self.events is None:
            return
        self.events.log(
            event="heal_attempt",
            status=status,
            locator=str(original),
            candidate=str(candidate),
            attempt=attempt,
            duration_ms=int((time.monotonic() - started) * 1000),
        )


def _safe_current_url(driver: DriverFacade) -> Optional[str]:
    try:
        return driver.current_url
    except Exception:
        return None
