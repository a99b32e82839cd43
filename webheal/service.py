# webheal/service.py
"""
@file service.py
@brief Client for an external healing service that proposes alternate locators.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .exceptions import InvalidStrategyError
from .locator import LocatorDescriptor

log = logging.getLogger("webheal")


class HealingService:
    """
    POSTs a failed locator to {base_url}/heal and reads back candidates.

    Any transport or payload problem yields no candidates; healing then
    relies on the built-in policy alone.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._http = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def propose(self, descriptor: LocatorDescriptor, page_url: Optional[str] = None) -> List[LocatorDescriptor]:
        """
        Ask the service for alternates to descriptor.

        @param descriptor The locator that failed
        @param page_url URL of the page the lookup ran against, if known
        @return Candidates in service order, possibly empty
        """
        payload: Dict[str, Any] = {**descriptor.to_dict(), "page_url": page_url}
        try:
            response = self._http.post(
                f"{self.base_url}/heal",
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            log.warning("Healing service request failed for %s: %s", descriptor, e)
            return []
        except ValueError as e:
            log.warning("Healing service returned invalid JSON for %s: %s", descriptor, e)
            return []

        raw = data.get("candidates") if isinstance(data, dict) else None
        if not isinstance(raw, list):
            log.warning("Healing service response has no 'candidates' list for %s", descriptor)
            return []

        candidates: List[LocatorDescriptor] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                candidates.append(LocatorDescriptor.from_dict(item))
            except (InvalidStrategyError, ValueError) as e:
                log.debug("Skipping service candidate %r: %s", item, e)
        return candidates

    def close(self) -> None:
        self._http.close()
