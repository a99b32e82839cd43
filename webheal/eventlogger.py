# webheal/eventlogger.py
"""
@file eventlogger.py
@brief Structured event logging for resolution, healing and waits.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

log = logging.getLogger("webheal")

SENSITIVE_KEYS = {"password", "passwd", "secret", "token", "api_key", "apikey"}


class EventLogger:
    """Thread-safe event logger with line/jsonl output."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"
        self._run_id = "default"
        self._format = "line"
        self._history: Optional[List[Dict[str, Any]]] = None

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        run_id: Optional[str] = None,
        format: str = "line",
        keep_history: bool = False,
    ) -> None:
        """Configure logger settings."""
        fmt = (format or "line").lower()
        if fmt not in {"line", "jsonl"}:
            raise ValueError("EventLogger format must be 'line' or 'jsonl'")

        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level.upper()
            self._format = fmt
            self._history = [] if keep_history else None
            if run_id:
                self._run_id = run_id

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def history(self) -> List[Dict[str, Any]]:
        """Events recorded since configure(keep_history=True)."""
        with self._lock:
            return list(self._history or [])

    def log(
        self,
        *,
        event: str,
        status: str = "ok",
        locator: Optional[str] = None,
        candidate: Optional[str] = None,
        attempt: Optional[int] = None,
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Emit an event."""
        if not self._enabled:
            return

        event_obj: Dict[str, Any] = {
            "timestamp": time.strftime("%H:%M:%S"),
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": self._level,
            "event": event,
            "locator": locator,
            "candidate": candidate,
            "status": status,
            "attempt": attempt,
            "duration_ms": duration_ms,
            "metadata": _redact(dict(metadata or {})),
            "run_id": self._run_id,
        }

        with self._lock:
            if self._history is not None:
                self._history.append(event_obj)

        line = self._format_output(event_obj)
        if self._console:
            log.info(line)
        if self._file_path:
            self._write_file(line)

    def _write_file(self, line: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
            with open(self._file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            log.warning("Could not write event log %s: %s", self._file_path, e)

    def _format_output(self, event: Dict[str, Any]) -> str:
        if self._format == "jsonl":
            return json.dumps(event, ensure_ascii=False, separators=(",", ":"))
        return _format_line(event)


def _format_line(event: Dict[str, Any]) -> str:
    parts = [event.get("timestamp", ""), event.get("level", "INFO"), event.get("event", "")]
    for key in ("locator", "candidate", "attempt", "status", "duration_ms", "run_id"):
        value = event.get(key)
        if value is not None:
            parts.append(f"{key}={value}")
    for key, value in (event.get("metadata") or {}).items():
        parts.append(f"{key}={value}")
    return " | ".join(parts)


def _redact(metadata: Dict[str, Any]) -> Dict[str, Any]:
    return {k: ("***" if k.lower() in SENSITIVE_KEYS else v) for k, v in metadata.items()}
