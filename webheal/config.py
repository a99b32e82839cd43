# webheal/config.py
"""
@file config.py
@brief Resolution configuration: loaded once per heal context, reset on demand.
"""

from __future__ import annotations

import logging
import os
import threading
import warnings
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError, ConfigLoadWarning
from .settings import (DEFAULTS, SETTING_KEYS, SETTINGS_SCHEMA,
                       build_preset_values, flatten, list_presets)

log = logging.getLogger("webheal")

SettingsSource = Union[str, "os.PathLike[str]", Mapping[str, Any], None]


@dataclass(frozen=True)
class ResolutionConfig:
    """Immutable settings read by resolution sessions."""
    healing_enabled: bool = DEFAULTS["healing_enabled"]
    timeout_ms: int = DEFAULTS["timeout_ms"]
    max_healing_attempts: int = DEFAULTS["max_healing_attempts"]
    log_healing_events: bool = DEFAULTS["log_healing_events"]
    poll_interval_ms: int = DEFAULTS["poll_interval_ms"]
    service_url: Optional[str] = DEFAULTS["service_url"]
    service_api_key: Optional[str] = DEFAULTS["service_api_key"]
    log_level: str = DEFAULTS["log_level"]

    @property
    def timeout(self) -> float:
        """Direct lookup timeout in seconds."""
        return self.timeout_ms / 1000.0

    @property
    def interval(self) -> float:
        return self.poll_interval_ms / 1000.0

    def with_overrides(self, **overrides: Any) -> ResolutionConfig:
        """Create a new config with overrides applied (None values are ignored)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data.get("service_api_key"):
            data["service_api_key"] = "***"
        return data

    @classmethod
    def from_values(cls, values: Dict[str, Any]) -> ResolutionConfig:
        return cls(
            healing_enabled=_to_bool(values["healing_enabled"]),
            timeout_ms=int(values["timeout_ms"]),
            max_healing_attempts=int(values["max_healing_attempts"]),
            log_healing_events=_to_bool(values["log_healing_events"]),
            poll_interval_ms=int(values["poll_interval_ms"]),
            service_url=values.get("service_url") or None,
            service_api_key=values.get("service_api_key") or None,
            log_level=str(values.get("log_level") or "INFO").upper(),
        )


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class ConfigStore:
    """
    Loads a ResolutionConfig from a settings source and caches it.

    The source is a YAML file path, a mapping, or None (defaults only).
    Precedence: base defaults -> preset -> settings keys -> explicit overrides.
    """

    def __init__(
        self,
        source: SettingsSource = None,
        *,
        preset: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        self._source = source
        self._preset = preset
        self._overrides = dict(overrides or {})
        self._cached: Optional[ResolutionConfig] = None
        self._lock = threading.Lock()
        self._validator = Draft202012Validator(SETTINGS_SCHEMA)

    @property
    def source(self) -> SettingsSource:
        return self._source

    def is_loaded(self) -> bool:
        return self._cached is not None

    def load(self) -> ResolutionConfig:
        """
        Return the cached config, reading the source on first use.

        A missing or malformed source never raises: a ConfigLoadWarning is
        logged and the defaults (plus preset and overrides) are used.
        """
        if self._cached is not None:
            return self._cached
        with self._lock:
            if self._cached is None:
                self._cached = self._build()
                _apply_log_level(self._cached.log_level)
        return self._cached

    def reset(self) -> None:
        """Clear the cached config so the next load() re-reads the source."""
        with self._lock:
            self._cached = None

    def configure(self, settings: SettingsSource, *, preset: Optional[str] = None) -> ResolutionConfig:
        """Swap the settings source, reset, and load."""
        with self._lock:
            self._source = settings
            if preset is not None:
                self._preset = preset
            self._cached = None
        return self.load()

    def _build(self) -> ResolutionConfig:
        try:
            settings = self._read_source()
        except ConfigError as e:
            _warn(f"{e}. Using default configuration.")
            settings = {}

        preset = self._preset or settings.pop("preset", None) or "default"
        settings.pop("preset", None)
        if preset.lower() not in list_presets():
            _warn(f"Unknown healing preset '{preset}'. Using 'default'.")
            preset = "default"

        values = build_preset_values(preset)
        for key, value in settings.items():
            values[SETTING_KEYS[key]] = value
        values.update({k: v for k, v in self._overrides.items() if v is not None})

        try:
            return ResolutionConfig.from_values(values)
        except (TypeError, ValueError) as e:
            _warn(f"Invalid override values ({e}). Using default configuration.")
            return ResolutionConfig.from_values(build_preset_values("default"))

    def _read_source(self) -> Dict[str, Any]:
        source = self._source
        if source is None:
            return {}

        if isinstance(source, Mapping):
            data: Any = dict(source)
        else:
            path = os.path.abspath(os.fspath(source))
            if not os.path.exists(path):
                raise ConfigError(f"Settings file not found: {path}")
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Invalid settings file {path}: {e}") from e
            if data is None:
                data = {}

        if not isinstance(data, dict):
            raise ConfigError("Settings must be a mapping at root")

        flat = flatten(data)
        errors = sorted(self._validator.iter_errors(flat), key=lambda e: list(e.path))
        if errors:
            lines = ["Settings schema validation failed:"]
            for e in errors:
                lines.append(f"- {list(e.path)}: {e.message}")
            raise ConfigError("\n".join(lines))
        return flat


def _warn(message: str) -> None:
    log.warning(message)
    warnings.warn(message, ConfigLoadWarning, stacklevel=3)


def _apply_log_level(level: str) -> None:
    logging.getLogger("webheal").setLevel(getattr(logging, level.upper(), logging.INFO))
