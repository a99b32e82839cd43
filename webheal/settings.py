# webheal/settings.py
"""
@file settings.py
@brief Setting keys, defaults, presets and the settings-file schema.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict

# Settings-file key -> ResolutionConfig field
SETTING_KEYS: Dict[str, str] = {
    "healing.enabled": "healing_enabled",
    "healing.timeoutMs": "timeout_ms",
    "healing.maxAttempts": "max_healing_attempts",
    "healing.logEvents": "log_healing_events",
    "healing.pollIntervalMs": "poll_interval_ms",
    "healing.service.url": "service_url",
    "healing.service.apiKey": "service_api_key",
    "logging.level": "log_level",
}

DEFAULTS: Dict[str, Any] = {
    "healing_enabled": True,
    "timeout_ms": 30000,
    "max_healing_attempts": 1,
    "log_healing_events": True,
    "poll_interval_ms": 200,
    "service_url": None,
    "service_api_key": None,
    "log_level": "INFO",
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {"timeout_ms": 5000, "poll_interval_ms": 100},
    "slow": {"timeout_ms": 60000, "poll_interval_ms": 500, "max_healing_attempts": 3},
    "ci": {"timeout_ms": 45000, "poll_interval_ms": 300, "max_healing_attempts": 3},
}

_BOOL_OR_STRING = {"anyOf": [{"type": "boolean"}, {"type": "string", "enum": ["true", "false", "True", "False"]}]}
_INT_OR_STRING = {"anyOf": [{"type": "integer", "minimum": 0}, {"type": "string", "pattern": r"^\s*\d+\s*$"}]}
_OPT_STRING = {"type": ["string", "null"]}

SETTINGS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "preset": {"type": "string", "enum": ["default", *PRESET_OVERRIDES]},
        "healing.enabled": _BOOL_OR_STRING,
        "healing.timeoutMs": _INT_OR_STRING,
        "healing.maxAttempts": _INT_OR_STRING,
        "healing.logEvents": _BOOL_OR_STRING,
        "healing.pollIntervalMs": _INT_OR_STRING,
        "healing.service.url": _OPT_STRING,
        "healing.service.apiKey": _OPT_STRING,
        "logging.level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "debug", "info", "warning", "error"]},
    },
    "additionalProperties": False,
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values = deepcopy(DEFAULTS)
    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown healing preset: {preset}")
    values.update(overrides)
    return values


def flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turn nested YAML mappings into dotted keys: {"healing": {"enabled": 1}} -> {"healing.enabled": 1}."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat
