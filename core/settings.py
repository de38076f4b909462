"""Export settings loading and validation.

Settings come from an optional YAML or JSON file, overlaid with environment
variables (a ``.env`` file is honoured via python-dotenv). In non-strict mode
invalid input is logged and replaced by defaults; in strict mode it raises
``ConfigValidationError``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

OUTPUT_FILE_ENV = "PHPEXTRACT_OUTPUT_FILE"
LOG_LEVEL_ENV = "PHPEXTRACT_LOG_LEVEL"
STRICT_ENV = "STRICT_CONFIG_VALIDATION"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigValidationError(RuntimeError):
    """Raised when strict settings validation fails."""


@dataclass(frozen=True)
class ExportSettings:
    """Resolved settings for one export run."""

    project_name: str = "phpextract"
    extensions: tuple[str, ...] = (".php",)
    exclude_dirs: tuple[str, ...] = ()
    output_file: str = "output/hooks.json"
    report_dir: str = "output/run_reports"
    log_level: str = "INFO"
    continue_on_error: bool = False


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag(STRICT_ENV, default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; continuing with defaults", msg)


def load_settings_file(path: str, strict: bool = False) -> dict[str, Any]:
    """Load a YAML or JSON settings file into a dict.

    JSON is chosen by a ``.json`` suffix, everything else is read as YAML.
    In non-strict mode this returns an empty dict on read/parse failures.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith(".json"):
                payload = json.load(f)
            else:
                payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        if strict:
            raise ConfigValidationError(f"Settings file not found: {path}") from exc
        logger.warning("Settings file not found: %s; continuing with defaults", path)
        return {}
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        msg = f"Failed to parse settings file {path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        _fail(f"Settings file is empty: {path}", strict)
        return {}

    if not isinstance(payload, dict):
        _fail(f"Unexpected settings payload type: {type(payload).__name__}", strict)
        return {}

    return payload


def _as_str_tuple(key: str, value: Any, strict: bool) -> Optional[tuple[str, ...]]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        _fail(f"Setting '{key}' must be a list of strings", strict)
        return None
    return tuple(value)


def _normalize_extensions(values: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(v.lower() if v.startswith(".") else f".{v.lower()}" for v in values)


def validate_settings(payload: dict[str, Any], strict: bool = False) -> ExportSettings:
    """Build ``ExportSettings`` from a raw mapping.

    Unknown keys and values of the wrong type are reported; in non-strict
    mode the offending entries fall back to their defaults.
    """
    known = {f.name for f in fields(ExportSettings)}
    unknown = sorted(set(payload) - known)
    if unknown:
        _fail("Unknown settings: " + ", ".join(unknown), strict)

    values: dict[str, Any] = {}

    for key in ("project_name", "output_file", "report_dir"):
        if key not in payload:
            continue
        value = payload[key]
        if not isinstance(value, str) or not value:
            _fail(f"Setting '{key}' must be a non-empty string", strict)
            continue
        values[key] = value

    for key in ("extensions", "exclude_dirs"):
        if key not in payload:
            continue
        parsed = _as_str_tuple(key, payload[key], strict)
        if parsed is None:
            continue
        if key == "extensions":
            if not parsed:
                _fail("Setting 'extensions' must not be empty", strict)
                continue
            parsed = _normalize_extensions(parsed)
        values[key] = parsed

    if "log_level" in payload:
        level = str(payload["log_level"]).upper()
        if level in _LOG_LEVELS:
            values["log_level"] = level
        else:
            _fail(f"Invalid log level: {payload['log_level']}", strict)

    if "continue_on_error" in payload:
        flag = payload["continue_on_error"]
        if isinstance(flag, bool):
            values["continue_on_error"] = flag
        else:
            _fail("Setting 'continue_on_error' must be a boolean", strict)

    return ExportSettings(**values)


def apply_env_overrides(settings: ExportSettings, strict: bool = False) -> ExportSettings:
    """Overlay ``PHPEXTRACT_*`` environment variables onto ``settings``."""
    output_file = os.getenv(OUTPUT_FILE_ENV)
    if output_file:
        settings = replace(settings, output_file=output_file)

    log_level = os.getenv(LOG_LEVEL_ENV)
    if log_level:
        if log_level.upper() in _LOG_LEVELS:
            settings = replace(settings, log_level=log_level.upper())
        else:
            _fail(f"Invalid {LOG_LEVEL_ENV} value: {log_level}", strict)

    return settings


def load_settings(path: Optional[str] = None, strict: Optional[bool] = None) -> ExportSettings:
    """Resolve export settings.

    Args:
        path: Optional YAML or JSON settings file.
        strict: Strict validation; defaults to ``STRICT_CONFIG_VALIDATION``.

    Returns:
        Frozen ExportSettings.

    Raises:
        ConfigValidationError: In strict mode, on any invalid input.
    """
    load_dotenv()
    if strict is None:
        strict = resolve_strict_config_validation()

    payload = load_settings_file(path, strict=strict) if path else {}
    settings = validate_settings(payload, strict=strict)
    return apply_env_overrides(settings, strict=strict)
