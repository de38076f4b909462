"""Core shared settings, logging and run artifact utilities."""

from core.structured_logging import (
    configure_structured_logging,
    file_scope,
    get_run_id,
    phase_scope,
    set_run_id,
)
from core.settings import (
    ConfigValidationError,
    ExportSettings,
    load_settings,
    resolve_strict_config_validation,
    validate_settings,
)
from core.run_artifacts import write_export, write_run_report

__all__ = [
    "configure_structured_logging",
    "file_scope",
    "get_run_id",
    "phase_scope",
    "set_run_id",
    "ConfigValidationError",
    "ExportSettings",
    "load_settings",
    "resolve_strict_config_validation",
    "validate_settings",
    "write_export",
    "write_run_report",
]
