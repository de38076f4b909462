"""Tests for export settings loading and validation."""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.settings import (
    ConfigValidationError,
    ExportSettings,
    apply_env_overrides,
    load_settings,
    load_settings_file,
    resolve_strict_config_validation,
    validate_settings,
)

_CLEAN_ENV = {
    "PHPEXTRACT_OUTPUT_FILE": "",
    "PHPEXTRACT_LOG_LEVEL": "",
    "STRICT_CONFIG_VALIDATION": "",
}


class TestLoadSettingsFile(unittest.TestCase):
    def test_yaml_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "phpextract.yml"
            path.write_text("project_name: wordpress\nexclude_dirs:\n  - vendor\n", encoding="utf-8")
            payload = load_settings_file(str(path))
        self.assertEqual(payload, {"project_name": "wordpress", "exclude_dirs": ["vendor"]})

    def test_json_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "phpextract.json"
            path.write_text(json.dumps({"log_level": "debug"}), encoding="utf-8")
            payload = load_settings_file(str(path))
        self.assertEqual(payload, {"log_level": "debug"})

    def test_missing_file_non_strict_returns_empty(self) -> None:
        self.assertEqual(load_settings_file("/definitely/missing.yml", strict=False), {})

    def test_missing_file_strict_raises(self) -> None:
        with self.assertRaises(ConfigValidationError):
            load_settings_file("/definitely/missing.yml", strict=True)

    def test_invalid_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bad.yml"
            path.write_text("project_name: [unterminated\n", encoding="utf-8")
            self.assertEqual(load_settings_file(str(path), strict=False), {})
            with self.assertRaises(ConfigValidationError):
                load_settings_file(str(path), strict=True)

    def test_non_mapping_payload(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "list.yml"
            path.write_text("- a\n- b\n", encoding="utf-8")
            self.assertEqual(load_settings_file(str(path), strict=False), {})
            with self.assertRaises(ConfigValidationError):
                load_settings_file(str(path), strict=True)


class TestValidateSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = validate_settings({})
        self.assertEqual(settings, ExportSettings())
        self.assertEqual(settings.extensions, (".php",))
        self.assertEqual(settings.exclude_dirs, ())

    def test_values(self) -> None:
        settings = validate_settings({
            "project_name": "wordpress",
            "extensions": ["php", ".INC"],
            "exclude_dirs": "vendor",
            "log_level": "debug",
            "continue_on_error": True,
        })
        self.assertEqual(settings.project_name, "wordpress")
        self.assertEqual(settings.extensions, (".php", ".inc"))
        self.assertEqual(settings.exclude_dirs, ("vendor",))
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertTrue(settings.continue_on_error)

    def test_invalid_values_fall_back_non_strict(self) -> None:
        settings = validate_settings({
            "log_level": "chatty",
            "continue_on_error": "yes",
            "extensions": [],
            "output_file": "",
        })
        self.assertEqual(settings, ExportSettings())

    def test_invalid_values_raise_strict(self) -> None:
        with self.assertRaises(ConfigValidationError):
            validate_settings({"log_level": "chatty"}, strict=True)
        with self.assertRaises(ConfigValidationError):
            validate_settings({"exclude_dirs": [1, 2]}, strict=True)

    def test_unknown_keys(self) -> None:
        self.assertEqual(validate_settings({"colour": "blue"}), ExportSettings())
        with self.assertRaisesRegex(ConfigValidationError, "colour"):
            validate_settings({"colour": "blue"}, strict=True)


class TestEnvironment(unittest.TestCase):
    def test_strict_flag(self) -> None:
        with mock.patch.dict(os.environ, {"STRICT_CONFIG_VALIDATION": "true"}):
            self.assertTrue(resolve_strict_config_validation())
        with mock.patch.dict(os.environ, {"STRICT_CONFIG_VALIDATION": "off"}):
            self.assertFalse(resolve_strict_config_validation())

    def test_env_overrides(self) -> None:
        env = {"PHPEXTRACT_OUTPUT_FILE": "out/custom.json", "PHPEXTRACT_LOG_LEVEL": "warning"}
        with mock.patch.dict(os.environ, env):
            settings = apply_env_overrides(ExportSettings())
        self.assertEqual(settings.output_file, "out/custom.json")
        self.assertEqual(settings.log_level, "WARNING")

    def test_invalid_env_log_level(self) -> None:
        with mock.patch.dict(os.environ, {"PHPEXTRACT_LOG_LEVEL": "loud"}):
            self.assertEqual(apply_env_overrides(ExportSettings()).log_level, "INFO")
            with self.assertRaises(ConfigValidationError):
                apply_env_overrides(ExportSettings(), strict=True)


class TestLoadSettings(unittest.TestCase):
    def test_file_then_env(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "phpextract.yml"
            path.write_text("output_file: from-file.json\nreport_dir: reports\n", encoding="utf-8")
            env = dict(_CLEAN_ENV, PHPEXTRACT_OUTPUT_FILE="from-env.json")
            with mock.patch("core.settings.load_dotenv"), mock.patch.dict(os.environ, env):
                settings = load_settings(str(path), strict=False)

        self.assertEqual(settings.output_file, "from-env.json")
        self.assertEqual(settings.report_dir, "reports")

    def test_no_file(self) -> None:
        with mock.patch("core.settings.load_dotenv"), mock.patch.dict(os.environ, _CLEAN_ENV):
            self.assertEqual(load_settings(), ExportSettings())

    def test_strict_from_environment(self) -> None:
        env = dict(_CLEAN_ENV, STRICT_CONFIG_VALIDATION="1")
        with mock.patch("core.settings.load_dotenv"), mock.patch.dict(os.environ, env):
            with self.assertRaises(ConfigValidationError):
                load_settings("/definitely/missing.yml")


if __name__ == "__main__":
    unittest.main()
