"""
Unit tests for discovery.py

Tests recursive source file enumeration.
"""

import os
import unittest
from pathlib import Path
from unittest import mock

from reflection.discovery import get_source_files
from reflection.errors import DirectoryTraversalError, ExtractionError, InvalidInputError


FIXTURES_DIR = Path(__file__).parent / "fixtures" / "plugin"


class TestGetSourceFiles(unittest.TestCase):
    """Test discovering PHP files below a directory."""

    def test_finds_php_files_sorted(self):
        files = get_source_files(str(FIXTURES_DIR))
        relative = [os.path.relpath(f, FIXTURES_DIR) for f in files]

        self.assertEqual(
            relative,
            sorted([
                "example.php",
                os.path.join("includes", "class-example-widget.php"),
                os.path.join("vendor", "autoload.php"),
            ]),
        )
        self.assertEqual(files, sorted(files))

    def test_exclude_dirs(self):
        files = get_source_files(str(FIXTURES_DIR), exclude_dirs=["vendor"])
        self.assertFalse(any("vendor" in f for f in files))
        self.assertEqual(len(files), 2)

    def test_custom_extensions(self):
        files = get_source_files(str(FIXTURES_DIR), extensions=[".TXT"])
        self.assertEqual([os.path.basename(f) for f in files], ["readme.txt"])

    def test_missing_directory(self):
        with self.assertRaises(InvalidInputError) as cm:
            get_source_files("/nonexistent/directory")
        self.assertIn("/nonexistent/directory", str(cm.exception))
        self.assertIsInstance(cm.exception, ValueError)

    def test_file_is_not_a_directory(self):
        with self.assertRaises(InvalidInputError):
            get_source_files(str(FIXTURES_DIR / "example.php"))

    def test_unreadable_subdirectory(self):
        def failing_walk(top, onerror=None):
            yield str(top), ["locked"], []
            onerror(PermissionError(13, "Permission denied", os.path.join(str(top), "locked")))

        with mock.patch("reflection.discovery.os.walk", side_effect=failing_walk):
            with self.assertRaises(DirectoryTraversalError) as cm:
                get_source_files(str(FIXTURES_DIR))

        self.assertIsInstance(cm.exception, ExtractionError)
        self.assertIn("locked", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
