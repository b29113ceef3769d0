"""
Unit tests for core stfjson components.

Tests configuration management, the data models and the command line
entry point.
"""

import io
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from stfjson.config import CONFIG_ENV_VAR, ConfigManager
from stfjson.models import AssignmentOptions, Block, Category, CategoryLink, Item, LinkType

import main


SAMPLE_STF = (
    "{STF}10/31/20;14:05:09;002\n"
    "{C}Work\\{r}AC{;}{.}\n"
    "{I}{T}Café opening{C}Work\\{!}\n"
)


class TestConfigManager(unittest.TestCase):
    """Test configuration management functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.yaml"

    def tearDown(self):
        """Clean up test fixtures."""
        if self.config_path.exists():
            self.config_path.unlink()
        os.rmdir(self.temp_dir)

    def test_config_creation_with_defaults(self):
        """Test config manager falls back to defaults when file missing."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.default_date_format, 1)
        self.assertEqual(config.input_encoding, "latin-1")
        self.assertEqual(config.json_indent, 2)
        self.assertFalse(config.ensure_ascii)
        self.assertEqual(config.log_level, "INFO")
        self.assertIsNone(config.log_filename)

    def test_config_loading_from_file(self):
        """Test loading configuration from YAML file."""
        test_config = """
stf:
  default_date_format: 5
  input_encoding: cp437

output:
  indent: 4
"""
        with open(self.config_path, 'w') as f:
            f.write(test_config)

        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.default_date_format, 5)
        self.assertEqual(config.input_encoding, "cp437")
        self.assertEqual(config.json_indent, 4)
        # Keys missing from the file use property defaults
        self.assertEqual(config.log_level, "INFO")

    def test_dot_notation_access(self):
        """Test accessing config values with dot notation."""
        config = ConfigManager(str(self.config_path))  # Uses defaults

        self.assertEqual(config.get("stf.default_date_format"), 1)
        self.assertEqual(config.get("output.indent"), 2)
        self.assertEqual(config.get("nonexistent.key", "default"), "default")
        self.assertEqual(config.get_section("output"), {"indent": 2, "ensure_ascii": False})

    def test_invalid_yaml_falls_back_to_defaults(self):
        """Test that an unreadable file is logged and defaults are used."""
        with open(self.config_path, 'w') as f:
            f.write("stf: [unclosed")

        with self.assertLogs(level="ERROR"):
            config = ConfigManager(str(self.config_path))

        self.assertEqual(config.default_date_format, 1)

    def test_config_path_from_environment(self):
        """Test that STFJSON_CONFIG names the file when no path is given."""
        with open(self.config_path, 'w') as f:
            f.write("output:\n  indent: 8")

        with patch.dict(os.environ, {CONFIG_ENV_VAR: str(self.config_path)}):
            config = ConfigManager()

        self.assertEqual(config.json_indent, 8)

    def test_config_reload(self):
        """Test configuration reloading."""
        with open(self.config_path, 'w') as f:
            f.write("stf:\n  default_date_format: 3")

        config = ConfigManager(str(self.config_path))
        self.assertEqual(config.default_date_format, 3)

        with open(self.config_path, 'w') as f:
            f.write("stf:\n  default_date_format: 9")

        config.reload()
        self.assertEqual(config.default_date_format, 9)


class TestDataModels(unittest.TestCase):
    """Test data model creation and serialization."""

    def test_category_link_dump_omits_unset_fields(self):
        """Test that only populated link fields are serialized."""
        link = CategoryLink(type=LinkType.EXCLUSIVE, name="People", alsomatch=["Folks"])

        self.assertEqual(
            link.model_dump(mode="json", exclude_none=True),
            {"type": "exclusive", "name": "People", "alsomatch": ["Folks"]},
        )

    def test_block_key_order(self):
        """Test that serialized keys follow the output layout."""
        category = Category(name="Work\\", note="n", actions=AssignmentOptions(include=["Home\\"]))
        item = Item(text="t", note="n", categories=[CategoryLink(type=LinkType.STANDARD, name="Work")])
        block = Block(timestamp="2020-10-31T14:05:09Z", categories=[category], items=[item])

        data = block.to_json_dict()

        self.assertEqual(list(data), ["timestamp", "categories", "items"])
        self.assertEqual(list(data["categories"][0]), ["name", "attributes", "note", "actions"])
        self.assertEqual(data["categories"][0]["actions"], {"include": ["Home\\"], "exclude": []})
        self.assertEqual(list(data["items"][0]), ["categories", "text", "note"])

    def test_new_block_is_empty(self):
        """Test that a block starts without categories or items."""
        block = Block(timestamp="2020-10-31T14:05:09Z")

        self.assertEqual(block.to_json_dict(), {"timestamp": "2020-10-31T14:05:09Z", "categories": [], "items": []})


class TestCommandLine(unittest.TestCase):
    """Test the main entry point."""

    def setUp(self):
        """Set up an input file."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.input_path = Path(self.temp_dir.name) / "export.stf"
        self.input_path.write_bytes(SAMPLE_STF.encode("latin-1"))

    def tearDown(self):
        """Clean up test files."""
        self.temp_dir.cleanup()

    def run_main(self, argv, stdin_bytes=b""):
        """Run main() with captured stdout and a fake stdin."""
        stdout = io.StringIO()
        stdin = io.TextIOWrapper(io.BytesIO(stdin_bytes), encoding="latin-1")
        with patch.object(sys, "stdout", stdout), patch.object(sys, "stdin", stdin):
            status = main.main(argv)
        return status, stdout.getvalue()

    def test_convert_file_to_stdout(self):
        """Test converting a file path and printing JSON."""
        status, output = self.run_main([str(self.input_path)])

        self.assertEqual(status, 0)
        self.assertTrue(output.endswith("}\n]\n"))
        document = json.loads(output)
        self.assertEqual(len(document), 1)
        self.assertEqual(document[0]["categories"], [{"name": "Work\\", "attributes": ["AC"]}])
        self.assertEqual(document[0]["items"][0]["text"], "Café opening")
        self.assertEqual(document[0]["items"][0]["categories"], [{"type": "standard", "name": "Work"}])

    def test_convert_stdin(self):
        """Test reading from standard input when no path is given."""
        status, output = self.run_main([], SAMPLE_STF.encode("latin-1"))

        self.assertEqual(status, 0)
        self.assertEqual(json.loads(output)[0]["timestamp"], "2020-10-31T14:05:09Z")

    def test_pretty_printed(self):
        """Test that output is indented with the configured width."""
        status, output = self.run_main([str(self.input_path)])

        self.assertEqual(status, 0)
        self.assertTrue(output.startswith("[\n  {\n    \"timestamp\""))

    def test_output_file(self):
        """Test writing JSON to a file with -o."""
        output_path = Path(self.temp_dir.name) / "export.json"

        status, output = self.run_main([str(self.input_path), "-o", str(output_path)])

        self.assertEqual(status, 0)
        self.assertEqual(output, "")
        self.assertEqual(json.loads(output_path.read_text(encoding="utf-8"))[0]["items"][0]["text"], "Café opening")

    def test_fatal_error_writes_no_json(self):
        """Test that malformed input exits non-zero with empty stdout."""
        self.input_path.write_text("{STF}10/31/20;14:05:09;002{Q}x{!}", encoding="latin-1")

        with self.assertLogs(level="ERROR") as logs:
            status, output = self.run_main([str(self.input_path)])

        self.assertEqual(status, 1)
        self.assertEqual(output, "")
        self.assertIn("unexpected tag", logs.output[0])

    def test_missing_input_file(self):
        """Test that an unreadable input is reported as a failure."""
        with self.assertLogs(level="ERROR"):
            status, output = self.run_main([str(Path(self.temp_dir.name) / "missing.stf")])

        self.assertEqual(status, 1)
        self.assertEqual(output, "")

    def test_config_option(self):
        """Test that --config changes the output layout."""
        config_path = Path(self.temp_dir.name) / "config.yaml"
        config_path.write_text("output:\n  indent: 4\n", encoding="utf-8")

        status, output = self.run_main(["--config", str(config_path), str(self.input_path)])

        self.assertEqual(status, 0)
        self.assertTrue(output.startswith("[\n    {\n"))

    def test_invalid_default_date_format_in_config(self):
        """Test that an out of range configured date format is fatal."""
        config_path = Path(self.temp_dir.name) / "config.yaml"
        config_path.write_text("stf:\n  default_date_format: 42\n", encoding="utf-8")

        with self.assertLogs(level="ERROR"):
            status, output = self.run_main(["--config", str(config_path), str(self.input_path)])

        self.assertEqual(status, 1)
        self.assertEqual(output, "")

    def test_undecodable_input_is_reported(self):
        """Test that bytes invalid in the configured encoding fail cleanly."""
        config_path = Path(self.temp_dir.name) / "config.yaml"
        config_path.write_text("stf:\n  input_encoding: utf-8\n", encoding="utf-8")
        self.input_path.write_bytes(b"{STF}10/31/20;14:05:09;002{I}{T}caf\xe9{!}")

        with self.assertLogs(level="ERROR") as logs:
            status, output = self.run_main(["--config", str(config_path), str(self.input_path)])

        self.assertEqual(status, 1)
        self.assertEqual(output, "")
        self.assertIn("not valid utf-8", logs.output[0])


if __name__ == "__main__":
    unittest.main()
