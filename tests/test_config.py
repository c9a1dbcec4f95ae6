from __future__ import annotations

import os
from pathlib import Path
import tempfile
import unittest
from unittest.mock import patch

from cratetree.config import load_config, parse_config
from cratetree.errors import ConfigError


class ConfigTests(unittest.TestCase):
    def test_loads_yaml_with_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("name: serde\nversion: '1.0.200'\nmode: remote\n", encoding="utf-8")

            config = load_config(path)

        self.assertEqual(config.name, "serde")
        self.assertEqual(config.version, "1.0.200")
        self.assertEqual(config.mode, "remote")
        self.assertIsNone(config.max_depth)
        self.assertTrue(config.ascii_tree)
        self.assertIsNone(config.output_file)
        self.assertEqual(config.settings.registry_url, "https://crates.io/api/v1")
        self.assertTrue(config.settings.include_optional)
        self.assertFalse(config.used_legacy)

    def test_json_config_with_legacy_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text(
                '{"name": "A", "repository": "graph.txt", "test_repo_mode": "test",'
                ' "version": "0.1.0", "output_filename": "out.txt",'
                ' "ascii_tree_mode": false, "max_depth": 2}',
                encoding="utf-8",
            )

            config = load_config(path)

        self.assertEqual(config.mode, "test")
        self.assertEqual(config.repository, str(Path(tmpdir) / "graph.txt"))
        self.assertEqual(config.max_depth, 2)
        self.assertFalse(config.ascii_tree)
        self.assertEqual(config.output_file, str(Path(tmpdir) / "out.txt"))
        self.assertTrue(config.used_legacy)

    def test_test_mode_version_is_optional(self) -> None:
        config = parse_config({"name": "A", "mode": "test", "repository": "g.txt"})

        self.assertIsNone(config.version)
        self.assertEqual(config.repository, "g.txt")

    def test_latest_version_flag(self) -> None:
        config = parse_config({"name": "serde", "version": "Latest"})

        self.assertTrue(config.wants_latest)

    def test_expands_environment_variables(self) -> None:
        with patch.dict(os.environ, {"CRATE_NAME": "tokio"}):
            config = parse_config({"name": "${CRATE_NAME}", "version": "1.0.0"})

        self.assertEqual(config.name, "tokio")

    def test_invalid_inputs_raise_config_error(self) -> None:
        cases = [
            [],
            {"version": "1.0.0"},
            {"name": "A", "version": "1.0.0", "mode": "git"},
            {"name": "A", "mode": "test"},
            {"name": "A", "mode": "remote"},
            {"name": "A", "version": "1.0.0", "max_depth": -1},
            {"name": "A", "version": "1.0.0", "max_depth": "deep"},
            {"name": "A", "version": "1.0.0", "max_depth": True},
            {"name": "A", "version": "1.0.0", "max_depth": 2.7},
            {"name": "A", "version": "1.0.0", "settings": {"request_timeout_seconds": True}},
            {"name": "A", "version": "1.0.0", "settings": {"request_timeout_seconds": 1.5}},
            {"name": "A", "version": "1.0.0", "ascii_tree": "maybe"},
            {"name": "A", "version": "1.0.0", "settings": []},
            {"name": "A", "version": "1.0.0", "settings": {"request_timeout_seconds": 0}},
            {"name": "A", "version": "1.0.0", "settings": {"registry_url": "ftp://x"}},
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    parse_config(raw)

    def test_unreadable_config_raises_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ConfigError):
                load_config(Path(tmpdir) / "missing.yaml")

    def test_invalid_yaml_raises_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("name: [unterminated\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_whole_number_integers_are_accepted(self) -> None:
        config = parse_config(
            {"name": "A", "version": "1.0.0", "max_depth": 2.0, "settings": {"request_timeout_seconds": "30"}}
        )

        self.assertEqual(config.max_depth, 2)
        self.assertEqual(config.settings.request_timeout_seconds, 30)

    def test_paths_are_relative_to_config_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "conf"
            root.mkdir()
            path = root / "config.yaml"
            path.write_text(
                "name: A\nmode: test\nrepository: graph.txt\noutput_file: out/tree.txt\n",
                encoding="utf-8",
            )

            config = load_config(path)

        self.assertEqual(config.repository, str(root / "graph.txt"))
        self.assertEqual(config.output_file, str(root / "out" / "tree.txt"))
