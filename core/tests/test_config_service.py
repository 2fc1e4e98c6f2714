"""
core/tests/test_config_service.py

Layering and casting of the configuration service.
"""

from __future__ import annotations

import configparser
import os
import tempfile
import unittest
from pathlib import Path

from core.config.config_service import ConfigService, write_machine_defaults


class TestConfigService(unittest.TestCase):
    def setUp(self) -> None:
        self._saved = {k: v for k, v in os.environ.items() if k.startswith("SIGNPAD_")}

    def tearDown(self) -> None:
        for key in [k for k in os.environ if k.startswith("SIGNPAD_")]:
            del os.environ[key]
        os.environ.update(self._saved)

    def test_embedded_defaults(self) -> None:
        svc = ConfigService()
        self.assertEqual(svc.capture.canvas_width, 600)
        self.assertEqual(svc.capture.canvas_height, 200)
        self.assertEqual(svc.capture.stroke_width, 2)
        self.assertEqual(svc.capture.stroke_color, "#1e40af")
        self.assertEqual(svc.composition.output_suffix, "_signed")
        self.assertEqual(svc.catalog.history_limit, 500)
        self.assertFalse(svc.catalog.encrypt_at_rest)
        self.assertEqual(svc.connector.gov_delay_ms, 2000)

    def test_env_overlay_wins_over_defaults(self) -> None:
        os.environ["SIGNPAD_CAPTURE__STROKE_WIDTH"] = "5"
        os.environ["SIGNPAD_CATALOG__ENCRYPT_AT_REST"] = "yes"
        svc = ConfigService()
        self.assertEqual(svc.capture.stroke_width, 5)
        self.assertTrue(svc.catalog.encrypt_at_rest)
        self.assertEqual(svc.meta_source("Capture", "stroke_width")["layer"], "env")

    def test_database_paths_are_paths(self) -> None:
        svc = ConfigService()
        self.assertIsInstance(svc.database.catalog, Path)
        self.assertEqual(svc.database.catalog, Path(os.environ["SIGNPAD_DATABASE__CATALOG"]))

    def test_get_with_cast(self) -> None:
        svc = ConfigService()
        self.assertEqual(svc.get("Catalog", "history_limit", cast=int), 500)
        self.assertIsNone(svc.get("Catalog", "missing"))

    def test_write_machine_defaults_does_not_overwrite(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg" / "config.ini"
            write_machine_defaults(path)
            cp = configparser.ConfigParser()
            cp.read(path, encoding="utf-8")
            self.assertEqual(cp.get("Connector", "gov_delay_ms"), "2000")

            path.write_text("[Connector]\ngov_delay_ms = 10\n", encoding="utf-8")
            write_machine_defaults(path)
            self.assertIn("= 10", path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
