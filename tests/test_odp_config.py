#!/usr/bin/env python3
import json
import tempfile
import unittest
from pathlib import Path

from odpgen.config import OdpConfig, load_config
from odpgen.geometry import SIZE_4_3, SIZE_16_9, SlideSize, TextStyle
from odpgen.model import Presentation
from odpgen.telemetry import NullTelemetry, TelemetryClient
from odpgen.xml_parts import settings_xml

SHIPPED_CONFIG = Path(__file__).resolve().parents[1] / "config" / "odpgen.yaml"


class OdpConfigTest(unittest.TestCase):
    def test_missing_file_yields_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(load_config(Path(td) / "none.yaml"), {})
            cfg = OdpConfig.from_file(Path(td) / "none.yaml")
        self.assertEqual(cfg.default_size, SIZE_16_9)
        self.assertEqual(cfg.title_style, TextStyle("32pt", "Liberation Sans", "#000000", True, False))
        self.assertEqual(cfg.body_style, TextStyle("18pt", "Liberation Sans", "#000000", False, False))
        self.assertIsNone(cfg.telemetry_events_file)

    def test_yaml_overrides_merge_over_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "odpgen.yaml"
            path.write_text(
                "slide_sizes:\n"
                "  wide: {width: 40, height: 20}\n"
                "title_style:\n"
                "  font_family: DejaVu Sans\n"
                "locale:\n"
                "  language: en\n"
                "  country: GB\n",
                encoding="utf-8",
            )
            cfg = OdpConfig.from_file(path)
        self.assertEqual(cfg.preset("wide"), SlideSize(40.0, 20.0))
        self.assertEqual(cfg.preset("4:3").width, 25.4)
        self.assertEqual(cfg.preset("unknown"), SIZE_16_9)
        self.assertEqual(cfg.title_style.font_family, "DejaVu Sans")
        self.assertEqual(cfg.title_style.font_size, "32pt")

        pres = Presentation(config=cfg)
        pres.set_slide_size("wide")
        self.assertEqual(pres.slide_size, SlideSize(40.0, 20.0))
        ref = pres.add_slide("Hello", "")
        self.assertEqual(pres.slide(ref).text_boxes[0].width, 36.0)
        self.assertIn(">en<", settings_xml(pres))
        self.assertIn(">GB<", settings_xml(pres))

    def test_unknown_preset_falls_back_to_16_9_not_default_preset(self):
        cfg = OdpConfig({"default_preset": "4:3"})
        self.assertEqual(cfg.default_size, SIZE_4_3)
        self.assertEqual(cfg.preset("unknown"), SIZE_16_9)
        self.assertEqual(cfg.preset(""), SIZE_16_9)
        pres = Presentation(config=cfg)
        self.assertEqual(pres.slide_size, SIZE_4_3)
        pres.set_slide_size("10:1")
        self.assertEqual(pres.slide_size, SIZE_16_9)

    def test_shipped_config_parses(self):
        cfg = OdpConfig.from_file(SHIPPED_CONFIG)
        self.assertEqual(cfg.default_size, SIZE_16_9)
        self.assertIn("16:10", cfg.slide_sizes)

    def test_telemetry_from_config(self):
        self.assertIsInstance(Presentation().telemetry, NullTelemetry)
        with tempfile.TemporaryDirectory() as td:
            events = Path(td) / "t" / "events.jsonl"
            pres = Presentation(config=OdpConfig({"telemetry": {"events_file": str(events)}}))
            self.assertIsInstance(pres.telemetry, TelemetryClient)
            pres.save_stream()
            row = json.loads(events.read_text(encoding="utf-8").splitlines()[0])
            self.assertEqual(row["action"], "save_stream")


if __name__ == "__main__":
    unittest.main()
