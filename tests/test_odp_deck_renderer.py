#!/usr/bin/env python3
import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from zipfile import ZipFile

from odpgen.deck_renderer import build_presentation, main
from odpgen.errors import IOFailure

PNG = b"\x89PNG\r\n\x1a\nfake"


def _write_deck(root: Path, payload: dict) -> Path:
    (root / "img").mkdir(exist_ok=True)
    (root / "img" / "chart.png").write_bytes(PNG)
    (root / "img" / "bg.jpg").write_bytes(b"\xff\xd8\xff\xe0fake")
    path = root / "deck.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


DECK = {
    "slide_size": "16:9",
    "background": {"image": "img/bg.jpg"},
    "slides": [
        {"title": "Primera página", "images": [{"path": "img/chart.png", "x": 15, "y": 5, "width": 10, "height": 8}]},
        {
            "background": {"color": "#0000FF"},
            "text_boxes": [
                {
                    "content": "Texto en el centro",
                    "x": 10,
                    "y": 8,
                    "width": 8,
                    "height": 4,
                    "style": {"font_size": 24, "font_family": "Arial", "color": "#FF0000", "bold": True},
                    "properties": {"horizontal_align": "center", "vertical_align": "middle"},
                }
            ],
        },
    ],
}


class OdpDeckRendererTest(unittest.TestCase):
    def test_main_renders_archive(self):
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            spec = _write_deck(root, DECK)
            out = root / "out" / "deck"
            out.parent.mkdir()
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                code = main(["--spec-json", str(spec), "--out-odp", str(out), "--config", str(root / "none.yaml")])
            self.assertEqual(code, 0)
            result = json.loads(buf.getvalue())
            self.assertTrue(result["ok"])
            self.assertEqual(result["slide_count"], 2)
            self.assertEqual(result["media"], ["media/background.jpg", "Pictures/slide0_image0.png"])
            with ZipFile(root / "out" / "deck.odp") as zf:
                self.assertEqual(zf.read("Pictures/slide0_image0.png"), PNG)
                self.assertIn("T_s24-00pt_fArial_cFF0000_bold", zf.read("styles.xml").decode("utf-8"))

    def test_typed_error_is_reported(self):
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            deck = {"slides": [{"images": [{"path": "img/chart.png", "x": 30, "y": 0, "width": 10, "height": 5}]}]}
            spec = _write_deck(root, deck)
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                code = main(["--spec-json", str(spec), "--out-odp", str(root / "x.odp"), "--config", str(root / "none.yaml")])
            self.assertEqual(code, 2)
            self.assertEqual(json.loads(buf.getvalue())["error"]["code"], "OUT_OF_BOUNDS")
            self.assertFalse((root / "x.odp").exists())

    def test_missing_image_is_reported_as_io_failure(self):
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            deck = {"slides": [{"images": [{"path": "img/missing.png", "x": 1, "y": 1, "width": 2, "height": 2}]}]}
            spec = _write_deck(root, deck)
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                code = main(["--spec-json", str(spec), "--out-odp", str(root / "m.odp"), "--config", str(root / "none.yaml")])
            self.assertEqual(code, 2)
            error = json.loads(buf.getvalue())["error"]
            self.assertEqual(error["code"], "IO_FAILURE")
            self.assertEqual(error["details"]["path"], str(root.resolve() / "img" / "missing.png"))
            self.assertFalse((root / "m.odp").exists())

    def test_missing_deck_description_is_reported_as_io_failure(self):
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                code = main(["--spec-json", str(root / "absent.json"), "--out-odp", str(root / "a.odp"), "--config", str(root / "none.yaml")])
            self.assertEqual(code, 2)
            self.assertEqual(json.loads(buf.getvalue())["error"]["code"], "IO_FAILURE")

    def test_missing_background_raises_chained_io_failure(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(IOFailure) as ctx:
                build_presentation({"background": {"image": "nope.jpg"}}, Path(td))
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_strict_z_rejects_duplicate_indices(self):
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            box = {"content": "a", "x": 1, "y": 1, "width": 2, "height": 1, "z_index": 2}
            spec = _write_deck(root, {"slides": [{"text_boxes": [box, dict(box, content="b")]}]})
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                code = main(["--spec-json", str(spec), "--out-odp", str(root / "z.odp"), "--config", str(root / "none.yaml"), "--strict-z"])
            self.assertEqual(code, 2)
            self.assertEqual(json.loads(buf.getvalue())["error"]["details"], [{"slide": 0, "z_indices": [2]}])

    def test_build_presentation_custom_size(self):
        with tempfile.TemporaryDirectory() as td:
            pres = build_presentation({"slide_size": {"width": 20, "height": 10}, "slides": [{}]}, Path(td))
        self.assertEqual((pres.slide_size.width, pres.slide_size.height), (20.0, 10.0))
        self.assertEqual(pres.slide_count, 1)


if __name__ == "__main__":
    unittest.main()
