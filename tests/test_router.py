from __future__ import annotations

import unittest
from io import BytesIO

from PIL import Image

from fakes import FakeEngine
from serverlist_api.config import DEFAULT_ID_ALPHABET, DEFAULT_TIMER_ALPHABET
from serverlist_api.ocr.adapter import RecognitionAdapter
from serverlist_api.ocr.errors import EngineUnavailableError, ImageDecodeError, InvalidRegionError, RecognitionError
from serverlist_api.ocr.router import ID_REGION, TIMER_REGION, extract_rows, extract_rows_from_bytes
from serverlist_api.ocr.schema import CropLayout, Region
from serverlist_api.serverlist.models import MISMATCH_WARNING


def _shot(w: int = 200, h: int = 100) -> Image.Image:
    return Image.new("RGB", (w, h), (30, 30, 30))


class TestExtractRows(unittest.TestCase):
    def test_scenario_a(self) -> None:
        engine = FakeEngine(left="Premium #11 foo Premium#7", right="04:23:33 47:44:40 00:01:02")
        res = extract_rows(_shot(), RecognitionAdapter(engine))

        self.assertTrue(res.ok)
        self.assertEqual(res.identifiers, ["Premium #11", "Premium #7"])
        self.assertEqual(res.times, ["04:23:33", "47:44:40", "00:01:02"])
        self.assertEqual([r.as_line() for r in res.rows], ["Premium #11 | 04:23:33 | 47:44:40"])
        self.assertTrue(res.diagnostics.mismatch)
        self.assertTrue(res.text().endswith(MISMATCH_WARNING))

    def test_scenario_b(self) -> None:
        engine = FakeEngine(
            left="Premium #11\nPremium #7",
            right="04:23:33 47:44:40\n00:01:02 00:02:03",
        )
        res = extract_rows(_shot(), RecognitionAdapter(engine))
        self.assertEqual(len(res.rows), 2)
        self.assertFalse(res.diagnostics.mismatch)

    def test_crops_and_alphabets_sent_to_engine(self) -> None:
        engine = FakeEngine()
        extract_rows(_shot(200, 100), RecognitionAdapter(engine))
        self.assertEqual(
            engine.calls,
            [((100, 110), DEFAULT_ID_ALPHABET, None), ((100, 68), DEFAULT_TIMER_ALPHABET, None)],
        )

    def test_custom_layout(self) -> None:
        engine = FakeEngine()
        layout = CropLayout(id_x=0.0, id_w=0.5, timer_x=0.5, timer_w=0.5, y=0.0, h=0.5)
        res = extract_rows(_shot(200, 100), RecognitionAdapter(engine), layout=layout)
        self.assertEqual(res.regions[TIMER_REGION].region, Region(100, 0, 100, 50))
        self.assertEqual(engine.calls[0][0], (50, 100))

    def test_one_region_failure_keeps_the_other(self) -> None:
        engine = FakeEngine(left="Premium #1", right="1:00:00 2:00:00", fail_on="left")
        res = extract_rows(_shot(), RecognitionAdapter(engine))

        self.assertFalse(res.ok)
        self.assertEqual(len(engine.calls), 2)
        self.assertEqual([e.region for e in res.errors], [ID_REGION])
        self.assertFalse(res.regions[ID_REGION].ok)
        self.assertEqual(res.regions[TIMER_REGION].text, "1:00:00 2:00:00")
        self.assertEqual(res.rows, [])
        self.assertIsNone(res.diagnostics)
        self.assertEqual(res.text(), "")
        with self.assertRaises(RecognitionError):
            res.raise_for_errors()

    def test_engine_unavailable_stops_before_cropping(self) -> None:
        engine = FakeEngine(fail_init=True)
        with self.assertRaises(EngineUnavailableError):
            # the degenerate region would raise InvalidRegionError if it were reached
            extract_rows(_shot(), RecognitionAdapter(engine), regions=(Region(0, 0, 0, 0), Region(0, 0, 0, 0)))
        self.assertEqual(engine.calls, [])

    def test_degenerate_region_rejected_before_recognition(self) -> None:
        engine = FakeEngine(left="Premium #1", right="1:00:00 2:00:00")
        regions = (Region(0, 0, 50, 100), Region(120, 0, 0, 100))
        with self.assertRaises(InvalidRegionError):
            extract_rows(_shot(), RecognitionAdapter(engine), regions=regions)
        self.assertEqual(engine.calls, [])

    def test_to_dict_shape(self) -> None:
        engine = FakeEngine(left="Premium #11", right="04:23:33 47:44:40")
        d = extract_rows(_shot(), RecognitionAdapter(engine)).to_dict()
        self.assertTrue(d["ok"])
        self.assertEqual(d["rows"], [{"id": "Premium #11", "time_a": "04:23:33", "time_b": "47:44:40"}])
        self.assertEqual(d["raw"], {ID_REGION: "Premium #11", TIMER_REGION: "04:23:33 47:44:40"})
        self.assertEqual(d["regions"][ID_REGION], [0, 0, 110, 100])
        self.assertEqual(
            d["text"],
            "Premium #11 | 04:23:33 | 47:44:40\n\nIDs found: 1 | Times found: 2 (1 pairs) | Rows output: 1",
        )
        self.assertEqual(d["errors"], [])


class TestExtractRowsFromBytes(unittest.TestCase):
    def test_decodes_then_runs(self) -> None:
        buf = BytesIO()
        _shot().save(buf, format="PNG")
        engine = FakeEngine(left="Premium #3", right="9:59:59 10:00:00")
        res = extract_rows_from_bytes(buf.getvalue(), RecognitionAdapter(engine), filename="shot.png")
        self.assertEqual([r.as_line() for r in res.rows], ["Premium #3 | 9:59:59 | 10:00:00"])

    def test_bad_bytes(self) -> None:
        with self.assertRaises(ImageDecodeError):
            extract_rows_from_bytes(b"nope", RecognitionAdapter(FakeEngine()))


if __name__ == "__main__":
    unittest.main()
