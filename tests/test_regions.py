from __future__ import annotations

import unittest

from serverlist_api.ocr.errors import InvalidRegionError
from serverlist_api.ocr.regions import compute_regions
from serverlist_api.ocr.schema import CropLayout, Region


class TestComputeRegions(unittest.TestCase):
    def test_default_fractions(self) -> None:
        ids, timers = compute_regions(1000, 500)
        self.assertEqual(ids, Region(x=0, y=0, w=550, h=500))
        self.assertEqual(timers, Region(x=630, y=0, w=340, h=500))

    def test_regions_inside_bounds_with_gap(self) -> None:
        for width in range(3, 400):
            for height in (2, 3, 17, 480):
                ids, timers = compute_regions(width, height)
                for r in (ids, timers):
                    self.assertGreaterEqual(r.x, 0)
                    self.assertGreaterEqual(r.y, 0)
                    self.assertGreaterEqual(r.w, 1)
                    self.assertGreaterEqual(r.h, 1)
                    self.assertLessEqual(r.x + r.w, width)
                    self.assertLessEqual(r.y + r.h, height)
                self.assertLessEqual(ids.x + ids.w, timers.x, (width, height))
                self.assertLess(ids.w + timers.w, width, (width, height))

    def test_two_pixel_image_gets_disjoint_columns(self) -> None:
        ids, timers = compute_regions(2, 1)
        self.assertEqual(ids, Region(x=0, y=0, w=1, h=1))
        self.assertEqual(timers, Region(x=1, y=0, w=1, h=1))

    def test_one_pixel_wide_image_rejected(self) -> None:
        # both one-pixel crops would land on x=0
        for height in (1, 50):
            with self.assertRaises(InvalidRegionError):
                compute_regions(1, height)

    def test_swapped_columns(self) -> None:
        layout = CropLayout(timer_x=0.0, timer_w=0.34, id_x=0.45, id_w=0.55)
        ids, timers = compute_regions(1000, 200, layout)
        self.assertEqual(timers, Region(x=0, y=0, w=340, h=200))
        self.assertEqual(ids, Region(x=450, y=0, w=550, h=200))

    def test_custom_layout(self) -> None:
        layout = CropLayout(id_x=0.1, id_w=0.3, timer_x=0.5, timer_w=0.5, y=0.2, h=0.5)
        ids, timers = compute_regions(200, 100, layout)
        self.assertEqual(ids, Region(x=20, y=20, w=60, h=50))
        self.assertEqual(timers, Region(x=100, y=20, w=100, h=50))

    def test_rejects_non_positive_dimensions(self) -> None:
        with self.assertRaises(ValueError):
            compute_regions(0, 10)
        with self.assertRaises(ValueError):
            compute_regions(10, -1)


class TestCropLayout(unittest.TestCase):
    def test_rejects_out_of_range_fraction(self) -> None:
        with self.assertRaises(ValueError):
            CropLayout(id_w=1.5)

    def test_rejects_region_past_edge(self) -> None:
        with self.assertRaises(ValueError):
            CropLayout(timer_x=0.7, timer_w=0.4)

    def test_rejects_overlapping_regions(self) -> None:
        with self.assertRaises(ValueError):
            CropLayout(id_w=0.7, timer_x=0.63)
        with self.assertRaises(ValueError):
            CropLayout(timer_x=0.0, timer_w=0.5, id_x=0.4, id_w=0.5)

    def test_rejects_zero_width_column(self) -> None:
        with self.assertRaises(ValueError):
            CropLayout(id_w=0.0)
        with self.assertRaises(ValueError):
            CropLayout(h=0.0)

    def test_region_validate(self) -> None:
        self.assertEqual(Region(0, 0, 10, 10).validate(10, 10).box, (0, 0, 10, 10))


if __name__ == "__main__":
    unittest.main()
