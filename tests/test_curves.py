from __future__ import annotations

import unittest

from chartcore.curves import build_area_path, build_line_path
from chartcore.specs import CurveType


class LinePathTests(unittest.TestCase):
    def test_linear(self) -> None:
        self.assertEqual(build_line_path([(0, 0), (10, 5), (20, 2.5)], CurveType.LINEAR), "M0,0L10,5L20,2.5")

    def test_single_point_is_closed_move(self) -> None:
        self.assertEqual(build_line_path([(1, 2)], CurveType.MONOTONE_X), "M1,2Z")

    def test_empty_run(self) -> None:
        self.assertEqual(build_line_path([], CurveType.LINEAR), "")

    def test_step_variants(self) -> None:
        points = [(0, 0), (10, 5), (20, 1)]
        self.assertEqual(build_line_path(points, CurveType.STEP), "M0,0L5,0L5,5L15,5L15,1L20,1")
        self.assertEqual(build_line_path(points, CurveType.STEP_BEFORE), "M0,0L0,5L10,5L10,1L20,1")
        self.assertEqual(build_line_path(points, CurveType.STEP_AFTER), "M0,0L10,0L10,5L20,5L20,1")

    def test_monotone_two_points_is_a_segment(self) -> None:
        self.assertEqual(build_line_path([(0, 0), (10, 5)], CurveType.MONOTONE_X), "M0,0L10,5")

    def test_monotone_on_straight_line(self) -> None:
        path = build_line_path([(0, 0), (1, 1), (2, 2)], CurveType.MONOTONE_X)
        self.assertEqual(path, "M0,0C0.333333,0.333333,0.666667,0.666667,1,1C1.333333,1.333333,1.666667,1.666667,2,2")

    def test_monotone_does_not_overshoot_flat_segment(self) -> None:
        path = build_line_path([(0, 0), (1, 1), (2, 1)], CurveType.MONOTONE_X)
        self.assertTrue(path.endswith("C1.333333,1,1.666667,1,2,1"))

    def test_basis(self) -> None:
        path = build_line_path([(0, 0), (12, 12), (24, 0)], CurveType.BASIS)
        self.assertEqual(path, "M0,0L2,2C4,4,8,8,12,8C16,8,20,4,22,2L24,0")


class AreaPathTests(unittest.TestCase):
    def test_linear_area_closes_over_reversed_baseline(self) -> None:
        path = build_area_path([(0, 1), (10, 2)], [(0, 5), (10, 5)], CurveType.LINEAR)
        self.assertEqual(path, "M0,1L10,2L10,5L0,5Z")

    def test_single_point_area(self) -> None:
        self.assertEqual(build_area_path([(3, 1)], [(3, 4)]), "M3,1L3,4Z")

    def test_mismatched_lines_raise(self) -> None:
        with self.assertRaises(ValueError):
            build_area_path([(0, 0), (1, 1)], [(0, 0)])


if __name__ == "__main__":
    unittest.main()
