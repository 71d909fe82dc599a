from __future__ import annotations

import unittest

from chartcore.domains import XDomain, YDomain
from chartcore.scales import ContinuousScale, OrdinalScale, compute_x_scale, compute_y_scales
from chartcore.specs import ScaleType
from chartcore.ticks import default_tick_format, generate_nice_ticks, time_tick_format


class ContinuousScaleTests(unittest.TestCase):
    def test_endpoints_map_exactly_to_range(self) -> None:
        scale = ContinuousScale(type=ScaleType.LINEAR, domain=(0.0, 9.0), range=(300.0, 0.0))
        self.assertEqual(scale.scale(0), 300.0)
        self.assertEqual(scale.scale(9), 0.0)
        self.assertAlmostEqual(scale.scale(3), 200.0)

    def test_degenerate_domain_maps_to_midpoint(self) -> None:
        scale = ContinuousScale(type=ScaleType.LINEAR, domain=(5.0, 5.0), range=(0.0, 100.0))
        self.assertEqual(scale.scale(5), 50.0)
        self.assertEqual(scale.scale(123), 50.0)
        empty = ContinuousScale(type=ScaleType.LINEAR, domain=(), range=(0.0, 10.0))
        self.assertEqual(empty.scale(1), 5.0)

    def test_invert_round_trips(self) -> None:
        scale = ContinuousScale(type=ScaleType.LINEAR, domain=(-10.0, 10.0), range=(0.0, 200.0))
        self.assertAlmostEqual(scale.invert(scale.scale(2.5)), 2.5)

    def test_invert_without_log_inverse_returns_none(self) -> None:
        scale = ContinuousScale(type=ScaleType.LOG, domain=(-1.0, 10.0), range=(0.0, 100.0))
        self.assertIsNone(scale.invert(50.0))
        flat = ContinuousScale(type=ScaleType.LINEAR, domain=(5.0, 5.0), range=(0.0, 100.0))
        self.assertEqual(flat.invert(30.0), 5.0)

    def test_log_scale_rejects_non_positive(self) -> None:
        scale = ContinuousScale(type=ScaleType.LOG, domain=(1.0, 100.0), range=(0.0, 100.0))
        self.assertAlmostEqual(scale.scale(10), 50.0)
        self.assertIsNone(scale.scale(0))
        self.assertIsNone(scale.scale(-3))
        self.assertAlmostEqual(scale.invert(50.0), 10.0)
        self.assertEqual(scale.ticks(), [1.0, 10.0, 100.0])

    def test_sqrt_scale(self) -> None:
        scale = ContinuousScale(type=ScaleType.SQRT, domain=(0.0, 100.0), range=(0.0, 10.0))
        self.assertAlmostEqual(scale.scale(25), 5.0)
        self.assertAlmostEqual(scale.invert(5.0), 25.0)

    def test_non_numeric_input_returns_none(self) -> None:
        scale = ContinuousScale(type=ScaleType.LINEAR, domain=(0.0, 1.0), range=(0.0, 1.0))
        self.assertIsNone(scale.scale("abc"))
        self.assertIsNone(scale.scale(None))

    def test_ticks_stay_inside_domain(self) -> None:
        scale = ContinuousScale(type=ScaleType.LINEAR, domain=(0.0, 9.0), range=(0.0, 1.0))
        ticks = scale.ticks()
        self.assertEqual(ticks[0], 0.0)
        self.assertEqual(ticks[-1], 9.0)
        self.assertTrue(all(0.0 <= t <= 9.0 for t in ticks))

    def test_ordinal_scale_type_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ContinuousScale(type=ScaleType.ORDINAL, domain=(0.0, 1.0), range=(0.0, 1.0))


class OrdinalScaleTests(unittest.TestCase):
    def test_bands_without_padding(self) -> None:
        scale = OrdinalScale(domain=("a", "b", "c"), range=(0.0, 300.0))
        self.assertEqual(scale.step, 100.0)
        self.assertEqual(scale.bandwidth, 100.0)
        self.assertEqual(scale.scale("b"), 100.0)
        self.assertIsNone(scale.scale("zzz"))
        self.assertIsNone(scale.scale(["unhashable"]))
        self.assertEqual(scale.invert(150.0), "b")
        self.assertIsNone(scale.invert(-1.0))
        self.assertEqual(scale.ticks(), ["a", "b", "c"])

    def test_bandwidth_is_divided_among_clustered_groups(self) -> None:
        scale = OrdinalScale(domain=("a", "b", "c"), range=(0.0, 300.0), group_count=2)
        self.assertEqual(scale.bandwidth, 50.0)

    def test_padding_centers_bands(self) -> None:
        scale = OrdinalScale(domain=("a", "b"), range=(0.0, 100.0), padding=0.5)
        # step = 100 / (2 - 0.5 + 1) = 40, band = 20, outer offset = (100 - 40 * 1.5) / 2
        self.assertAlmostEqual(scale.step, 40.0)
        self.assertAlmostEqual(scale.band_width, 20.0)
        self.assertAlmostEqual(scale.scale("a"), 20.0)
        self.assertAlmostEqual(scale.scale("b"), 60.0)

    def test_reversed_range(self) -> None:
        scale = OrdinalScale(domain=("a", "b"), range=(200.0, 0.0))
        self.assertEqual(scale.scale("a"), 100.0)
        self.assertEqual(scale.scale("b"), 0.0)


class ScaleBuilderTests(unittest.TestCase):
    def test_ordinal_x_scale_uses_group_count_and_padding(self) -> None:
        domain = XDomain(scale_type=ScaleType.ORDINAL, is_band_scale=True, domain=("a", "b", "c"), min_interval=1.0)
        scale = compute_x_scale(domain, 2, 0.0, 300.0, bars_padding=0.0)
        self.assertIsInstance(scale, OrdinalScale)
        self.assertEqual(scale.bandwidth, 50.0)

    def test_continuous_band_scale_extends_domain_by_interval(self) -> None:
        domain = XDomain(scale_type=ScaleType.LINEAR, is_band_scale=True, domain=(0.0, 3.0), min_interval=1.0)
        scale = compute_x_scale(domain, 2, 0.0, 400.0)
        self.assertEqual(scale.domain, (0.0, 4.0))
        self.assertAlmostEqual(scale.bandwidth, 50.0)

    def test_continuous_scale_without_bars_has_no_bandwidth(self) -> None:
        domain = XDomain(scale_type=ScaleType.LINEAR, is_band_scale=False, domain=(0.0, 3.0), min_interval=1.0)
        scale = compute_x_scale(domain, 0, 0.0, 300.0)
        self.assertEqual(scale.bandwidth, 0.0)
        self.assertEqual(scale.scale(3.0), 300.0)

    def test_y_scales_are_keyed_by_group(self) -> None:
        scales = compute_y_scales(
            [
                YDomain(group_id="a", scale_type=ScaleType.LINEAR, domain=(0.0, 10.0)),
                YDomain(group_id="b", scale_type=ScaleType.LOG, domain=(1.0, 10.0)),
            ],
            100.0,
            0.0,
        )
        self.assertEqual(set(scales), {"a", "b"})
        self.assertEqual(scales["a"].scale(10.0), 0.0)
        self.assertEqual(scales["b"].scale(1.0), 100.0)


class TickHelperTests(unittest.TestCase):
    def test_nice_ticks(self) -> None:
        ticks = generate_nice_ticks(0.0, 100.0, 6)
        self.assertEqual(ticks.tolist(), [0.0, 20.0, 40.0, 60.0, 80.0, 100.0])

    def test_default_formatter(self) -> None:
        self.assertEqual(default_tick_format(30.0), "30")
        self.assertEqual(default_tick_format(0.25), "0.25")
        self.assertEqual(default_tick_format("label"), "label")
        self.assertEqual(default_tick_format(True), "True")

    def test_time_formatter_labels_epoch_milliseconds_as_dates(self) -> None:
        day = 1_699_920_000_000
        self.assertEqual(time_tick_format(float(day)), "2023-11-14")
        self.assertEqual(time_tick_format(day + 3_600_000), "2023-11-14 01:00")
        self.assertEqual(time_tick_format(day + 1_000), "2023-11-14 00:00:01")
        self.assertEqual(time_tick_format(day + 1), "2023-11-14 00:00:00.001")
        self.assertEqual(time_tick_format("label"), "label")


if __name__ == "__main__":
    unittest.main()
