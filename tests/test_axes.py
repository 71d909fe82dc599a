from __future__ import annotations

import unittest

from chartcore.axes import (
    AxisTick,
    AxisTicksDimensions,
    compute_axis_layout,
    compute_axis_ticks_dimensions,
    compute_axis_ticks_dimensions_map,
    get_available_ticks,
    get_axis_domain_role,
    get_min_max_range,
    get_scale_for_axis_spec,
    get_visible_ticks,
)
from chartcore.compute import compute_series_domains
from chartcore.dimensions import Dimensions
from chartcore.domains import XDomain, YDomain
from chartcore.scales import ContinuousScale, OrdinalScale
from chartcore.specs import AxisSpec, Position, ScaleType, SeriesSpec
from chartcore.text_measure import FixedWidthTextMeasurer
from chartcore.theme import AxisStyle


X_DOMAIN = XDomain(scale_type=ScaleType.ORDINAL, is_band_scale=True, domain=("a", "bb", "ccc"), min_interval=1.0)
Y_DOMAINS = (YDomain(group_id="__global__", scale_type=ScaleType.LINEAR, domain=(0.0, 9.0)),)
ROWS = [{"x": "a", "y": 3}, {"x": "b", "y": 9}, {"x": "c", "y": 5}]


def _ticks(positions, label="xxxxx"):
    return [AxisTick(value=i, label=f"{label}{i}", position=float(p)) for i, p in enumerate(positions)]


def _dims(width=30.0, height=12.0):
    return AxisTicksDimensions(tick_values=(), tick_labels=(), max_label_width=width, max_label_height=height)


class RecordingMeasurer(FixedWidthTextMeasurer):
    created: list["RecordingMeasurer"] = []

    def __init__(self) -> None:
        super().__init__(char_width=6.0, line_height_ratio=1.2)
        RecordingMeasurer.created.append(self)


class AxisRoleTests(unittest.TestCase):
    def test_domain_role_is_vertical_xor_rotated(self) -> None:
        self.assertEqual(get_axis_domain_role(Position.LEFT, 0), "y")
        self.assertEqual(get_axis_domain_role(Position.BOTTOM, 0), "x")
        self.assertEqual(get_axis_domain_role(Position.LEFT, 90), "x")
        self.assertEqual(get_axis_domain_role(Position.TOP, -90), "y")
        self.assertEqual(get_axis_domain_role(Position.RIGHT, 180), "y")

    def test_min_max_range_table(self) -> None:
        dims = Dimensions(width=200.0, height=100.0)
        for rotation, expected in ((0, (0.0, 200.0)), (90, (0.0, 200.0)), (-90, (200.0, 0.0)), (180, (200.0, 0.0))):
            self.assertEqual(get_min_max_range(Position.BOTTOM, rotation, dims), expected)
            self.assertEqual(get_min_max_range(Position.TOP, rotation, dims), expected)
        for rotation, expected in ((0, (100.0, 0.0)), (90, (0.0, 100.0)), (-90, (100.0, 0.0)), (180, (0.0, 100.0))):
            self.assertEqual(get_min_max_range(Position.LEFT, rotation, dims), expected)
            self.assertEqual(get_min_max_range(Position.RIGHT, rotation, dims), expected)

    def test_scale_lookup_for_missing_group_is_none(self) -> None:
        axis = AxisSpec(id="y", group_id="missing", position="left")
        self.assertIsNone(get_scale_for_axis_spec(axis, X_DOMAIN, Y_DOMAINS, 1))


class TicksDimensionsTests(unittest.TestCase):
    def test_labels_are_measured_with_injected_measurer(self) -> None:
        axis = AxisSpec(id="x", position="bottom")
        dims = compute_axis_ticks_dimensions(
            axis, X_DOMAIN, Y_DOMAINS, 1, FixedWidthTextMeasurer(char_width=6.0), 0, AxisStyle(tick_font_size_px=10.0)
        )
        self.assertEqual(dims.tick_labels, ("a", "bb", "ccc"))
        self.assertEqual(dims.max_label_width, 18.0)
        self.assertEqual(dims.max_label_height, 12.0)
        self.assertEqual(dims.tick_count, 3)

    def test_custom_tick_format_is_used(self) -> None:
        axis = AxisSpec(id="y", position="left", tick_format=lambda v: f"{v:.0f}%")
        dims = compute_axis_ticks_dimensions(axis, X_DOMAIN, Y_DOMAINS, 1, FixedWidthTextMeasurer(char_width=6.0))
        self.assertEqual(dims.tick_labels[0], "0%")
        self.assertEqual(dims.tick_labels[-1], "9%")
        self.assertEqual(dims.max_label_width, 12.0)

    def test_hidden_axis_has_no_dimensions(self) -> None:
        axis = AxisSpec(id="x", position="bottom", hide=True)
        measurer = FixedWidthTextMeasurer()
        self.assertIsNone(compute_axis_ticks_dimensions(axis, X_DOMAIN, Y_DOMAINS, 1, measurer))

    def test_map_skips_hidden_and_unscaled_axes_and_releases_measurer(self) -> None:
        RecordingMeasurer.created.clear()
        axes = {
            "x": AxisSpec(id="x", position="bottom"),
            "hidden": AxisSpec(id="hidden", position="top", hide=True),
            "orphan": AxisSpec(id="orphan", group_id="nope", position="left"),
        }
        with self.assertLogs("chartcore.axes", level="WARNING"):
            out = compute_axis_ticks_dimensions_map(axes, X_DOMAIN, Y_DOMAINS, 1, RecordingMeasurer)
        self.assertEqual(list(out), ["x"])
        self.assertEqual(len(RecordingMeasurer.created), 1)
        self.assertTrue(RecordingMeasurer.created[0].destroyed)

    def test_measurer_is_released_on_error(self) -> None:
        RecordingMeasurer.created.clear()

        def broken(_value):
            raise RuntimeError("formatter failed")

        axes = {"x": AxisSpec(id="x", position="bottom", tick_format=broken)}
        with self.assertRaises(RuntimeError):
            compute_axis_ticks_dimensions_map(axes, X_DOMAIN, Y_DOMAINS, 1, RecordingMeasurer)
        self.assertTrue(RecordingMeasurer.created[0].destroyed)


class TickVisibilityTests(unittest.TestCase):
    def test_available_ordinal_ticks_are_band_centered(self) -> None:
        scale = OrdinalScale(domain=("a", "b"), range=(0.0, 200.0), group_count=2)
        ticks = get_available_ticks(AxisSpec(id="x", position="bottom"), scale, 2)
        self.assertEqual([(t.value, t.label, t.position) for t in ticks], [("a", "a", 50.0), ("b", "b", 150.0)])

    def test_time_axis_labels_are_dates(self) -> None:
        day = 1_699_920_000_000.0
        scale = ContinuousScale(type=ScaleType.TIME, domain=(day, day + 4 * 86_400_000), range=(0.0, 400.0))
        ticks = get_available_ticks(AxisSpec(id="x", position="bottom"), scale, 1)
        self.assertEqual(ticks[0].label, "2023-11-14 08:20")
        self.assertTrue(all(t.label.startswith("2023-11-1") for t in ticks))
        custom = get_available_ticks(AxisSpec(id="x", position="bottom", tick_format=lambda v: "t"), scale, 1)
        self.assertEqual({t.label for t in custom}, {"t"})

    def test_first_and_last_ticks_are_kept(self) -> None:
        axis = AxisSpec(id="x", position="bottom")
        visible = get_visible_ticks(_ticks(range(0, 101, 10)), axis, _dims(width=30.0))
        self.assertEqual([t.position for t in visible], [0.0, 30.0, 60.0, 100.0])

    def test_visible_labels_never_overlap(self) -> None:
        axis = AxisSpec(id="x", position="bottom")
        visible = get_visible_ticks(_ticks(range(0, 101, 7)), axis, _dims(width=22.0))
        for left, right in zip(visible, visible[1:]):
            self.assertGreaterEqual(right.position - left.position, 22.0)
        self.assertEqual(visible[0].position, 0.0)
        self.assertEqual(visible[-1].position, 98.0)

    def test_vertical_axes_use_label_height(self) -> None:
        axis = AxisSpec(id="y", position="left")
        visible = get_visible_ticks(_ticks([100, 80, 60, 40, 20, 0]), axis, _dims(width=500.0, height=30.0))
        self.assertEqual([t.position for t in visible], [0.0, 40.0, 100.0])

    def test_overlapping_ticks_lose_their_label(self) -> None:
        axis = AxisSpec(id="x", position="bottom", show_overlapping_ticks=True)
        visible = get_visible_ticks(_ticks(range(0, 101, 10)), axis, _dims(width=30.0))
        self.assertEqual(len(visible), 11)
        labelled = [t.position for t in visible if t.label]
        self.assertEqual(labelled, [0.0, 30.0, 60.0, 100.0])

    def test_overlapping_labels_keep_everything(self) -> None:
        axis = AxisSpec(id="x", position="bottom", show_overlapping_labels=True)
        visible = get_visible_ticks(_ticks(range(0, 101, 10)), axis, _dims(width=30.0))
        self.assertEqual(len(visible), 11)
        self.assertTrue(all(t.label for t in visible))

    def test_single_and_empty_tick_lists(self) -> None:
        axis = AxisSpec(id="x", position="bottom")
        self.assertEqual(get_visible_ticks([], axis, _dims()), [])
        self.assertEqual(len(get_visible_ticks(_ticks([5]), axis, _dims())), 1)


class AxisLayoutTests(unittest.TestCase):
    def setUp(self) -> None:
        self.specs = {"s": SeriesSpec(id="s", series_type="bar")}
        self.domains = compute_series_domains(self.specs, ROWS)
        self.parent = Dimensions(width=400.0, height=300.0)
        self.axes = {
            "left": AxisSpec(id="left", position="left"),
            "bottom": AxisSpec(id="bottom", position="bottom"),
        }

    def _layout(self, axes=None, **kwargs):
        return compute_axis_layout(
            self.axes if axes is None else axes,
            self.domains,
            self.parent,
            measurer_factory=lambda: FixedWidthTextMeasurer(char_width=6.0),
            **kwargs,
        )

    def test_axes_reserve_label_and_tick_space(self) -> None:
        layout = self._layout()
        # left: "0".."9" is 6px wide + 20; bottom: 12px high labels + 20; margins + paddings 20 per side.
        self.assertEqual(layout.chart_dimensions, Dimensions(width=334.0, height=228.0, top=20.0, left=46.0))
        self.assertEqual(layout.axis_positions["left"], Dimensions(width=26.0, height=228.0, top=20.0, left=10.0))
        self.assertEqual(layout.axis_positions["bottom"], Dimensions(width=334.0, height=32.0, top=258.0, left=46.0))
        self.assertEqual(len(layout.axis_ticks["bottom"]), 3)
        # Y runs bottom-up, so the highest value has the smallest position.
        left_visible = layout.axis_visible_ticks["left"]
        self.assertEqual(left_visible[0].value, 9.0)
        self.assertEqual(left_visible[-1].value, 0.0)
        self.assertEqual(left_visible[-1].position, 228.0)

    def test_hidden_axis_consumes_no_space(self) -> None:
        axes = {"hidden": AxisSpec(id="hidden", position="left", hide=True)}
        layout = self._layout(axes)
        self.assertEqual(layout.axis_ticks_dimensions, {})
        self.assertEqual(layout.axis_positions, {})
        self.assertEqual(layout.chart_dimensions, Dimensions(width=360.0, height=260.0, top=20.0, left=20.0))

    def test_side_legend_offsets_axes(self) -> None:
        layout = self._layout(legend_visible=True, legend_position=Position.LEFT)
        self.assertEqual(layout.chart_dimensions.width, 184.0)
        self.assertEqual(layout.chart_dimensions.left, 196.0)
        self.assertEqual(layout.axis_positions["left"].left, 160.0)

    def test_rotated_layout_swaps_roles(self) -> None:
        layout = self._layout(rotation=90)
        left_ticks = [t.value for t in layout.axis_ticks["left"]]
        self.assertEqual(left_ticks, ["a", "b", "c"])
        bottom_first = layout.axis_ticks["bottom"][0]
        self.assertEqual(bottom_first.value, 0.0)
        self.assertEqual(bottom_first.position, 0.0)

    def test_tiny_parent_clamps_to_zero(self) -> None:
        layout = compute_axis_layout(
            self.axes,
            self.domains,
            Dimensions(width=30.0, height=30.0),
            measurer_factory=FixedWidthTextMeasurer,
        )
        self.assertEqual(layout.chart_dimensions.width, 0.0)
        self.assertEqual(layout.chart_dimensions.height, 0.0)


if __name__ == "__main__":
    unittest.main()
