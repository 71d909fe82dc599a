from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Literal, Mapping, Sequence

from chartcore.compute import SeriesDomainsAndData
from chartcore.dimensions import Dimensions, compute_chart_dimensions
from chartcore.domains import XDomain, YDomain
from chartcore.scales import Scale, compute_x_scale, compute_y_scales
from chartcore.series import count_clustered_series
from chartcore.specs import AxisSpec, Position, is_rotated, is_vertical, resolve_tick_format
from chartcore.text_measure import MeasurerFactory, PillowTextMeasurer, TextMeasurer, measurement_scope
from chartcore.theme import DEFAULT_THEME, AxisStyle, ChartConfig, LegendStyle, Theme

LOGGER = logging.getLogger(__name__)

AxisRole = Literal["x", "y"]


@dataclass(frozen=True)
class AxisTick:
    value: Any
    label: str
    position: float


@dataclass(frozen=True)
class AxisTicksDimensions:
    tick_values: tuple[Any, ...]
    tick_labels: tuple[str, ...]
    max_label_width: float
    max_label_height: float

    @property
    def tick_count(self) -> int:
        return len(self.tick_values)


@dataclass(frozen=True)
class AxisPosition:
    dimensions: Dimensions
    top_increment: float = 0.0
    bottom_increment: float = 0.0
    left_increment: float = 0.0
    right_increment: float = 0.0


@dataclass(frozen=True)
class AxisTicksPositions:
    axis_positions: dict[str, Dimensions]
    axis_ticks: dict[str, tuple[AxisTick, ...]]
    axis_visible_ticks: dict[str, tuple[AxisTick, ...]]


@dataclass(frozen=True)
class AxisLayout:
    chart_dimensions: Dimensions
    axis_ticks_dimensions: dict[str, AxisTicksDimensions]
    axis_positions: dict[str, Dimensions]
    axis_ticks: dict[str, tuple[AxisTick, ...]]
    axis_visible_ticks: dict[str, tuple[AxisTick, ...]]


def get_axis_domain_role(position: Position, rotation: int) -> AxisRole:
    # A vertical axis shows Y values unless the chart is turned on its side.
    return "y" if is_vertical(position) != is_rotated(rotation) else "x"


def get_min_max_range(position: Position, rotation: int, chart_dimensions: Dimensions) -> tuple[float, float]:
    width = chart_dimensions.width
    height = chart_dimensions.height
    if is_vertical(position):
        if rotation in (90, 180):
            return (0.0, height)
        return (height, 0.0)
    if rotation in (-90, 180):
        return (width, 0.0)
    return (0.0, width)


def get_scale_for_axis_spec(
    axis_spec: AxisSpec,
    x_domain: XDomain,
    y_domains: Sequence[YDomain],
    total_group_count: int,
    rotation: int = 0,
    min_range: float = 0.0,
    max_range: float = 1.0,
    bars_padding: float = 0.0,
) -> Scale | None:
    if get_axis_domain_role(axis_spec.position, rotation) == "y":
        return compute_y_scales(y_domains, min_range, max_range).get(axis_spec.group_id)
    return compute_x_scale(x_domain, total_group_count, min_range, max_range, bars_padding)


def compute_axis_ticks_dimensions(
    axis_spec: AxisSpec,
    x_domain: XDomain,
    y_domains: Sequence[YDomain],
    total_group_count: int,
    measurer: TextMeasurer,
    rotation: int = 0,
    axis_style: AxisStyle | None = None,
    bars_padding: float = 0.0,
) -> AxisTicksDimensions | None:
    if axis_spec.hide:
        return None
    scale = get_scale_for_axis_spec(
        axis_spec, x_domain, y_domains, total_group_count, rotation, bars_padding=bars_padding
    )
    if scale is None:
        LOGGER.warning("axis %s: no scale for group %s", axis_spec.id, axis_spec.group_id)
        return None

    style = axis_style or AxisStyle()
    tick_values = tuple(scale.ticks())
    tick_format = resolve_tick_format(axis_spec.tick_format, scale.type)
    tick_labels = tuple(tick_format(value) for value in tick_values)
    max_width = 0.0
    max_height = 0.0
    for label in tick_labels:
        bbox = measurer.measure_text(label, style.tick_font_size_px, style.tick_font_family)
        max_width = max(max_width, bbox.width)
        max_height = max(max_height, bbox.height)
    return AxisTicksDimensions(
        tick_values=tick_values,
        tick_labels=tick_labels,
        max_label_width=max_width,
        max_label_height=max_height,
    )


def get_available_ticks(axis_spec: AxisSpec, scale: Scale, total_group_count: int) -> list[AxisTick]:
    offset = scale.bandwidth * max(total_group_count, 1) / 2.0
    tick_format = resolve_tick_format(axis_spec.tick_format, scale.type)
    ticks: list[AxisTick] = []
    for value in scale.ticks():
        position = scale.scale(value)
        if position is None:
            continue
        ticks.append(AxisTick(value=value, label=tick_format(value), position=position + offset))
    return ticks


def get_visible_ticks(
    ticks: Sequence[AxisTick],
    axis_spec: AxisSpec,
    axis_dim: AxisTicksDimensions,
) -> list[AxisTick]:
    """Drop ticks whose labels would collide.

    Each label needs half its measured extent on both sides of its tick. The
    first tick always stays; the last one stays whenever it clears the first,
    even if that costs an interior tick.
    """
    ordered = sorted(ticks, key=lambda tick: tick.position)
    if not ordered:
        return []
    size = axis_dim.max_label_height if is_vertical(axis_spec.position) else axis_dim.max_label_width
    required = size / 2.0

    first = ordered[0]
    last = ordered[-1]
    keep_last = len(ordered) > 1 and last.position - required >= first.position + required
    limit = last.position - required if keep_last else float("inf")

    kept = {0}
    occupied = first.position + required
    for index in range(1, len(ordered) - 1 if keep_last else len(ordered)):
        position = ordered[index].position
        if position - required >= occupied and position + required <= limit:
            kept.add(index)
            occupied = position + required
    if keep_last:
        kept.add(len(ordered) - 1)

    visible: list[AxisTick] = []
    for index, tick in enumerate(ordered):
        if index in kept or axis_spec.show_overlapping_labels:
            visible.append(tick)
        elif axis_spec.show_overlapping_ticks:
            visible.append(AxisTick(value=tick.value, label="", position=tick.position))
    return visible


def get_axis_position(
    chart_dimensions: Dimensions,
    chart_config: ChartConfig,
    axis_spec: AxisSpec,
    axis_dim: AxisTicksDimensions,
    cum_top: float = 0.0,
    cum_bottom: float = 0.0,
    cum_left: float = 0.0,
    cum_right: float = 0.0,
) -> AxisPosition:
    """Rectangle of one axis, stacked outward from the plot on its side.

    `cum_*` is the space already taken on each side, from the container edge
    for top/left and from the plot edge for bottom/right.
    """
    chart = chart_dimensions
    margins = chart_config.margins
    paddings = chart_config.paddings
    tick_space = max(0.0, axis_spec.tick_size) + max(0.0, axis_spec.tick_padding)

    if is_vertical(axis_spec.position):
        width = axis_dim.max_label_width + tick_space
        if axis_spec.position == Position.LEFT:
            left = max(0.0, margins.left) + cum_left
            dims = Dimensions(width=width, height=chart.height, top=chart.top, left=left)
            return AxisPosition(dimensions=dims, left_increment=width)
        left = chart.left + chart.width + max(0.0, paddings.right) + cum_right
        dims = Dimensions(width=width, height=chart.height, top=chart.top, left=left)
        return AxisPosition(dimensions=dims, right_increment=width)

    height = axis_dim.max_label_height + tick_space
    if axis_spec.position == Position.TOP:
        top = max(0.0, margins.top) + cum_top
        dims = Dimensions(width=chart.width, height=height, top=top, left=chart.left)
        return AxisPosition(dimensions=dims, top_increment=height)
    top = chart.top + chart.height + max(0.0, paddings.bottom) + cum_bottom
    dims = Dimensions(width=chart.width, height=height, top=top, left=chart.left)
    return AxisPosition(dimensions=dims, bottom_increment=height)


def get_axis_ticks_positions(
    chart_dimensions: Dimensions,
    chart_config: ChartConfig,
    rotation: int,
    legend_style: LegendStyle,
    show_legend: bool,
    axis_specs: Mapping[str, AxisSpec],
    axis_dimensions: Mapping[str, AxisTicksDimensions],
    x_domain: XDomain,
    y_domains: Sequence[YDomain],
    total_group_count: int,
    legend_position: Position | None = None,
    bars_padding: float = 0.0,
) -> AxisTicksPositions:
    cum_top = cum_bottom = cum_left = cum_right = 0.0
    if show_legend and legend_position == Position.LEFT:
        cum_left += max(0.0, legend_style.vertical_width)
    elif show_legend and legend_position == Position.TOP:
        cum_top += max(0.0, legend_style.horizontal_height)

    positions: dict[str, Dimensions] = {}
    all_ticks: dict[str, tuple[AxisTick, ...]] = {}
    visible_ticks: dict[str, tuple[AxisTick, ...]] = {}
    for axis_id, axis_dim in axis_dimensions.items():
        axis_spec = axis_specs.get(axis_id)
        if axis_spec is None:
            continue
        min_range, max_range = get_min_max_range(axis_spec.position, rotation, chart_dimensions)
        scale = get_scale_for_axis_spec(
            axis_spec, x_domain, y_domains, total_group_count, rotation, min_range, max_range, bars_padding
        )
        if scale is None:
            LOGGER.warning("axis %s: no scale for group %s", axis_id, axis_spec.group_id)
            continue
        ticks = get_available_ticks(axis_spec, scale, total_group_count)
        position = get_axis_position(
            chart_dimensions, chart_config, axis_spec, axis_dim, cum_top, cum_bottom, cum_left, cum_right
        )
        cum_top += position.top_increment
        cum_bottom += position.bottom_increment
        cum_left += position.left_increment
        cum_right += position.right_increment

        positions[axis_id] = position.dimensions
        all_ticks[axis_id] = tuple(ticks)
        visible_ticks[axis_id] = tuple(get_visible_ticks(ticks, axis_spec, axis_dim))
    return AxisTicksPositions(axis_positions=positions, axis_ticks=all_ticks, axis_visible_ticks=visible_ticks)


def compute_axis_ticks_dimensions_map(
    axis_specs: Mapping[str, AxisSpec],
    x_domain: XDomain,
    y_domains: Sequence[YDomain],
    total_group_count: int,
    measurer_factory: MeasurerFactory = PillowTextMeasurer,
    rotation: int = 0,
    axis_style: AxisStyle | None = None,
    bars_padding: float = 0.0,
) -> dict[str, AxisTicksDimensions]:
    out: dict[str, AxisTicksDimensions] = {}
    with measurement_scope(measurer_factory) as measurer:
        for axis_id, axis_spec in axis_specs.items():
            dims = compute_axis_ticks_dimensions(
                axis_spec,
                x_domain,
                y_domains,
                total_group_count,
                measurer,
                rotation,
                axis_style,
                bars_padding,
            )
            if dims is not None:
                out[axis_id] = dims
    return out


def compute_axis_layout(
    axis_specs: Mapping[str, AxisSpec],
    domains: SeriesDomainsAndData,
    parent: Dimensions,
    theme: Theme = DEFAULT_THEME,
    rotation: int = 0,
    legend_visible: bool = False,
    legend_position: Position | None = None,
    measurer_factory: MeasurerFactory = PillowTextMeasurer,
) -> AxisLayout:
    formatted = domains.formatted_data_series
    total_group_count = count_clustered_series(formatted.stacked, formatted.non_stacked).total_group_count
    bars_padding = theme.scales.bars_padding

    ticks_dimensions = compute_axis_ticks_dimensions_map(
        axis_specs,
        domains.x_domain,
        domains.y_domain,
        total_group_count,
        measurer_factory,
        rotation,
        theme.axes,
        bars_padding,
    )
    chart_dimensions = compute_chart_dimensions(
        parent,
        theme.chart.margins,
        theme.chart.paddings,
        theme.legend,
        ticks_dimensions,
        axis_specs,
        legend_visible,
        legend_position,
    )
    positions = get_axis_ticks_positions(
        chart_dimensions,
        theme.chart,
        rotation,
        theme.legend,
        legend_visible,
        axis_specs,
        ticks_dimensions,
        domains.x_domain,
        domains.y_domain,
        total_group_count,
        legend_position,
        bars_padding,
    )
    return AxisLayout(
        chart_dimensions=chart_dimensions,
        axis_ticks_dimensions=ticks_dimensions,
        axis_positions=positions.axis_positions,
        axis_ticks=positions.axis_ticks,
        axis_visible_ticks=positions.axis_visible_ticks,
    )
