from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping, Sequence, assert_never

from chartcore.dimensions import Dimensions
from chartcore.domains import XDomain, YDomain, merge_x_domain, merge_y_domain
from chartcore.rendering import (
    AreaGeometry,
    BarGeometry,
    LineGeometry,
    PointGeometry,
    render_area,
    render_bars,
    render_line,
    render_points,
)
from chartcore.scales import Scale, compute_x_scale, compute_y_scales
from chartcore.series import (
    DataSeries,
    DataSeriesColorsValues,
    FormattedDataSeriesGroups,
    RawDataSeries,
    count_clustered_series,
    get_formatted_data_series,
    get_split_series,
)
from chartcore.specs import AxisSpec, SeriesSpec, SeriesType, is_rotated, is_vertical
from chartcore.theme import DEFAULT_THEME, Theme

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesDomainsAndData:
    x_domain: XDomain
    y_domain: tuple[YDomain, ...]
    split_data_series: dict[str, tuple[RawDataSeries, ...]]
    formatted_data_series: FormattedDataSeriesGroups
    series_colors: dict[str, DataSeriesColorsValues]


@dataclass(frozen=True)
class SeriesGeometries:
    points: tuple[PointGeometry, ...] = ()
    bars: tuple[BarGeometry, ...] = ()
    areas: tuple[AreaGeometry, ...] = ()
    lines: tuple[LineGeometry, ...] = ()


@dataclass(frozen=True)
class AxesForGroup:
    x_axis: AxisSpec | None
    y_axis: AxisSpec | None


def compute_series_domains(specs: Mapping[str, SeriesSpec], dataset: Any = None) -> SeriesDomainsAndData:
    split = get_split_series(specs, dataset)
    spec_list = list(specs.values())
    return SeriesDomainsAndData(
        x_domain=merge_x_domain(spec_list, split.x_values),
        y_domain=tuple(merge_y_domain(split.split_series, spec_list)),
        split_data_series=split.split_series,
        formatted_data_series=get_formatted_data_series(specs, split.split_series),
        series_colors=split.series_colors,
    )


def compute_series_geometries(
    specs: Mapping[str, SeriesSpec],
    x_domain: XDomain,
    y_domain: Sequence[YDomain],
    formatted: FormattedDataSeriesGroups,
    color_map: Mapping[str, str],
    theme: Theme = DEFAULT_THEME,
    chart_dimensions: Dimensions | None = None,
    rotation: int = 0,
) -> SeriesGeometries:
    dims = chart_dimensions or Dimensions(width=0.0, height=0.0, top=0.0, left=0.0)
    width, height = (dims.height, dims.width) if is_rotated(rotation) else (dims.width, dims.height)
    counts = count_clustered_series(formatted.stacked, formatted.non_stacked)

    x_scale = compute_x_scale(x_domain, counts.total_group_count, 0.0, width, theme.scales.bars_padding)
    y_scales = compute_y_scales(y_domain, height, 0.0)

    points: list[PointGeometry] = []
    bars: list[BarGeometry] = []
    areas: list[AreaGeometry] = []
    lines: list[LineGeometry] = []

    def collect(geometries: SeriesGeometries) -> None:
        points.extend(geometries.points)
        bars.extend(geometries.bars)
        areas.extend(geometries.areas)
        lines.extend(geometries.lines)

    order_index = 0
    for group in formatted.stacked:
        y_scale = y_scales.get(group.group_id)
        if y_scale is None:
            LOGGER.warning("no y scale for stacked group %s; skipping its series", group.group_id)
            continue
        collect(
            render_geometries(
                order_index,
                counts.total_group_count,
                True,
                group.data_series,
                x_scale,
                y_scale,
                specs,
                color_map,
                theme,
            )
        )
        if group.counts.bar_series > 0:
            order_index += 1

    bar_offset = counts.stacked_group_count
    for group in formatted.non_stacked:
        y_scale = y_scales.get(group.group_id)
        if y_scale is None:
            LOGGER.warning("no y scale for group %s; skipping its series", group.group_id)
            continue
        collect(
            render_geometries(
                bar_offset,
                counts.total_group_count,
                False,
                group.data_series,
                x_scale,
                y_scale,
                specs,
                color_map,
                theme,
            )
        )
        bar_offset += group.counts.bar_series

    return SeriesGeometries(points=tuple(points), bars=tuple(bars), areas=tuple(areas), lines=tuple(lines))


def render_geometries(
    index_offset: int,
    clustered_count: int,
    is_stacked: bool,
    data_series: Sequence[DataSeries],
    x_scale: Scale,
    y_scale: Scale,
    specs: Mapping[str, SeriesSpec],
    color_map: Mapping[str, str],
    theme: Theme = DEFAULT_THEME,
) -> SeriesGeometries:
    points: list[PointGeometry] = []
    bars: list[BarGeometry] = []
    areas: list[AreaGeometry] = []
    lines: list[LineGeometry] = []
    shift = x_scale.bandwidth * max(clustered_count, 1) / 2.0
    radius = theme.point.radius
    bar_index = 0

    for ds in data_series:
        spec = specs.get(ds.spec_id)
        if spec is None:
            continue
        color = color_map.get(ds.series_color_key) or theme.colors.default_viz_color
        match spec.series_type:
            case SeriesType.POINT:
                points.extend(render_points(shift, ds.data, x_scale, y_scale, color, ds.spec_id, ds.key, radius))
            case SeriesType.BAR:
                order_index = index_offset if is_stacked else index_offset + bar_index
                bar_index += 1
                bars.extend(render_bars(order_index, ds.data, x_scale, y_scale, color, ds.spec_id, ds.key))
            case SeriesType.LINE:
                line = render_line(shift, ds.data, x_scale, y_scale, color, spec.curve, ds.spec_id, ds.key, radius)
                if line is not None:
                    lines.append(line)
            case SeriesType.AREA:
                area = render_area(shift, ds.data, x_scale, y_scale, color, spec.curve, ds.spec_id, ds.key, radius)
                if area is not None:
                    areas.append(area)
            case _:
                assert_never(spec.series_type)

    return SeriesGeometries(points=tuple(points), bars=tuple(bars), areas=tuple(areas), lines=tuple(lines))


def get_axes_spec_for_spec_id(axis_specs: Mapping[str, AxisSpec], group_id: str) -> AxesForGroup:
    x_axis: AxisSpec | None = None
    y_axis: AxisSpec | None = None
    for axis_spec in axis_specs.values():
        if axis_spec.group_id != group_id:
            continue
        if is_vertical(axis_spec.position):
            y_axis = axis_spec
        else:
            x_axis = axis_spec
    return AxesForGroup(x_axis=x_axis, y_axis=y_axis)
