from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from chartcore.compute import get_axes_spec_for_spec_id
from chartcore.series import DataSeriesColorsValues
from chartcore.specs import AxisSpec, SeriesSpec


@dataclass(frozen=True)
class LegendItem:
    key: str
    label: str
    color: str
    spec_id: str
    group_id: str
    color_values: tuple[Any, ...] = ()
    y_axis_id: str | None = None


def get_series_color_label(
    color_values: DataSeriesColorsValues,
    has_single_series: bool,
    spec: SeriesSpec | None,
) -> str | None:
    values = color_values.color_values
    if has_single_series or not values or values[0] is None or values[0] == "":
        if spec is None:
            return None
        return spec.name or spec.id
    return " - ".join(f"{value}" for value in values)


def compute_legend(
    series_colors: Mapping[str, DataSeriesColorsValues],
    color_map: Mapping[str, str],
    specs: Mapping[str, SeriesSpec],
    axis_specs: Mapping[str, AxisSpec],
    default_color: str,
) -> list[LegendItem]:
    has_single_series = len(series_colors) == 1
    items: list[LegendItem] = []
    for key, values in series_colors.items():
        spec = specs.get(values.spec_id)
        if spec is None:
            continue
        label = get_series_color_label(values, has_single_series, spec)
        if not label:
            continue
        axes = get_axes_spec_for_spec_id(axis_specs, spec.group_id)
        items.append(
            LegendItem(
                key=key,
                label=label,
                color=color_map.get(key) or default_color,
                spec_id=spec.id,
                group_id=spec.group_id,
                color_values=values.color_values,
                y_axis_id=axes.y_axis.id if axes.y_axis is not None else None,
            )
        )
    return items
