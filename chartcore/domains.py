from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from chartcore.series import RawDataSeries, format_stacked_data_series_values, parse_continuous_value
from chartcore.specs import ScaleType, SeriesSpec, SeriesType


@dataclass(frozen=True)
class XDomain:
    scale_type: ScaleType
    is_band_scale: bool
    domain: tuple[Any, ...]
    min_interval: float


@dataclass(frozen=True)
class YDomain:
    group_id: str
    scale_type: ScaleType
    domain: tuple[float, float]
    is_band_scale: bool = False


def coerce_x_scale_type(specs: Iterable[SeriesSpec]) -> ScaleType:
    types = [spec.x_scale_type for spec in specs]
    if not types:
        return ScaleType.ORDINAL
    if all(t == types[0] for t in types):
        return types[0]
    if ScaleType.ORDINAL in types:
        return ScaleType.ORDINAL
    return ScaleType.LINEAR


def coerce_y_scale_type(specs: Iterable[SeriesSpec]) -> ScaleType:
    types = [spec.y_scale_type for spec in specs]
    if types and all(t == types[0] for t in types):
        return types[0]
    return ScaleType.LINEAR


def merge_x_domain(specs: Iterable[SeriesSpec], x_values: Iterable[Any]) -> XDomain:
    specs = list(specs)
    scale_type = coerce_x_scale_type(specs)
    is_band_scale = any(spec.series_type == SeriesType.BAR for spec in specs)
    if scale_type == ScaleType.ORDINAL:
        return XDomain(
            scale_type=scale_type,
            is_band_scale=is_band_scale,
            domain=tuple(dict.fromkeys(x_values)),
            min_interval=1.0,
        )

    parsed = [parse_continuous_value(x, scale_type) for x in x_values]
    values = np.asarray([x for x in parsed if x is not None], dtype=np.float64)
    if values.size == 0:
        return XDomain(scale_type=scale_type, is_band_scale=is_band_scale, domain=(), min_interval=0.0)
    uniq = np.unique(values)
    diffs = np.diff(uniq)
    positive = diffs[diffs > 0]
    min_interval = float(np.min(positive)) if positive.size else 0.0
    return XDomain(
        scale_type=scale_type,
        is_band_scale=is_band_scale,
        domain=(float(uniq[0]), float(uniq[-1])),
        min_interval=min_interval,
    )


def merge_y_domain(
    split_series: Mapping[str, Sequence[RawDataSeries]],
    specs: Iterable[SeriesSpec],
) -> list[YDomain]:
    groups: dict[str, list[SeriesSpec]] = {}
    for spec in specs:
        groups.setdefault(spec.group_id, []).append(spec)

    out: list[YDomain] = []
    for group_id, group_specs in groups.items():
        scale_type = coerce_y_scale_type(group_specs)
        stacked = [raw for spec in group_specs if spec.stacked for raw in split_series.get(spec.id, ())]
        non_stacked = [raw for spec in group_specs if not spec.stacked for raw in split_series.get(spec.id, ())]

        values: list[float] = []
        # Stacked series contribute their cumulative levels, not their own values.
        for ds in format_stacked_data_series_values(stacked):
            values.extend(d.y1 for d in ds.data if d.y1 is not None)
        for raw in non_stacked:
            values.extend(d.y for d in raw.data if d.y is not None)

        scale_to_extent = all(spec.y_scale_to_data_extent for spec in group_specs)
        out.append(
            YDomain(
                group_id=group_id,
                scale_type=scale_type,
                domain=_continuous_domain(values, scale_type, scale_to_extent),
            )
        )
    return out


def _continuous_domain(values: Sequence[float], scale_type: ScaleType, scale_to_extent: bool) -> tuple[float, float]:
    arr = np.asarray(values, dtype=np.float64)
    if scale_type == ScaleType.LOG:
        arr = arr[arr > 0]
    if arr.size == 0:
        return (1.0, 10.0) if scale_type == ScaleType.LOG else (0.0, 1.0)
    lo = float(np.min(arr))
    hi = float(np.max(arr))
    if scale_type != ScaleType.LOG and not scale_to_extent:
        lo = min(lo, 0.0)
        hi = max(hi, 0.0)
    return (lo, hi)
