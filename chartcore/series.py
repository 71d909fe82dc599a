from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
import math
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from chartcore.adapters import normalize_dataset
from chartcore.specs import Accessor, ScaleType, SeriesSpec, SeriesType, check_spec_map
from chartcore.theme import ColorConfig

LOGGER = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class RawDataSeriesDatum:
    x: Any
    y: float | None
    datum: Any


@dataclass(frozen=True)
class RawDataSeries:
    spec_id: str
    key: tuple[Any, ...]
    series_color_key: str
    data: tuple[RawDataSeriesDatum, ...]


@dataclass(frozen=True)
class DataSeriesDatum:
    x: Any
    y1: float | None
    y0: float | None
    datum: Any

    @property
    def is_gap(self) -> bool:
        return self.y1 is None


@dataclass(frozen=True)
class DataSeries:
    spec_id: str
    key: tuple[Any, ...]
    series_color_key: str
    data: tuple[DataSeriesDatum, ...]


@dataclass(frozen=True)
class DataSeriesCounts:
    bar_series: int = 0
    line_series: int = 0
    area_series: int = 0
    point_series: int = 0


@dataclass(frozen=True)
class FormattedDataSeries:
    group_id: str
    data_series: tuple[DataSeries, ...]
    counts: DataSeriesCounts


@dataclass(frozen=True)
class FormattedDataSeriesGroups:
    stacked: tuple[FormattedDataSeries, ...]
    non_stacked: tuple[FormattedDataSeries, ...]


@dataclass(frozen=True)
class DataSeriesColorsValues:
    spec_id: str
    color_values: tuple[Any, ...]


@dataclass(frozen=True)
class SplitSeries:
    split_series: dict[str, tuple[RawDataSeries, ...]]
    x_values: tuple[Any, ...]
    series_colors: dict[str, DataSeriesColorsValues]


@dataclass(frozen=True)
class ClusteredCounts:
    stacked_group_count: int
    non_stacked_bar_count: int
    total_group_count: int


def get_accessor_value(datum: Any, accessor: Accessor) -> Any:
    if callable(accessor):
        try:
            return accessor(datum)
        except Exception:
            # A failing accessor turns this datum into a gap.
            return MISSING
    if isinstance(datum, Mapping):
        return datum.get(accessor, MISSING)
    if isinstance(accessor, int) and isinstance(datum, (Sequence, np.ndarray)) and not isinstance(datum, (str, bytes)):
        if -len(datum) <= accessor < len(datum):
            return datum[accessor]
        return MISSING
    if isinstance(accessor, str):
        return getattr(datum, accessor, MISSING)
    return MISSING


def parse_continuous_value(value: Any, scale_type: ScaleType) -> float | None:
    if value is None or value is MISSING or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if scale_type != ScaleType.TIME:
            return None
        out = value.timestamp() * 1000.0
    else:
        try:
            out = float(value)
        except (TypeError, ValueError, ArithmeticError):
            return None
    if not math.isfinite(out):
        return None
    if scale_type == ScaleType.LOG and out <= 0:
        return None
    return out


def parse_x_value(value: Any, scale_type: ScaleType) -> Any:
    if scale_type == ScaleType.ORDINAL:
        if value is None or value is MISSING:
            return None
        if isinstance(value, float) and math.isnan(value):
            return None
        try:
            hash(value)
        except TypeError:
            return None
        return value
    return parse_continuous_value(value, scale_type)


def accessor_label(accessor: Accessor, index: int) -> Any:
    if callable(accessor):
        name = getattr(accessor, "__name__", "")
        if not name or name == "<lambda>":
            return f"y{index}"
        return name
    return accessor


def get_color_values_as_string(color_values: Iterable[Any], spec_id: str) -> str:
    return "___".join([spec_id, *(f"{value}" for value in color_values)])


def split_series(
    data: Iterable[Any],
    spec: SeriesSpec,
) -> tuple[list[RawDataSeries], dict[str, DataSeriesColorsValues], list[Any]]:
    multiple_y = len(spec.y_accessors) > 1
    y_labels = [accessor_label(acc, i) for i, acc in enumerate(spec.y_accessors)]
    series_data: dict[tuple[Any, ...], list[RawDataSeriesDatum]] = {}
    colors: dict[str, DataSeriesColorsValues] = {}
    x_values: dict[Any, None] = {}
    dropped = 0
    gaps = 0

    for datum in data:
        x = parse_x_value(get_accessor_value(datum, spec.x_accessor), spec.x_scale_type)
        if x is None:
            dropped += 1
            continue
        split_key = tuple(_key_value(get_accessor_value(datum, acc)) for acc in spec.split_series_accessors)
        for y_accessor, y_label in zip(spec.y_accessors, y_labels):
            key = split_key + (y_label,) if multiple_y else split_key
            y = parse_continuous_value(get_accessor_value(datum, y_accessor), spec.y_scale_type)
            if y is None:
                gaps += 1
            series_data.setdefault(key, []).append(RawDataSeriesDatum(x=x, y=y, datum=datum))
            color_key = get_color_values_as_string(key, spec.id)
            if color_key not in colors:
                colors[color_key] = DataSeriesColorsValues(spec_id=spec.id, color_values=key)
        x_values.setdefault(x, None)

    if dropped or gaps:
        LOGGER.debug("series %s: dropped %d datum(s) without x, %d y gap(s)", spec.id, dropped, gaps)

    raw_series = [
        RawDataSeries(
            spec_id=spec.id,
            key=key,
            series_color_key=get_color_values_as_string(key, spec.id),
            data=tuple(points),
        )
        for key, points in series_data.items()
    ]
    return raw_series, colors, list(x_values)


def get_split_series(specs: Mapping[str, SeriesSpec], dataset: Any = None) -> SplitSeries:
    check_spec_map(specs)
    shared: list[Any] | None = None
    split: dict[str, tuple[RawDataSeries, ...]] = {}
    x_values: dict[Any, None] = {}
    series_colors: dict[str, DataSeriesColorsValues] = {}
    for spec_id, spec in specs.items():
        if spec.data is not None:
            records = normalize_dataset(spec.data)
        else:
            if shared is None:
                shared = normalize_dataset(dataset)
            records = shared
        raw_series, colors, xs = split_series(records, spec)
        split[spec_id] = tuple(raw_series)
        for x in xs:
            x_values.setdefault(x, None)
        for key, value in colors.items():
            series_colors.setdefault(key, value)
    return SplitSeries(split_series=split, x_values=tuple(x_values), series_colors=series_colors)


def format_non_stacked_data_series_values(raw_series: Sequence[RawDataSeries]) -> list[DataSeries]:
    return [
        DataSeries(
            spec_id=raw.spec_id,
            key=raw.key,
            series_color_key=raw.series_color_key,
            data=tuple(DataSeriesDatum(x=d.x, y1=d.y, y0=None, datum=d.datum) for d in raw.data),
        )
        for raw in raw_series
    ]


def format_stacked_data_series_values(raw_series: Sequence[RawDataSeries]) -> list[DataSeries]:
    # One pass over the whole group: each level starts where the previous one ended.
    cumulative: dict[Any, float] = {}
    out: list[DataSeries] = []
    for raw in raw_series:
        data: list[DataSeriesDatum] = []
        for d in raw.data:
            base = cumulative.get(d.x, 0.0)
            if d.y is None:
                data.append(DataSeriesDatum(x=d.x, y1=None, y0=base, datum=d.datum))
                continue
            top = base + d.y
            cumulative[d.x] = top
            data.append(DataSeriesDatum(x=d.x, y1=top, y0=base, datum=d.datum))
        out.append(
            DataSeries(
                spec_id=raw.spec_id,
                key=raw.key,
                series_color_key=raw.series_color_key,
                data=tuple(data),
            )
        )
    return out


def count_series_types(data_series: Sequence[DataSeries], specs: Mapping[str, SeriesSpec]) -> DataSeriesCounts:
    counts = {SeriesType.BAR: 0, SeriesType.LINE: 0, SeriesType.AREA: 0, SeriesType.POINT: 0}
    for ds in data_series:
        spec = specs.get(ds.spec_id)
        if spec is None:
            continue
        counts[spec.series_type] += 1
    return DataSeriesCounts(
        bar_series=counts[SeriesType.BAR],
        line_series=counts[SeriesType.LINE],
        area_series=counts[SeriesType.AREA],
        point_series=counts[SeriesType.POINT],
    )


def get_formatted_data_series(
    specs: Mapping[str, SeriesSpec],
    split: Mapping[str, Sequence[RawDataSeries]],
) -> FormattedDataSeriesGroups:
    groups: dict[str, tuple[list[RawDataSeries], list[RawDataSeries]]] = {}
    for spec_id, spec in specs.items():
        stacked, non_stacked = groups.setdefault(spec.group_id, ([], []))
        target = stacked if spec.stacked else non_stacked
        target.extend(split.get(spec_id, ()))

    stacked_out: list[FormattedDataSeries] = []
    non_stacked_out: list[FormattedDataSeries] = []
    for group_id, (stacked, non_stacked) in groups.items():
        if stacked:
            data_series = format_stacked_data_series_values(stacked)
            stacked_out.append(
                FormattedDataSeries(
                    group_id=group_id,
                    data_series=tuple(data_series),
                    counts=count_series_types(data_series, specs),
                )
            )
        if non_stacked:
            data_series = format_non_stacked_data_series_values(non_stacked)
            non_stacked_out.append(
                FormattedDataSeries(
                    group_id=group_id,
                    data_series=tuple(data_series),
                    counts=count_series_types(data_series, specs),
                )
            )
    return FormattedDataSeriesGroups(stacked=tuple(stacked_out), non_stacked=tuple(non_stacked_out))


def count_clustered_series(
    stacked: Sequence[FormattedDataSeries],
    non_stacked: Sequence[FormattedDataSeries],
) -> ClusteredCounts:
    stacked_group_count = sum(1 for group in stacked if group.counts.bar_series > 0)
    non_stacked_bar_count = sum(group.counts.bar_series for group in non_stacked)
    return ClusteredCounts(
        stacked_group_count=stacked_group_count,
        non_stacked_bar_count=non_stacked_bar_count,
        total_group_count=stacked_group_count + non_stacked_bar_count,
    )


def get_series_color_map(
    series_colors: Mapping[str, DataSeriesColorsValues],
    colors: ColorConfig,
    specs: Mapping[str, SeriesSpec] | None = None,
) -> dict[str, str]:
    palette = colors.viz_colors
    out: dict[str, str] = {}
    for index, (color_key, values) in enumerate(series_colors.items()):
        spec = specs.get(values.spec_id) if specs is not None else None
        if spec is not None and spec.color:
            out[color_key] = spec.color
        elif palette:
            out[color_key] = palette[index % len(palette)]
        else:
            out[color_key] = colors.default_viz_color
    return out


def _key_value(value: Any) -> Any:
    if value is MISSING:
        return None
    try:
        hash(value)
    except TypeError:
        return f"{value}"
    return value
