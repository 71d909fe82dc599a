from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Sequence, Union

from chartcore.curves import Point, build_area_path, build_line_path
from chartcore.scales import Scale
from chartcore.specs import CurveType, ScaleType
from chartcore.series import DataSeriesDatum


@dataclass(frozen=True)
class GeometryValue:
    """Source of a mark, kept for hit-testing and tooltips."""

    spec_id: str
    series_key: tuple[Any, ...]
    datum: Any
    x: Any = None
    y: float | None = None


@dataclass(frozen=True)
class Transform:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class GeometryId:
    spec_id: str
    series_key: tuple[Any, ...]


@dataclass(frozen=True)
class PointGeometry:
    x: float
    y: float
    radius: float
    color: str
    value: GeometryValue
    kind: Literal["point"] = field(default="point", init=False)


@dataclass(frozen=True)
class BarGeometry:
    x: float
    y: float
    width: float
    height: float
    color: str
    value: GeometryValue
    kind: Literal["bar"] = field(default="bar", init=False)


@dataclass(frozen=True)
class LineGeometry:
    line: str
    points: tuple[PointGeometry, ...]
    color: str
    transform: Transform
    geometry_id: GeometryId
    kind: Literal["line"] = field(default="line", init=False)


@dataclass(frozen=True)
class AreaGeometry:
    area: str
    line: str
    points: tuple[PointGeometry, ...]
    color: str
    transform: Transform
    geometry_id: GeometryId
    kind: Literal["area"] = field(default="area", init=False)


Geometry = Union[PointGeometry, BarGeometry, LineGeometry, AreaGeometry]


def render_points(
    shift: float,
    data: Iterable[DataSeriesDatum],
    x_scale: Scale,
    y_scale: Scale,
    color: str,
    spec_id: str,
    series_key: tuple[Any, ...],
    radius: float = 4.0,
) -> list[PointGeometry]:
    out: list[PointGeometry] = []
    for datum, px, py in _positioned(data, x_scale, y_scale):
        out.append(
            PointGeometry(
                x=px + shift,
                y=py,
                radius=radius,
                color=color,
                value=_value(spec_id, series_key, datum),
            )
        )
    return out


def render_bars(
    order_index: int,
    data: Iterable[DataSeriesDatum],
    x_scale: Scale,
    y_scale: Scale,
    color: str,
    spec_id: str,
    series_key: tuple[Any, ...],
) -> list[BarGeometry]:
    bandwidth = x_scale.bandwidth
    out: list[BarGeometry] = []
    for datum, px, py in _positioned(data, x_scale, y_scale):
        base = _baseline(datum, y_scale)
        out.append(
            BarGeometry(
                x=px + bandwidth * order_index,
                y=min(py, base),
                width=bandwidth,
                height=abs(base - py),
                color=color,
                value=_value(spec_id, series_key, datum),
            )
        )
    return out


def render_line(
    shift: float,
    data: Iterable[DataSeriesDatum],
    x_scale: Scale,
    y_scale: Scale,
    color: str,
    curve: CurveType,
    spec_id: str,
    series_key: tuple[Any, ...],
    radius: float = 4.0,
) -> LineGeometry | None:
    runs = _runs(data, x_scale, y_scale)
    if not runs:
        return None
    path = "".join(build_line_path([(px, py) for _, px, py in run], curve) for run in runs)
    return LineGeometry(
        line=path,
        points=_run_points(runs, shift, radius, color, spec_id, series_key),
        color=color,
        transform=Transform(x=shift, y=0.0),
        geometry_id=GeometryId(spec_id=spec_id, series_key=series_key),
    )


def render_area(
    shift: float,
    data: Iterable[DataSeriesDatum],
    x_scale: Scale,
    y_scale: Scale,
    color: str,
    curve: CurveType,
    spec_id: str,
    series_key: tuple[Any, ...],
    radius: float = 4.0,
) -> AreaGeometry | None:
    runs = _runs(data, x_scale, y_scale)
    if not runs:
        return None
    area_paths: list[str] = []
    line_paths: list[str] = []
    for run in runs:
        upper: list[Point] = [(px, py) for _, px, py in run]
        lower: list[Point] = [(px, _baseline(datum, y_scale)) for datum, px, _ in run]
        area_paths.append(build_area_path(upper, lower, curve))
        line_paths.append(build_line_path(upper, curve))
    return AreaGeometry(
        area="".join(area_paths),
        line="".join(line_paths),
        points=_run_points(runs, shift, radius, color, spec_id, series_key),
        color=color,
        transform=Transform(x=shift, y=0.0),
        geometry_id=GeometryId(spec_id=spec_id, series_key=series_key),
    )


_Positioned = tuple[DataSeriesDatum, float, float]


def _positioned(data: Iterable[DataSeriesDatum], x_scale: Scale, y_scale: Scale) -> Iterable[_Positioned]:
    for datum in data:
        if datum.y1 is None:
            continue
        px = x_scale.scale(datum.x)
        py = y_scale.scale(datum.y1)
        if px is None or py is None:
            continue
        yield datum, px, py


def _runs(data: Iterable[DataSeriesDatum], x_scale: Scale, y_scale: Scale) -> list[list[_Positioned]]:
    # A gap closes the current run; the next valid datum starts a new subpath.
    runs: list[list[_Positioned]] = []
    current: list[_Positioned] = []
    for datum in data:
        px = x_scale.scale(datum.x) if datum.y1 is not None else None
        py = y_scale.scale(datum.y1) if px is not None else None
        if px is None or py is None:
            if current:
                runs.append(current)
                current = []
            continue
        current.append((datum, px, py))
    if current:
        runs.append(current)
    return runs


def _run_points(
    runs: Sequence[Sequence[_Positioned]],
    shift: float,
    radius: float,
    color: str,
    spec_id: str,
    series_key: tuple[Any, ...],
) -> tuple[PointGeometry, ...]:
    return tuple(
        PointGeometry(
            x=px + shift,
            y=py,
            radius=radius,
            color=color,
            value=_value(spec_id, series_key, datum),
        )
        for run in runs
        for datum, px, py in run
    )


def _baseline(datum: DataSeriesDatum, y_scale: Scale) -> float:
    base = y_scale.scale(datum.y0 if datum.y0 is not None else 0.0)
    if base is None or y_scale.type == ScaleType.LOG and datum.y0 is None:
        return float(y_scale.range[0])
    return base


def _value(spec_id: str, series_key: tuple[Any, ...], datum: DataSeriesDatum) -> GeometryValue:
    return GeometryValue(spec_id=spec_id, series_key=series_key, datum=datum.datum, x=datum.x, y=datum.y1)
