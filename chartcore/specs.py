from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Literal, Mapping, Union

from chartcore.errors import ChartSpecError
from chartcore.ticks import default_tick_format, time_tick_format


GLOBAL_GROUP_ID = "__global__"

Accessor = Union[str, int, Callable[[Any], Any]]
TickFormatter = Callable[[Any], str]
Rotation = Literal[0, 90, -90, 180]
Rendering = Literal["canvas", "svg"]

VALID_ROTATIONS: tuple[int, ...] = (0, 90, -90, 180)


class SeriesType(str, Enum):
    POINT = "point"
    BAR = "bar"
    LINE = "line"
    AREA = "area"


class ScaleType(str, Enum):
    LINEAR = "linear"
    ORDINAL = "ordinal"
    LOG = "log"
    SQRT = "sqrt"
    TIME = "time"


CONTINUOUS_SCALE_TYPES = frozenset({ScaleType.LINEAR, ScaleType.LOG, ScaleType.SQRT, ScaleType.TIME})


class CurveType(str, Enum):
    LINEAR = "linear"
    MONOTONE_X = "monotone_x"
    BASIS = "basis"
    STEP = "step"
    STEP_BEFORE = "step_before"
    STEP_AFTER = "step_after"


class Position(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class SeriesSpec:
    id: str
    series_type: SeriesType
    group_id: str = GLOBAL_GROUP_ID
    x_accessor: Accessor = "x"
    y_accessors: tuple[Accessor, ...] = ("y",)
    x_scale_type: ScaleType = ScaleType.ORDINAL
    y_scale_type: ScaleType = ScaleType.LINEAR
    stacked: bool = False
    curve: CurveType = CurveType.LINEAR
    split_series_accessors: tuple[Accessor, ...] = ()
    color: str | None = None
    name: str | None = None
    y_scale_to_data_extent: bool = False
    data: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ChartSpecError("series spec id must be a non-empty string")
        if not isinstance(self.group_id, str) or not self.group_id.strip():
            raise ChartSpecError(f"series spec {self.id!r} group_id must be a non-empty string")
        object.__setattr__(self, "series_type", SeriesType(self.series_type))
        object.__setattr__(self, "x_scale_type", ScaleType(self.x_scale_type))
        object.__setattr__(self, "y_scale_type", ScaleType(self.y_scale_type))
        object.__setattr__(self, "curve", CurveType(self.curve))
        if isinstance(self.y_accessors, (str, int)) or callable(self.y_accessors):
            object.__setattr__(self, "y_accessors", (self.y_accessors,))
        else:
            object.__setattr__(self, "y_accessors", tuple(self.y_accessors))
        if not self.y_accessors:
            raise ChartSpecError(f"series spec {self.id!r} requires at least one y accessor")
        object.__setattr__(self, "split_series_accessors", tuple(self.split_series_accessors))
        if self.y_scale_type == ScaleType.ORDINAL:
            raise ChartSpecError(f"series spec {self.id!r} y scale must be continuous")


@dataclass(frozen=True)
class AxisSpec:
    id: str
    group_id: str = GLOBAL_GROUP_ID
    position: Position = Position.LEFT
    hide: bool = False
    show_overlapping_ticks: bool = False
    show_overlapping_labels: bool = False
    tick_size: float = 10.0
    tick_padding: float = 10.0
    tick_format: TickFormatter = default_tick_format

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ChartSpecError("axis spec id must be a non-empty string")
        object.__setattr__(self, "position", Position(self.position))
        if self.tick_size < 0 or self.tick_padding < 0:
            raise ChartSpecError(f"axis spec {self.id!r} tick_size/tick_padding must be >= 0")


def check_spec_map(specs: Mapping[str, SeriesSpec] | Mapping[str, AxisSpec]) -> None:
    for key, spec in specs.items():
        if not isinstance(spec, (SeriesSpec, AxisSpec)):
            raise ChartSpecError(f"spec {key!r} has unsupported type {type(spec)!r}")
        if key != spec.id:
            raise ChartSpecError(f"spec map key {key!r} does not match spec id {spec.id!r}")


def is_vertical(position: Position) -> bool:
    return position in (Position.LEFT, Position.RIGHT)


def is_horizontal(position: Position) -> bool:
    return position in (Position.TOP, Position.BOTTOM)


def is_rotated(rotation: int) -> bool:
    return rotation in (90, -90)


def validate_rotation(rotation: int) -> int:
    if rotation not in VALID_ROTATIONS:
        raise ChartSpecError(f"rotation must be one of {VALID_ROTATIONS}, got {rotation!r}")
    return int(rotation)


def resolve_tick_format(tick_format: TickFormatter, scale_type: ScaleType) -> TickFormatter:
    # Time values are epoch milliseconds.
    if tick_format is default_tick_format and scale_type == ScaleType.TIME:
        return time_tick_format
    return tick_format
