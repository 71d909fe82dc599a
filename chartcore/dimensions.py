from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping

from chartcore.specs import AxisSpec, Position
from chartcore.theme import LegendStyle, Margins

if TYPE_CHECKING:
    from chartcore.axes import AxisTicksDimensions


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float
    top: float = 0.0
    left: float = 0.0


@dataclass(frozen=True)
class ChartTransform:
    x: float
    y: float
    rotate: int


def compute_chart_dimensions(
    parent: Dimensions,
    margins: Margins,
    paddings: Margins,
    legend_style: LegendStyle,
    axis_dimensions: Mapping[str, AxisTicksDimensions],
    axis_specs: Mapping[str, AxisSpec],
    show_legend: bool = False,
    legend_position: Position | None = None,
) -> Dimensions:
    """Plotting rectangle left once axes, legend, margins and paddings take their space.

    `top`/`left` are offsets inside the parent container.
    """
    reserved = {Position.TOP: 0.0, Position.BOTTOM: 0.0, Position.LEFT: 0.0, Position.RIGHT: 0.0}
    for axis_id, dims in axis_dimensions.items():
        axis_spec = axis_specs.get(axis_id)
        if axis_spec is None or axis_spec.hide:
            continue
        label = dims.max_label_height if axis_spec.position in (Position.TOP, Position.BOTTOM) else dims.max_label_width
        reserved[axis_spec.position] += _nn(label) + _nn(axis_spec.tick_size) + _nn(axis_spec.tick_padding)

    legend = legend_space(legend_style, show_legend, legend_position)

    width = (
        parent.width
        - _nn(margins.left)
        - _nn(margins.right)
        - _nn(paddings.left)
        - _nn(paddings.right)
        - reserved[Position.LEFT]
        - reserved[Position.RIGHT]
        - legend[Position.LEFT]
        - legend[Position.RIGHT]
    )
    height = (
        parent.height
        - _nn(margins.top)
        - _nn(margins.bottom)
        - _nn(paddings.top)
        - _nn(paddings.bottom)
        - reserved[Position.TOP]
        - reserved[Position.BOTTOM]
        - legend[Position.TOP]
        - legend[Position.BOTTOM]
    )
    return Dimensions(
        width=max(0.0, width),
        height=max(0.0, height),
        top=_nn(margins.top) + _nn(paddings.top) + legend[Position.TOP] + reserved[Position.TOP],
        left=_nn(margins.left) + _nn(paddings.left) + legend[Position.LEFT] + reserved[Position.LEFT],
    )


def legend_space(legend_style: LegendStyle, show_legend: bool, legend_position: Position | None) -> dict[Position, float]:
    space = {Position.TOP: 0.0, Position.BOTTOM: 0.0, Position.LEFT: 0.0, Position.RIGHT: 0.0}
    if not show_legend or legend_position is None:
        return space
    position = Position(legend_position)
    if position in (Position.LEFT, Position.RIGHT):
        space[position] = _nn(legend_style.vertical_width)
    else:
        space[position] = _nn(legend_style.horizontal_height)
    return space


def compute_chart_transform(chart_dimensions: Dimensions, rotation: int) -> ChartTransform:
    if rotation == 90:
        return ChartTransform(x=chart_dimensions.width, y=0.0, rotate=90)
    if rotation == -90:
        return ChartTransform(x=0.0, y=chart_dimensions.height, rotate=-90)
    if rotation == 180:
        return ChartTransform(x=chart_dimensions.width, y=chart_dimensions.height, rotate=180)
    return ChartTransform(x=0.0, y=0.0, rotate=0)


def _nn(value: float) -> float:
    return max(0.0, float(value))
