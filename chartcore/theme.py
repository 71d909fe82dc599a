from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
import math
import re
from typing import Any, Mapping

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

DEFAULT_VIZ_COLORS: tuple[str, ...] = (
    "#00B3A4",
    "#3185FC",
    "#DB1374",
    "#490092",
    "#FEB6DB",
    "#F98510",
    "#E6C220",
    "#BFA180",
    "#920000",
    "#461A0A",
)


@dataclass(frozen=True)
class Margins:
    left: float = 10.0
    right: float = 10.0
    top: float = 10.0
    bottom: float = 10.0


@dataclass(frozen=True)
class ChartConfig:
    margins: Margins = field(default_factory=Margins)
    paddings: Margins = field(default_factory=Margins)


@dataclass(frozen=True)
class LegendStyle:
    vertical_width: float = 150.0
    horizontal_height: float = 50.0


@dataclass(frozen=True)
class ColorConfig:
    viz_colors: tuple[str, ...] = DEFAULT_VIZ_COLORS
    default_viz_color: str = "#FF0000"


@dataclass(frozen=True)
class AxisStyle:
    tick_font_size_px: float = 10.0
    tick_font_family: str = "Comic Mono"


@dataclass(frozen=True)
class ScalesConfig:
    # Inner and outer padding of ordinal bands, as a ratio of the band step.
    bars_padding: float = 0.25


@dataclass(frozen=True)
class PointStyle:
    radius: float = 4.0


@dataclass(frozen=True)
class Theme:
    """Layout, palette and mark styling consumed by the pipeline."""

    chart: ChartConfig = field(default_factory=ChartConfig)
    legend: LegendStyle = field(default_factory=LegendStyle)
    colors: ColorConfig = field(default_factory=ColorConfig)
    axes: AxisStyle = field(default_factory=AxisStyle)
    scales: ScalesConfig = field(default_factory=ScalesConfig)
    point: PointStyle = field(default_factory=PointStyle)


DEFAULT_THEME = Theme()


def build_theme(overrides: Mapping[str, Any] | None = None, *, base: Theme = DEFAULT_THEME) -> Theme:
    """Merge nested overrides into `base` and validate the result.

    Overrides mirror the dataclass nesting, e.g.
    `{"chart": {"margins": {"left": 4}}, "colors": {"default_viz_color": "#000000"}}`.
    """

    theme = _merge(base, overrides or {}, path="")
    _validate(theme)
    return theme


def _merge(node: Any, overrides: Mapping[str, Any], *, path: str) -> Any:
    if not isinstance(overrides, Mapping):
        raise ValueError(f"Theme option `{path.rstrip('.')}` must be a mapping")
    known = {f.name for f in fields(node)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown theme option: {path}{key}")
        current = getattr(node, key)
        if is_dataclass(current):
            changes[key] = _merge(current, value, path=f"{path}{key}.")
        elif isinstance(current, tuple):
            if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                raise ValueError(f"Theme option `{path}{key}` must be a sequence")
            changes[key] = tuple(value)
        else:
            changes[key] = value
    return replace(node, **changes)


def _validate(theme: Theme) -> None:
    for name, margins in (("chart.margins", theme.chart.margins), ("chart.paddings", theme.chart.paddings)):
        for f in fields(margins):
            _require_non_negative(f"{name}.{f.name}", getattr(margins, f.name))
    _require_non_negative("legend.vertical_width", theme.legend.vertical_width)
    _require_non_negative("legend.horizontal_height", theme.legend.horizontal_height)
    _require_non_negative("point.radius", theme.point.radius)

    if not theme.colors.viz_colors:
        raise ValueError("Theme option `colors.viz_colors` must contain at least one color")
    for color in theme.colors.viz_colors:
        _require_hex("colors.viz_colors", color)
    _require_hex("colors.default_viz_color", theme.colors.default_viz_color)

    size = theme.axes.tick_font_size_px
    if not isinstance(size, (int, float)) or not math.isfinite(size) or size <= 0:
        raise ValueError("Theme option `axes.tick_font_size_px` must be a positive number")
    if not isinstance(theme.axes.tick_font_family, str) or not theme.axes.tick_font_family.strip():
        raise ValueError("Theme option `axes.tick_font_family` must be a non-empty string")

    padding = theme.scales.bars_padding
    if not isinstance(padding, (int, float)) or not (0.0 <= float(padding) < 1.0):
        raise ValueError("Theme option `scales.bars_padding` must be in [0, 1)")


def _require_non_negative(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise ValueError(f"Theme option `{name}` must be a non-negative number")


def _require_hex(name: str, value: Any) -> None:
    if not isinstance(value, str) or not _HEX_COLOR.match(value):
        raise ValueError(f"Theme option `{name}` must be a hex color (#RRGGBB or #RRGGBBAA)")
