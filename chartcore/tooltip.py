from __future__ import annotations

from chartcore.rendering import GeometryValue
from chartcore.series import accessor_label
from chartcore.specs import Accessor, AxisSpec, SeriesSpec, resolve_tick_format
from chartcore.ticks import default_tick_format


def format_tooltip(
    value: GeometryValue,
    spec: SeriesSpec,
    x_axis: AxisSpec | None = None,
    y_axis: AxisSpec | None = None,
) -> list[tuple[str, str]]:
    """Label/value rows describing one hovered mark.

    Values go through the tick formatter of the axis showing them, so the
    tooltip reads like the axis.
    """
    x_format = x_axis.tick_format if x_axis is not None else default_tick_format
    y_format = y_axis.tick_format if y_axis is not None else default_tick_format
    x_format = resolve_tick_format(x_format, spec.x_scale_type)
    y_format = resolve_tick_format(y_format, spec.y_scale_type)

    rows = [("series", spec.name or spec.id)]
    if value.series_key:
        rows.append(("split", " - ".join(f"{part}" for part in value.series_key)))
    rows.append((_label(spec.x_accessor, "x"), x_format(value.x)))
    rows.append((_label(spec.y_accessors[0], "y") if len(spec.y_accessors) == 1 else "y", y_format(value.y)))
    return rows


def _label(accessor: Accessor, fallback: str) -> str:
    label = accessor_label(accessor, 0)
    return label if isinstance(label, str) and label != "y0" else fallback
