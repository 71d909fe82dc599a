from chartcore.axes import AxisLayout, AxisTick, AxisTicksDimensions, compute_axis_layout
from chartcore.compute import (
    SeriesDomainsAndData,
    SeriesGeometries,
    compute_series_domains,
    compute_series_geometries,
    get_axes_spec_for_spec_id,
)
from chartcore.dimensions import Dimensions
from chartcore.errors import ChartSpecError
from chartcore.legend import LegendItem, compute_legend
from chartcore.pipeline import ChartInputs, ChartState, recompute
from chartcore.registry import SpecRegistry
from chartcore.rendering import AreaGeometry, BarGeometry, Geometry, LineGeometry, PointGeometry
from chartcore.specs import AxisSpec, CurveType, Position, ScaleType, SeriesSpec, SeriesType
from chartcore.text_measure import BBox, FixedWidthTextMeasurer, PillowTextMeasurer, TextMeasurer
from chartcore.theme import DEFAULT_THEME, Theme, build_theme
from chartcore.tooltip import format_tooltip

__all__ = [
    "AreaGeometry",
    "AxisLayout",
    "AxisSpec",
    "AxisTick",
    "AxisTicksDimensions",
    "BBox",
    "BarGeometry",
    "ChartInputs",
    "ChartSpecError",
    "ChartState",
    "CurveType",
    "DEFAULT_THEME",
    "Dimensions",
    "FixedWidthTextMeasurer",
    "Geometry",
    "LegendItem",
    "LineGeometry",
    "PillowTextMeasurer",
    "PointGeometry",
    "Position",
    "ScaleType",
    "SeriesDomainsAndData",
    "SeriesGeometries",
    "SeriesSpec",
    "SeriesType",
    "SpecRegistry",
    "TextMeasurer",
    "Theme",
    "build_theme",
    "compute_axis_layout",
    "compute_legend",
    "compute_series_domains",
    "compute_series_geometries",
    "format_tooltip",
    "get_axes_spec_for_spec_id",
    "recompute",
]
