from __future__ import annotations

from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any, Mapping

from chartcore.axes import AxisTick, AxisTicksDimensions, compute_axis_layout
from chartcore.compute import SeriesDomainsAndData, SeriesGeometries, compute_series_domains, compute_series_geometries
from chartcore.dimensions import ChartTransform, Dimensions, compute_chart_transform
from chartcore.legend import LegendItem, compute_legend
from chartcore.registry import SpecRegistry
from chartcore.series import get_series_color_map
from chartcore.specs import AxisSpec, Position, Rendering, SeriesSpec, check_spec_map, validate_rotation
from chartcore.text_measure import MeasurerFactory, PillowTextMeasurer
from chartcore.theme import DEFAULT_THEME, Theme

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartInputs:
    """Everything one `recompute` call reads. Build a new one for every change."""

    series_specs: Mapping[str, SeriesSpec]
    axis_specs: Mapping[str, AxisSpec] = field(default_factory=dict)
    dataset: Any = None
    parent_dimensions: Dimensions = field(default_factory=lambda: Dimensions(width=0.0, height=0.0))
    theme: Theme = DEFAULT_THEME
    rotation: int = 0
    rendering: Rendering = "canvas"
    show_legend: bool = False
    legend_collapsed: bool = False
    legend_position: Position | None = None
    measurer_factory: MeasurerFactory = PillowTextMeasurer

    def __post_init__(self) -> None:
        object.__setattr__(self, "series_specs", MappingProxyType(dict(self.series_specs)))
        object.__setattr__(self, "axis_specs", MappingProxyType(dict(self.axis_specs)))
        object.__setattr__(self, "rotation", validate_rotation(self.rotation))
        if self.rendering not in ("canvas", "svg"):
            raise ValueError(f"rendering must be 'canvas' or 'svg', got {self.rendering!r}")
        if self.legend_position is not None:
            object.__setattr__(self, "legend_position", Position(self.legend_position))
        check_spec_map(self.series_specs)
        check_spec_map(self.axis_specs)

    @property
    def legend_visible(self) -> bool:
        return self.show_legend and not self.legend_collapsed

    @classmethod
    def from_registry(cls, registry: SpecRegistry, **kwargs: Any) -> ChartInputs:
        return cls(series_specs=registry.series_specs(), axis_specs=registry.axis_specs(), **kwargs)


@dataclass(frozen=True)
class ChartState:
    initialized: bool = False
    rendering: Rendering = "canvas"
    rotation: int = 0
    parent_dimensions: Dimensions = field(default_factory=lambda: Dimensions(width=0.0, height=0.0))
    chart_dimensions: Dimensions = field(default_factory=lambda: Dimensions(width=0.0, height=0.0))
    chart_transform: ChartTransform = field(default_factory=lambda: ChartTransform(x=0.0, y=0.0, rotate=0))
    domains: SeriesDomainsAndData | None = None
    series_color_map: dict[str, str] = field(default_factory=dict)
    legend_items: tuple[LegendItem, ...] = ()
    geometries: SeriesGeometries = field(default_factory=SeriesGeometries)
    axis_ticks_dimensions: dict[str, AxisTicksDimensions] = field(default_factory=dict)
    axis_positions: dict[str, Dimensions] = field(default_factory=dict)
    axis_ticks: dict[str, tuple[AxisTick, ...]] = field(default_factory=dict)
    axis_visible_ticks: dict[str, tuple[AxisTick, ...]] = field(default_factory=dict)


def recompute(inputs: ChartInputs) -> ChartState:
    """Run the whole pipeline over `inputs` and return a fresh state.

    Nothing is cached between calls; identical inputs give equal states.
    """
    parent = inputs.parent_dimensions
    if parent.width <= 0 or parent.height <= 0:
        LOGGER.debug("parent dimensions %sx%s not measured yet; skipping", parent.width, parent.height)
        return ChartState(rendering=inputs.rendering, rotation=inputs.rotation, parent_dimensions=parent)

    theme = inputs.theme
    series_specs = inputs.series_specs
    domains = compute_series_domains(series_specs, inputs.dataset)
    color_map = get_series_color_map(domains.series_colors, theme.colors, series_specs)
    legend_items = compute_legend(
        domains.series_colors,
        color_map,
        series_specs,
        inputs.axis_specs,
        theme.colors.default_viz_color,
    )
    layout = compute_axis_layout(
        inputs.axis_specs,
        domains,
        parent,
        theme,
        inputs.rotation,
        inputs.legend_visible,
        inputs.legend_position,
        inputs.measurer_factory,
    )
    geometries = compute_series_geometries(
        series_specs,
        domains.x_domain,
        domains.y_domain,
        domains.formatted_data_series,
        color_map,
        theme,
        layout.chart_dimensions,
        inputs.rotation,
    )
    return ChartState(
        initialized=True,
        rendering=inputs.rendering,
        rotation=inputs.rotation,
        parent_dimensions=parent,
        chart_dimensions=layout.chart_dimensions,
        chart_transform=compute_chart_transform(layout.chart_dimensions, inputs.rotation),
        domains=domains,
        series_color_map=color_map,
        legend_items=tuple(legend_items),
        geometries=geometries,
        axis_ticks_dimensions=layout.axis_ticks_dimensions,
        axis_positions=layout.axis_positions,
        axis_ticks=layout.axis_ticks,
        axis_visible_ticks=layout.axis_visible_ticks,
    )
