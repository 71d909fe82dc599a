from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from chartcore.errors import ChartSpecError
from chartcore.specs import AxisSpec, SeriesSpec


class SpecRegistry:
    """Series and axis specs keyed by id, in registration order.

    Upserting an existing id replaces the spec in its original slot, so bar
    clustering order stays stable across re-registration.
    """

    def __init__(self) -> None:
        self._series: dict[str, SeriesSpec] = {}
        self._axes: dict[str, AxisSpec] = {}

    def upsert_series(self, spec: SeriesSpec) -> None:
        if not isinstance(spec, SeriesSpec):
            raise ChartSpecError(f"expected SeriesSpec, got {type(spec)!r}")
        self._series[spec.id] = spec

    def remove_series(self, spec_id: str) -> None:
        self._series.pop(spec_id, None)

    def upsert_axis(self, spec: AxisSpec) -> None:
        if not isinstance(spec, AxisSpec):
            raise ChartSpecError(f"expected AxisSpec, got {type(spec)!r}")
        self._axes[spec.id] = spec

    def remove_axis(self, axis_id: str) -> None:
        self._axes.pop(axis_id, None)

    def series_specs(self) -> Mapping[str, SeriesSpec]:
        return MappingProxyType(dict(self._series))

    def axis_specs(self) -> Mapping[str, AxisSpec]:
        return MappingProxyType(dict(self._axes))

    def __len__(self) -> int:
        return len(self._series) + len(self._axes)
