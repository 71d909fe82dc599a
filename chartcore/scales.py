from __future__ import annotations

from dataclasses import dataclass, field, replace
import math
from typing import Any, Iterable, Protocol

from chartcore.domains import XDomain, YDomain
from chartcore.series import parse_continuous_value
from chartcore.specs import CONTINUOUS_SCALE_TYPES, ScaleType
from chartcore.ticks import generate_log_ticks, generate_nice_ticks


class Scale(Protocol):
    type: ScaleType
    domain: tuple[Any, ...]
    range: tuple[float, float]

    @property
    def bandwidth(self) -> float:
        ...

    def scale(self, value: Any) -> float | None:
        ...

    def invert(self, position: float) -> Any:
        ...

    def ticks(self, count: int = 10) -> list[Any]:
        ...


@dataclass(frozen=True)
class ContinuousScale:
    type: ScaleType
    domain: tuple[float, ...]
    range: tuple[float, float]
    bandwidth: float = 0.0

    def __post_init__(self) -> None:
        if self.type not in CONTINUOUS_SCALE_TYPES:
            raise ValueError(f"continuous scale does not support {self.type}")
        object.__setattr__(self, "domain", tuple(float(v) for v in self.domain))
        object.__setattr__(self, "range", (float(self.range[0]), float(self.range[1])))

    @property
    def bounds(self) -> tuple[float, float]:
        if not self.domain:
            return (0.0, 0.0)
        return (self.domain[0], self.domain[-1])

    @property
    def is_degenerate(self) -> bool:
        lo, hi = self.bounds
        t0 = self._transform(lo)
        t1 = self._transform(hi)
        return t0 is None or t1 is None or t0 == t1

    def scale(self, value: Any) -> float | None:
        v = parse_continuous_value(value, self.type)
        if v is None:
            return None
        r0, r1 = self.range
        if self.is_degenerate:
            return (r0 + r1) / 2.0
        lo, hi = self.bounds
        t0 = self._transform(lo)
        t1 = self._transform(hi)
        t = self._transform(v)
        if t is None or t0 is None or t1 is None:
            return None
        ratio = (t - t0) / (t1 - t0)
        return r0 * (1.0 - ratio) + r1 * ratio

    def invert(self, position: float) -> float | None:
        lo, hi = self.bounds
        r0, r1 = self.range
        t0 = self._transform(lo)
        t1 = self._transform(hi)
        if t0 is None or t1 is None:
            # Log domain reaching zero or below has no inverse.
            return None
        if t0 == t1 or r0 == r1:
            return lo if self.domain else None
        ratio = (float(position) - r0) / (r1 - r0)
        return self._untransform(t0 * (1.0 - ratio) + t1 * ratio)

    def ticks(self, count: int = 10) -> list[float]:
        if not self.domain:
            return []
        lo, hi = sorted(self.bounds)
        if self.type == ScaleType.LOG:
            values = generate_log_ticks(lo, hi)
        else:
            values = generate_nice_ticks(lo, hi, max(1, count))
        return [float(v) for v in values.tolist()]

    def _transform(self, value: float) -> float | None:
        if self.type == ScaleType.LOG:
            return math.log10(value) if value > 0 else None
        if self.type == ScaleType.SQRT:
            return math.copysign(math.sqrt(abs(value)), value)
        return value

    def _untransform(self, value: float) -> float:
        if self.type == ScaleType.LOG:
            return 10.0**value
        if self.type == ScaleType.SQRT:
            return math.copysign(value * value, value)
        return value


@dataclass(frozen=True)
class OrdinalScale:
    """Band scale: each domain value owns one band split into `group_count` slots."""

    domain: tuple[Any, ...]
    range: tuple[float, float]
    padding: float = 0.0
    group_count: int = 1
    align: float = 0.5
    type: ScaleType = field(default=ScaleType.ORDINAL, init=False)
    step: float = field(default=0.0, init=False)
    band_width: float = field(default=0.0, init=False)
    _positions: dict[Any, float] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not (0.0 <= self.padding < 1.0):
            raise ValueError("ordinal padding must be in [0, 1)")
        domain = tuple(dict.fromkeys(self.domain))
        r0, r1 = float(self.range[0]), float(self.range[1])
        object.__setattr__(self, "domain", domain)
        object.__setattr__(self, "range", (r0, r1))
        n = len(domain)
        reverse = r1 < r0
        start, stop = (r1, r0) if reverse else (r0, r1)
        step = (stop - start) / max(1.0, n - self.padding + self.padding * 2.0)
        start += (stop - start - step * (n - self.padding)) * self.align
        starts = [start + step * i for i in range(n)]
        if reverse:
            starts.reverse()
        object.__setattr__(self, "step", step)
        object.__setattr__(self, "band_width", step * (1.0 - self.padding))
        object.__setattr__(self, "_positions", dict(zip(domain, starts)))

    @property
    def bandwidth(self) -> float:
        return self.band_width / max(1, self.group_count)

    def scale(self, value: Any) -> float | None:
        try:
            return self._positions.get(value)
        except TypeError:
            return None

    def invert(self, position: float) -> Any:
        for value, start in self._positions.items():
            if start <= position < start + self.band_width:
                return value
        return None

    def ticks(self, count: int = 10) -> list[Any]:
        return list(self.domain)


def compute_x_scale(
    x_domain: XDomain,
    total_group_count: int,
    min_range: float,
    max_range: float,
    bars_padding: float = 0.0,
) -> ContinuousScale | OrdinalScale:
    groups = max(int(total_group_count), 1)
    if x_domain.scale_type == ScaleType.ORDINAL:
        return OrdinalScale(
            domain=x_domain.domain,
            range=(min_range, max_range),
            padding=bars_padding,
            group_count=groups,
        )
    if not x_domain.is_band_scale or not x_domain.domain:
        return ContinuousScale(type=x_domain.scale_type, domain=x_domain.domain, range=(min_range, max_range))

    lo, hi = x_domain.domain[0], x_domain.domain[-1]
    interval = x_domain.min_interval if x_domain.min_interval > 0 else 1.0
    base = ContinuousScale(type=x_domain.scale_type, domain=(lo, hi + interval), range=(min_range, max_range))
    start = base.scale(lo)
    end = base.scale(lo + interval)
    band = abs(end - start) if start is not None and end is not None else 0.0
    return replace(base, bandwidth=band / groups)


def compute_y_scales(y_domains: Iterable[YDomain], min_range: float, max_range: float) -> dict[str, ContinuousScale]:
    return {
        y_domain.group_id: ContinuousScale(type=y_domain.scale_type, domain=y_domain.domain, range=(min_range, max_range))
        for y_domain in y_domains
    }
