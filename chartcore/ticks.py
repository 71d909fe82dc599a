from __future__ import annotations

from decimal import Decimal, InvalidOperation
import math
from typing import Any

import numpy as np


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    if vmin > vmax:
        vmin, vmax = vmax, vmin

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.ceil(vmin / step) * step
    tick_max = np.floor(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks_within_range(ticks, vmin=vmin, vmax=vmax)


def generate_log_ticks(vmin: float, vmax: float) -> np.ndarray:
    if vmin <= 0 or vmax <= 0:
        return np.asarray([], dtype=np.float64)
    if vmin > vmax:
        vmin, vmax = vmax, vmin
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    lo = int(np.floor(np.log10(vmin)))
    hi = int(np.ceil(np.log10(vmax)))
    ticks = np.asarray([10.0**e for e in range(lo, hi + 1)], dtype=np.float64)
    ticks = ticks_within_range(ticks, vmin=vmin, vmax=vmax)
    if ticks.size < 2:
        # Less than a decade: fall back to 1/2/5 multiples inside the domain.
        multiples = [m * 10.0**e for e in range(lo, hi + 1) for m in (1.0, 2.0, 5.0)]
        ticks = ticks_within_range(np.asarray(multiples, dtype=np.float64), vmin=vmin, vmax=vmax)
    return ticks


def ticks_within_range(ticks: np.ndarray, *, vmin: float, vmax: float) -> np.ndarray:
    if ticks.size == 0:
        return ticks
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else max(1e-12, abs(vmax - vmin))
    eps = max(1e-12, step * 1e-6)
    mask = (ticks >= (vmin - eps)) & (ticks <= (vmax + eps))
    return ticks[mask]


def format_tick(value: float) -> str:
    if not np.isfinite(value):
        return str(value)
    abs_v = abs(value)
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-6)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def default_tick_format(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float, np.integer, np.floating)) and math.isfinite(float(value)):
        return format_tick(float(value))
    return f"{value}"


def time_tick_format(value: Any) -> str:
    """Label epoch milliseconds as a UTC date, as coarse as the value allows."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        return default_tick_format(value)
    if not math.isfinite(float(value)):
        return default_tick_format(value)
    ms = int(round(float(value)))
    if ms % 86_400_000 == 0:
        unit = "D"
    elif ms % 60_000 == 0:
        unit = "m"
    elif ms % 1000 == 0:
        unit = "s"
    else:
        unit = "ms"
    return np.datetime_as_string(np.datetime64(ms, "ms"), unit=unit).replace("T", " ")


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))
