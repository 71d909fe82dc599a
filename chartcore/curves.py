from __future__ import annotations

import math
from typing import Sequence

from chartcore.specs import CurveType


Point = tuple[float, float]
PathCommand = tuple


def build_line_path(points: Sequence[Point], curve: CurveType = CurveType.LINEAR) -> str:
    if not points:
        return ""
    if len(points) == 1:
        x, y = points[0]
        return f"M{_fmt(x)},{_fmt(y)}Z"
    return format_path(curve_commands(points, curve))


def build_area_path(upper: Sequence[Point], lower: Sequence[Point], curve: CurveType = CurveType.LINEAR) -> str:
    if not upper:
        return ""
    if len(upper) != len(lower):
        raise ValueError("area upper and lower lines must have the same length")
    top = curve_commands(upper, curve)
    bottom = curve_commands(list(reversed(lower)), curve)
    bottom[0] = ("L",) + tuple(bottom[0][1:])
    return format_path(top + bottom) + "Z"


def curve_commands(points: Sequence[Point], curve: CurveType) -> list[PathCommand]:
    pts = [(float(x), float(y)) for x, y in points]
    if len(pts) < 2:
        return [("M", *pts[0])] if pts else []
    curve = CurveType(curve)
    if curve == CurveType.LINEAR:
        return _linear(pts)
    if curve == CurveType.STEP:
        return _step(pts, 0.5)
    if curve == CurveType.STEP_BEFORE:
        return _step(pts, 0.0)
    if curve == CurveType.STEP_AFTER:
        return _step(pts, 1.0)
    if curve == CurveType.MONOTONE_X:
        return _monotone_x(pts)
    if curve == CurveType.BASIS:
        return _basis(pts)
    raise ValueError(f"unsupported curve: {curve}")


def format_path(commands: Sequence[PathCommand]) -> str:
    out: list[str] = []
    for code, *args in commands:
        pairs = [f"{_fmt(args[i])},{_fmt(args[i + 1])}" for i in range(0, len(args), 2)]
        out.append(code + ",".join(pairs))
    return "".join(out)


def _linear(pts: list[Point]) -> list[PathCommand]:
    commands: list[PathCommand] = [("M", *pts[0])]
    commands.extend(("L", x, y) for x, y in pts[1:])
    return commands


def _step(pts: list[Point], t: float) -> list[PathCommand]:
    commands: list[PathCommand] = [("M", *pts[0])]
    prev_x, prev_y = pts[0]
    for x, y in pts[1:]:
        if t <= 0:
            commands.append(("L", prev_x, y))
            commands.append(("L", x, y))
        else:
            mid = prev_x * (1.0 - t) + x * t
            commands.append(("L", mid, prev_y))
            commands.append(("L", mid, y))
        prev_x, prev_y = x, y
    if 0 < t < 1:
        commands.append(("L", prev_x, prev_y))
    return commands


def _monotone_x(pts: list[Point]) -> list[PathCommand]:
    n = len(pts)
    if n == 2:
        return _linear(pts)
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    widths = [xs[i + 1] - xs[i] for i in range(n - 1)]
    secants = [(ys[i + 1] - ys[i]) / widths[i] if widths[i] else 0.0 for i in range(n - 1)]

    tangents = [0.0] * n
    for i in range(1, n - 1):
        h0, h1 = widths[i - 1], widths[i]
        s0, s1 = secants[i - 1], secants[i]
        p = (s0 * h1 + s1 * h0) / (h0 + h1) if (h0 + h1) else 0.0
        t = (_sign(s0) + _sign(s1)) * min(abs(s0), abs(s1), 0.5 * abs(p))
        tangents[i] = t if math.isfinite(t) else 0.0
    tangents[0] = (3.0 * secants[0] - tangents[1]) / 2.0 if widths[0] else tangents[1]
    tangents[-1] = (3.0 * secants[-1] - tangents[-2]) / 2.0 if widths[-1] else tangents[-2]

    commands: list[PathCommand] = [("M", xs[0], ys[0])]
    for i in range(n - 1):
        dx = widths[i] / 3.0
        commands.append(
            (
                "C",
                xs[i] + dx,
                ys[i] + dx * tangents[i],
                xs[i + 1] - dx,
                ys[i + 1] - dx * tangents[i + 1],
                xs[i + 1],
                ys[i + 1],
            )
        )
    return commands


def _basis(pts: list[Point]) -> list[PathCommand]:
    if len(pts) == 2:
        return _linear(pts)
    (x0, y0), (x1, y1) = pts[0], pts[1]
    commands: list[PathCommand] = [("M", x0, y0), ("L", (5.0 * x0 + x1) / 6.0, (5.0 * y0 + y1) / 6.0)]

    def bezier(ax: float, ay: float, bx: float, by: float, x: float, y: float) -> PathCommand:
        return (
            "C",
            (2.0 * ax + bx) / 3.0,
            (2.0 * ay + by) / 3.0,
            (ax + 2.0 * bx) / 3.0,
            (ay + 2.0 * by) / 3.0,
            (ax + 4.0 * bx + x) / 6.0,
            (ay + 4.0 * by + y) / 6.0,
        )

    for x, y in pts[2:]:
        commands.append(bezier(x0, y0, x1, y1, x, y))
        x0, y0, x1, y1 = x1, y1, x, y
    commands.append(bezier(x0, y0, x1, y1, x1, y1))
    commands.append(("L", x1, y1))
    return commands


def _sign(value: float) -> float:
    return -1.0 if value < 0 else 1.0


def _fmt(value: float) -> str:
    out = f"{float(value):.6f}".rstrip("0").rstrip(".")
    return "0" if out in ("-0", "") else out
