from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
import logging
from pathlib import Path
from typing import Callable, Iterator, Protocol

from PIL import ImageFont

LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "Comic Mono"
MONO_FONT_FALLBACK_PATTERNS = (
    "comicmono",
    "comic mono",
    "menlo",
    "monaco",
    "courier new",
    "courier",
    "dejavusansmono",
    "dejavu sans mono",
)


@dataclass(frozen=True)
class BBox:
    width: float
    height: float


class TextMeasurer(Protocol):
    def measure_text(self, text: str, font_size_px: float, font_family: str) -> BBox:
        ...

    def destroy(self) -> None:
        ...


MeasurerFactory = Callable[[], TextMeasurer]


@contextmanager
def measurement_scope(factory: MeasurerFactory) -> Iterator[TextMeasurer]:
    """Create a measurer for one layout pass and always release it."""
    measurer = factory()
    try:
        yield measurer
    finally:
        measurer.destroy()


class PillowTextMeasurer:
    """Measures label bounding boxes with Pillow font metrics."""

    def __init__(self) -> None:
        self._fonts: dict[tuple[str, int], ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}
        self._destroyed = False

    def measure_text(self, text: str, font_size_px: float, font_family: str) -> BBox:
        if self._destroyed:
            raise RuntimeError("text measurer used after destroy()")
        font = self._font(font_family, font_size_px)
        if not text:
            # Empty labels still occupy one line.
            _, top, _, bottom = font.getbbox("Ag")
            return BBox(width=0.0, height=float(max(1, bottom - top)))
        left, top, right, bottom = font.getbbox(text)
        return BBox(width=float(max(0, right - left)), height=float(max(1, bottom - top)))

    def destroy(self) -> None:
        self._fonts.clear()
        self._destroyed = True

    def _font(self, font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        size = max(1, int(round(font_size_px)))
        key = (font_family, size)
        font = self._fonts.get(key)
        if font is None:
            font = _load_font(font_family, size)
            self._fonts[key] = font
        return font


class FixedWidthTextMeasurer:
    """Deterministic metrics for headless layout: every glyph is `char_width` wide."""

    def __init__(self, char_width: float = 6.0, line_height_ratio: float = 1.2) -> None:
        if char_width < 0 or line_height_ratio < 0:
            raise ValueError("char_width and line_height_ratio must be >= 0")
        self.char_width = float(char_width)
        self.line_height_ratio = float(line_height_ratio)
        self.destroyed = False

    def measure_text(self, text: str, font_size_px: float, font_family: str) -> BBox:
        if self.destroyed:
            raise RuntimeError("text measurer used after destroy()")
        lines = text.split("\n") if text else [""]
        width = max(len(line) for line in lines) * self.char_width
        return BBox(width=width, height=len(lines) * font_size_px * self.line_height_ratio)

    def destroy(self) -> None:
        self.destroyed = True


def _load_font(font_family: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default()
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        LOGGER.warning("could not load font %s; using Pillow default", font_path)
        return ImageFont.load_default()


@lru_cache(maxsize=32)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() if font_family.strip() else DEFAULT_FONT_FAMILY.lower()
    patterns = (wanted,) + MONO_FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            if p in path.name.lower().replace(" ", ""):
                return path
    return None
