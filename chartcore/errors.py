from __future__ import annotations


class ChartSpecError(ValueError):
    """Raised for structurally invalid specs; malformed data never raises."""
