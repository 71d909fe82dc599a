from __future__ import annotations

from collections.abc import Mapping, Sequence
import math
from typing import Any

import numpy as np

from chartcore.errors import ChartSpecError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_dataset(data: Any) -> list[Any]:
    """Turn a raw dataset into a list of records the accessors can read.

    Records stay as given (mappings or sequences); column-oriented inputs
    are zipped into dict records.
    """

    if data is None:
        return []

    if pd is not None and isinstance(data, pd.DataFrame):
        return [_clean_record(rec) for rec in data.to_dict(orient="records")]

    if isinstance(data, Mapping):
        return _records_from_columns(data)

    if isinstance(data, np.ndarray):
        if data.ndim == 1:
            return _finite_values(data.tolist())
        if data.ndim == 2:
            return [_finite_values(row) for row in data.tolist()]
        raise ChartSpecError("ndarray dataset must be 1-D or 2-D")

    if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
        return list(data)

    if hasattr(data, "__iter__") and not isinstance(data, (str, bytes, bytearray)):
        return list(data)

    raise ChartSpecError(f"unsupported dataset type: {type(data)!r}")


def _records_from_columns(columns: Mapping[Any, Any]) -> list[dict[Any, Any]]:
    if not columns:
        return []
    converted = {key: _column_values(key, values) for key, values in columns.items()}
    lengths = {len(values) for values in converted.values()}
    if len(lengths) != 1:
        detail = ", ".join(f"{key}={len(values)}" for key, values in converted.items())
        raise ChartSpecError(f"dataset columns length mismatch: {detail}")
    size = lengths.pop()
    keys = list(converted)
    return [{key: converted[key][i] for key in keys} for i in range(size)]


def _column_values(key: Any, values: Any) -> list[Any]:
    if torch is not None and isinstance(values, torch.Tensor):
        tensor = values.detach()
        if tensor.ndim != 1:
            raise ChartSpecError(f"column {key!r} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _finite_values(tensor.tolist())

    if pd is not None and isinstance(values, pd.Series):
        return [_clean_value(v) for v in values.tolist()]

    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise ChartSpecError(f"column {key!r} must be 1-D")
        return _finite_values(values.tolist())

    if isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
        return list(values)

    raise ChartSpecError(f"unsupported column {key!r} type: {type(values)!r}")


def _clean_record(record: Mapping[Any, Any]) -> dict[Any, Any]:
    return {key: _clean_value(value) for key, value in record.items()}


def _clean_value(value: Any) -> Any:
    # pandas represents missing cells as NaN/NaT/NA; accessors treat None as a gap.
    if pd is not None:
        try:
            if pd.isna(value):
                return None
        except (TypeError, ValueError):
            return value
    return value


def _finite_values(values: list[Any]) -> list[Any]:
    # NaN/inf from numeric arrays become None so equal inputs give equal records.
    return [None if isinstance(v, float) and not math.isfinite(v) else v for v in values]
