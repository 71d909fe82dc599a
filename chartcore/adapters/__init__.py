from .records import normalize_dataset

__all__ = ["normalize_dataset"]
