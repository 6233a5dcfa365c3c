"""Pydantic models for label observations and batch results."""

from .batch import BatchFileItem, BatchResult
from .labels import LabelObservation, RankedLabel, RankedLabelSet

__all__ = [
    "BatchFileItem",
    "BatchResult",
    "LabelObservation",
    "RankedLabel",
    "RankedLabelSet",
]
