"""Batch result models: output of ``runner.run_labels_file``.

BatchResult aggregates per-file outcomes from one directory run. Each file
either produced a ranked label set (and one output line) or failed with a
tagged BatchError when the run continues past per-file errors.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..errors import BatchError
from .labels import RankedLabelSet


class BatchFileItem(BaseModel):
    """Outcome for a single file in a batch run."""

    file_name: str
    file_path: str
    labels: RankedLabelSet | None = None
    error: BatchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchResult(BaseModel):
    """Totals and per-file items for one labels-file run."""

    directory: str
    output_path: str
    total_files: int
    successful: int
    failed: int
    lines_written: int = 0
    items: list[BatchFileItem] = Field(default_factory=list)
