"""Sequential labels-file batch: enumerate, annotate, rank, append."""

from __future__ import annotations

import logging
from pathlib import Path

from .client import AnnotationClient
from .config import BatchConfig, get_config
from .errors import LabelBatchError, make_batch_error
from .models.batch import BatchFileItem, BatchResult
from .models.labels import RankedLabelSet
from .ranking import rank_labels
from .scanner import list_directory_files, read_video_bytes
from .writer import ResultWriter

logger = logging.getLogger(__name__)


async def _label_one_file(path: Path, cfg: BatchConfig) -> RankedLabelSet:
    """Read, annotate and rank one file. Returns a fresh RankedLabelSet."""
    data = await read_video_bytes(path)
    labels = await AnnotationClient.annotate_labels(
        data,
        timeout=cfg.operation_timeout,
        aggregation=cfg.aggregation,
    )
    return rank_labels(labels, tie_break=cfg.tie_break)


async def run_labels_file(directory: str, *, config: BatchConfig | None = None) -> BatchResult:
    """Label every file in *directory* and append one line per file to the output log.

    Files are processed strictly one after another. The output log is
    opened once for the whole run and closed on every exit path.

    Args:
        directory: Directory whose regular files are submitted (non-recursive).
        config: Overrides the global config.

    Returns:
        BatchResult with totals and per-file items.

    Raises:
        DirectoryError: If the directory cannot be enumerated.
        LabelBatchError: On the first per-file failure unless
            ``continue_on_error`` is set.
    """
    cfg = config or get_config()
    files = list_directory_files(directory)
    items: list[BatchFileItem] = []

    with ResultWriter(cfg.output_path, digits=cfg.confidence_digits) as writer:
        for idx, path in enumerate(files, start=1):
            logger.info("[%d/%d] File name is %s", idx, len(files), path.name)
            try:
                ranked = await _label_one_file(path, cfg)
            except LabelBatchError as exc:
                if exc.fatal or not cfg.continue_on_error:
                    raise
                logger.error("Skipping %s: %s", path.name, exc)
                items.append(BatchFileItem(
                    file_name=path.name,
                    file_path=str(path),
                    error=make_batch_error(exc),
                ))
                continue

            writer.write_record(path.name, ranked)
            items.append(BatchFileItem(file_name=path.name, file_path=str(path), labels=ranked))
            logger.info("Operation completed for file --> %s", path.name)

    successful = sum(1 for i in items if i.ok)
    return BatchResult(
        directory=str(directory),
        output_path=str(writer.path),
        total_files=len(files),
        successful=successful,
        failed=len(items) - successful,
        lines_written=writer.lines_written,
        items=items,
    )
