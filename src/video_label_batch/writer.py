"""Append-only output log for per-file label summaries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from .models.labels import RankedLabelSet
from .ranking import format_record

logger = logging.getLogger(__name__)


class ResultWriter:
    """Append one line per processed file to a shared log.

    The file is opened once in append mode (UTF-8) and closed exactly once,
    either by :meth:`close` or when leaving the ``with`` block, whatever the
    exit path. Existing content is never truncated.
    """

    def __init__(self, path: str | Path, *, digits: int = 2) -> None:
        self.path = Path(path)
        self.digits = digits
        self.lines_written = 0
        self._fh: TextIO | None = None

    def open(self) -> ResultWriter:
        if self._fh is not None:
            raise RuntimeError(f"Output log already open: {self.path}")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8", newline="\n")
        logger.debug("Opened output log %s", self.path)
        return self

    def write_record(self, file_name: str, ranked: RankedLabelSet) -> str:
        """Append ``<file-name> <rendered-set>`` and return the line written."""
        if self._fh is None:
            raise RuntimeError("Output log is not open")
        line = format_record(file_name, ranked, self.digits)
        self._fh.write(line + "\n")
        self.lines_written += 1
        return line

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.flush()
        finally:
            self._fh.close()
            self._fh = None
        logger.debug("Closed output log %s (%d line(s))", self.path, self.lines_written)

    @property
    def closed(self) -> bool:
        return self._fh is None

    def __enter__(self) -> ResultWriter:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()
