"""Shot-label aggregation and confidence ranking."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from .models.labels import LabelObservation, RankedLabel, RankedLabelSet

logger = logging.getLogger(__name__)


def iter_shot_label_observations(response: Any) -> Iterator[LabelObservation]:
    """Yield one observation per segment of every shot-level label annotation.

    Segment-level and frame-level label annotations are skipped.
    """
    for result in response.annotation_results:
        for annotation in result.shot_label_annotations:
            label = annotation.entity.description
            for segment in annotation.segments:
                yield LabelObservation(label=label, confidence=segment.confidence)


def collect_shot_labels(response: Any, aggregation: str = "last") -> dict[str, float]:
    """Aggregate an AnnotateVideoResponse into a label -> confidence mapping.

    Args:
        response: ``AnnotateVideoResponse`` (or anything shaped like one).
        aggregation: ``"last"`` keeps the last confidence seen for a repeated
            label; ``"max"`` keeps the highest.

    Returns:
        Mapping in first-seen label order.
    """
    if aggregation not in ("last", "max"):
        raise ValueError(f"Invalid aggregation '{aggregation}'")

    labels: dict[str, float] = {}
    for obs in iter_shot_label_observations(response):
        if aggregation == "max" and obs.label in labels:
            labels[obs.label] = max(labels[obs.label], obs.confidence)
        else:
            labels[obs.label] = obs.confidence
    logger.debug("Collected %d shot label(s)", len(labels))
    return labels


def rank_labels(labels: Mapping[str, float], tie_break: str = "label") -> RankedLabelSet:
    """Order labels by descending confidence.

    Args:
        labels: Mapping from label text to confidence.
        tie_break: ``"label"`` orders equal confidences lexicographically;
            ``"insertion"`` keeps the mapping's order (stable sort).
    """
    if tie_break == "label":
        ordered = sorted(labels.items(), key=lambda kv: (-kv[1], kv[0]))
    elif tie_break == "insertion":
        ordered = sorted(labels.items(), key=lambda kv: kv[1], reverse=True)
    else:
        raise ValueError(f"Invalid tie-break '{tie_break}'")
    return RankedLabelSet(labels=[RankedLabel(label=k, confidence=v) for k, v in ordered])


# Every character str.splitlines() treats as a line boundary.
_LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"
_LINE_BREAK_ESCAPES = str.maketrans({
    ch: ch.encode("unicode_escape").decode("ascii") for ch in _LINE_BREAKS
})


def format_record(file_name: str, ranked: RankedLabelSet, digits: int = 2) -> str:
    """Build one output line (without the trailing newline).

    Line breaks inside the file name or a label are written as escape
    sequences (``\\n``, ``\\x85``, ...) so each file yields exactly one line.
    """
    return f"{file_name} {ranked.render(digits)}".translate(_LINE_BREAK_ESCAPES)
