"""Label models: one observation per shot segment, and the ranked per-file set."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LabelObservation(BaseModel):
    """A single (label, confidence) pair read from one shot-label segment."""

    label: str
    confidence: float = Field(ge=0.0, le=1.0)


class RankedLabel(BaseModel):
    """One entry of a RankedLabelSet."""

    label: str
    confidence: float


class RankedLabelSet(BaseModel):
    """Labels of one file, ordered by descending confidence.

    Built fresh for every file by ``ranking.rank_labels`` and rendered
    once into the output log.
    """

    labels: list[RankedLabel] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.labels)

    def as_pairs(self) -> list[tuple[str, float]]:
        return [(item.label, item.confidence) for item in self.labels]

    def render(self, digits: int = 2) -> str:
        """Render as ``{label1=0.98, label2=0.76}``; an empty set renders ``{}``."""
        body = ", ".join(f"{item.label}={item.confidence:.{digits}f}" for item in self.labels)
        return "{" + body + "}"
