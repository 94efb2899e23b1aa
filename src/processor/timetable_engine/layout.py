"""Geometry helpers shared by the layout-aware extractors."""

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .models import OcrWord


@dataclass(frozen=True)
class RowSpan:
    """Bounding rectangle and joined text of a row of words."""
    x0: float
    y0: float
    x1: float
    y1: float
    text: str


def positioned_words(words: Iterable[OcrWord]) -> List[OcrWord]:
    """Words that carry a bounding box, sorted top to bottom then left to right."""
    return sorted(
        (w for w in words if w.bbox is not None),
        key=lambda w: (w.bbox.y0, w.bbox.x0),
    )


def bucket_rows(words: Sequence[OcrWord], tolerance: float) -> List[List[OcrWord]]:
    """
    Group words into visual rows by the top edge of their boxes.

    A word joins the last row when its top edge is within ``tolerance`` of the
    most recently added word in that row, otherwise it opens a new row.

    Args:
        words: Words sorted by (y0, x0)
        tolerance: Maximum vertical distance in pixels

    Returns:
        List of rows, each a list of words
    """
    rows: List[List[OcrWord]] = []
    for word in words:
        if not (word.text or '').strip():
            continue
        if rows and abs(word.bbox.y0 - rows[-1][-1].bbox.y0) <= tolerance:
            rows[-1].append(word)
        else:
            rows.append([word])
    return rows


def join_text(words: Iterable[OcrWord]) -> str:
    return ' '.join(w.text for w in words).strip()


def row_span(row: Sequence[OcrWord]) -> RowSpan:
    return RowSpan(
        x0=min(w.bbox.x0 for w in row),
        y0=min(w.bbox.y0 for w in row),
        x1=max(w.bbox.x1 for w in row),
        y1=max(w.bbox.y1 for w in row),
        text=join_text(row),
    )


def overlaps_vertically(a0: float, a1: float, b0: float, b1: float, tolerance: float = 0.0) -> bool:
    """True when [a0, a1] meets [b0 - tolerance, b1 + tolerance]."""
    return min(a1, b1 + tolerance) >= max(a0, b0 - tolerance)


def horizontal_overlap_ratio(a: RowSpan, b: RowSpan) -> float:
    """Intersection over union of the two spans' x ranges."""
    intersection = max(0.0, min(a.x1, b.x1) - max(a.x0, b.x0))
    union = max(a.x1, b.x1) - min(a.x0, b.x0)
    return intersection / union if union > 0 else 0.0
