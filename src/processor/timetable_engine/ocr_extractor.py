"""OCR extraction using PaddleOCR."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .models import BoundingBox, OcrLine, OcrResult, OcrWord

logger = logging.getLogger(__name__)


def _polygon(raw_box) -> Optional[List[List[float]]]:
    """Coerce a 4-point polygon or an [x1, y1, x2, y2] box into a point list."""
    try:
        points = [[float(p[0]), float(p[1])] for p in raw_box]
        if len(points) >= 4:
            return points
    except (TypeError, IndexError):
        pass
    try:
        x1, y1, x2, y2 = map(float, raw_box)
        return [[x1, y1], [x2, y1], [x2, y2], [x1, y2]]
    except (TypeError, ValueError):
        return None


def _item(text, raw_box, confidence: float) -> Optional[Dict[str, Any]]:
    text = str(text).strip() if text is not None else ""
    if not text:
        return None
    bbox = _polygon(raw_box) if raw_box is not None else None
    if bbox:
        center = (sum(p[0] for p in bbox) / len(bbox), sum(p[1] for p in bbox) / len(bbox))
    else:
        center = (0.0, 0.0)
    return {'text': text, 'bbox': bbox, 'confidence': float(confidence), 'center': center}


def parse_paddle_output(result) -> List[Dict[str, Any]]:
    """
    Normalize raw PaddleOCR output into text items.

    PaddleOCR has had API changes: older versions return a list of
    (bbox, (text, confidence)) pairs, the newer pipeline returns a dict with
    'rec_texts', 'rec_scores' and 'rec_polys' or 'rec_boxes'. Both are handled.

    Args:
        result: Whatever ``PaddleOCR.ocr``/``predict`` returned

    Returns:
        List of dictionaries containing:
            - text: Recognized text
            - bbox: Polygon [[x1,y1], [x2,y2], [x3,y3], [x4,y4]] or None
            - confidence: Confidence score (0-1)
            - center: Pixel centre (x, y)
    """
    if not result:
        return []

    items = []
    first = result[0]

    if isinstance(first, dict) and 'rec_texts' in first:
        # Newer releases may hand back numpy arrays here
        texts = list(first.get('rec_texts', []))
        scores = list(first.get('rec_scores', []))
        polys = first.get('rec_polys')
        if polys is None:
            polys = first.get('rec_boxes')
        for idx, text in enumerate(texts):
            confidence = scores[idx] if idx < len(scores) else 0.0
            raw_box = polys[idx] if polys is not None and idx < len(polys) else None
            item = _item(text, raw_box, confidence)
            if item:
                items.append(item)
    else:
        for line in first if isinstance(first, list) else result:
            try:
                raw_box, (text, confidence) = line[0], line[1]
            except (TypeError, ValueError, IndexError) as e:
                logger.warning("Skipping malformed OCR result: %s", e)
                continue
            item = _item(text, raw_box, confidence)
            if item and item['bbox']:
                items.append(item)

    # Top to bottom, then left to right
    items.sort(key=lambda x: (x['center'][1], x['center'][0]))
    return items


def split_words(text: str, box: Optional[BoundingBox], confidence: float = 0.0) -> Tuple[OcrWord, ...]:
    """
    Split a detected text box into words.

    PaddleOCR boxes whole phrases; each word gets the slice of the box width
    proportional to its character offsets.

    Args:
        text: Recognized text of the box
        box: Box around the whole text
        confidence: Score copied onto every word

    Returns:
        Tuple of OcrWord
    """
    tokens = text.split()
    if not tokens:
        return ()
    if box is None or len(tokens) == 1:
        return tuple(OcrWord(text=t, bbox=box, confidence=confidence) for t in tokens)

    per_char = box.width / max(len(text), 1)
    words = []
    cursor = 0
    for token in tokens:
        start = text.index(token, cursor)
        end = start + len(token)
        cursor = end
        words.append(OcrWord(
            text=token,
            bbox=BoundingBox(box.x0 + start * per_char, box.y0, box.x0 + end * per_char, box.y1),
            confidence=confidence,
        ))
    return tuple(words)


def group_text_by_rows(items: Sequence[Dict[str, Any]], row_tolerance: float) -> List[List[Dict[str, Any]]]:
    """
    Group text items into rows based on vertical position.

    Args:
        items: Items from parse_paddle_output, sorted top to bottom
        row_tolerance: Maximum pixel distance between centres in the same row

    Returns:
        List of rows, each sorted left to right
    """
    if not items:
        return []

    rows = []
    current_row = [items[0]]
    current_y = items[0]['center'][1]

    for item in items[1:]:
        y = item['center'][1]
        if abs(y - current_y) <= row_tolerance:
            current_row.append(item)
        else:
            rows.append(sorted(current_row, key=lambda x: x['center'][0]))
            current_row = [item]
            current_y = y

    rows.append(sorted(current_row, key=lambda x: x['center'][0]))
    return rows


def build_ocr_result(items: Sequence[Dict[str, Any]], row_tolerance: float = 12.0) -> OcrResult:
    """
    Convert text items into the OcrResult the parser consumes.

    Args:
        items: Items from parse_paddle_output
        row_tolerance: Pixel tolerance used to rebuild text lines

    Returns:
        OcrResult with words, lines and newline-separated full text
    """
    words: List[OcrWord] = []
    lines: List[OcrLine] = []

    for item in items:
        box = None
        if item.get('bbox'):
            xs = [p[0] for p in item['bbox']]
            ys = [p[1] for p in item['bbox']]
            box = BoundingBox(min(xs), min(ys), max(xs), max(ys))
        line_words = split_words(item['text'], box, item.get('confidence', 0.0))
        words.extend(line_words)
        lines.append(OcrLine(text=item['text'], bbox=box, words=line_words))

    rows = group_text_by_rows(items, row_tolerance)
    text = '\n'.join(' '.join(i['text'] for i in row) for row in rows)
    return OcrResult(text=text, words=tuple(words), lines=tuple(lines))


def calculate_confidence_score(items: Sequence[Dict[str, Any]]) -> float:
    """Average confidence (0-1) over the extracted items."""
    if not items:
        return 0.0
    return sum(item['confidence'] for item in items) / len(items)


class OCRExtractor:
    """Handles OCR extraction from images using PaddleOCR."""

    def __init__(self, use_gpu: bool = False, lang: str = 'en', row_tolerance: float = 12.0):
        """
        Initialize OCR extractor.

        Args:
            use_gpu: Whether to use GPU acceleration (note: gpu support requires paddlepaddle-gpu)
            lang: Language code for OCR (default: 'en')
            row_tolerance: Pixel tolerance for rebuilding text lines
        """
        try:
            from paddleocr import PaddleOCR
        except ImportError:
            raise ImportError(
                "paddleocr is required for OCR. "
                "Install with: pip install 'timetable-day-extractor[ocr]'"
            )

        self.use_gpu = use_gpu
        self.row_tolerance = row_tolerance
        self.ocr = PaddleOCR(
            use_angle_cls=True,  # Photos are often slightly rotated
            lang=lang,
            det_db_box_thresh=0.3,  # Lower threshold for faint print
            det_db_unclip_ratio=2.0,
        )

    def extract_text(self, image: np.ndarray) -> List[Dict[str, Any]]:
        """
        Run PaddleOCR on an image.

        Args:
            image: Input image as numpy array (BGR format from OpenCV)

        Returns:
            Text items as described in parse_paddle_output
        """
        if image is None or not isinstance(image, np.ndarray) or image.size == 0:
            logger.warning("Received an empty image, skipping OCR")
            return []

        items = parse_paddle_output(self.ocr.ocr(image))
        if not items:
            logger.warning("PaddleOCR returned no results")
        return items

    def recognize(self, image: np.ndarray) -> OcrResult:
        """
        Run OCR and package the output for the timetable parser.

        Args:
            image: Input image as numpy array (BGR)

        Returns:
            OcrResult
        """
        return build_ocr_result(self.extract_text(image), self.row_tolerance)
