"""
Base class for the extraction strategies.

Each strategy receives the OCR result and the normalized requested day and
returns a StrategyResult; the parser chains them column -> row -> text.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..config import DEFAULT_CONFIG, ExtractionConfig
from ..models import OcrResult, StrategyResult


class BaseExtractor(ABC):
    """Interface every extraction strategy implements."""

    mode: str = ""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or DEFAULT_CONFIG

    @abstractmethod
    def extract(self, ocr_result: OcrResult, requested_day: str) -> StrategyResult:
        """
        Extract timetable entries for one day.

        Args:
            ocr_result: Materialized OCR output
            requested_day: Canonical (normalized) day name

        Returns:
            StrategyResult; empty when the strategy does not apply
        """
        ...
