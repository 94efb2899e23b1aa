"""Extraction strategies, tried in order by the timetable parser."""

from .base import BaseExtractor
from .column import ColumnLayoutExtractor
from .row import RowLayoutExtractor
from .text import TextOnlyExtractor

__all__ = [
    'BaseExtractor',
    'ColumnLayoutExtractor',
    'RowLayoutExtractor',
    'TextOnlyExtractor',
]
