from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from timetable_engine.preprocessor import DocumentPreprocessor


def _png(tmp_path: Path, size: tuple = (40, 30)) -> Path:
    path = tmp_path / 'timetable.png'
    Image.new('RGB', size, 'white').save(path)
    return path


def test_process_returns_bgr_array(tmp_path: Path) -> None:
    image = DocumentPreprocessor().process(_png(tmp_path))

    assert image.shape == (30, 40, 3)
    assert image.dtype == np.uint8


def test_exif_rotation_is_applied(tmp_path: Path) -> None:
    path = tmp_path / 'photo.jpg'
    img = Image.new('RGB', (40, 30), 'white')
    exif = img.getexif()
    exif[0x0112] = 6  # rotated 90 degrees clockwise
    img.save(path, exif=exif)

    image = DocumentPreprocessor(denoise=False).process(path)

    assert image.shape == (40, 30, 3)


def test_unsupported_format(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match='Unsupported'):
        DocumentPreprocessor().process(tmp_path / 'timetable.gif')


def test_unreadable_image(tmp_path: Path) -> None:
    path = tmp_path / 'broken.png'
    path.write_bytes(b'not an image')

    with pytest.raises(ValueError, match='Error processing image'):
        DocumentPreprocessor().process(path)


def test_resize_for_ocr_keeps_aspect_ratio() -> None:
    resized = DocumentPreprocessor.resize_for_ocr(np.zeros((2000, 4000, 3), dtype=np.uint8))
    assert resized.shape == (1500, 3000, 3)

    small = np.zeros((100, 200, 3), dtype=np.uint8)
    assert DocumentPreprocessor.resize_for_ocr(small) is small
