"""Loading and cleanup of photographed timetables before OCR."""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image, ImageOps

from .utils import SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)


class DocumentPreprocessor:
    """Turns an uploaded photo into an OCR-ready BGR image."""

    def __init__(self, max_dimension: int = 3000, denoise: bool = True):
        """
        Initialize the document preprocessor.

        Args:
            max_dimension: Longest edge after resizing
            denoise: Apply non-local-means denoising before contrast boost
        """
        self.supported_image_formats = SUPPORTED_EXTENSIONS
        self.max_dimension = max_dimension
        self.denoise = denoise

    def process(self, file_path: Union[str, Path]) -> np.ndarray:
        """
        Load an image file and prepare it for OCR.

        Args:
            file_path: Path to the image

        Returns:
            Preprocessed image as numpy array (BGR)

        Raises:
            ValueError: If the format is unsupported or the file cannot be read
        """
        file_path = Path(file_path)
        extension = file_path.suffix.lower()
        if extension not in self.supported_image_formats:
            raise ValueError(f"Unsupported file format: {extension}")

        try:
            with Image.open(file_path) as img:
                # Phone photos store rotation in EXIF instead of the pixels
                img = ImageOps.exif_transpose(img).convert('RGB')
                img_array = cv2.cvtColor(np.array(img), cv2.COLOR_RGB2BGR)
        except (OSError, SyntaxError) as e:
            raise ValueError(f"Error processing image {file_path}: {e}")

        logger.debug("Loaded image %s: shape=%s", file_path.name, img_array.shape)
        return self._preprocess_image(self.resize_for_ocr(img_array, self.max_dimension))

    def _preprocess_image(self, image: np.ndarray) -> np.ndarray:
        """
        Apply preprocessing to improve OCR accuracy.

        Args:
            image: Input image as numpy array (BGR format from OpenCV)

        Returns:
            Preprocessed image (BGR format)
        """
        if self.denoise:
            image = cv2.fastNlMeansDenoisingColored(image, None, 10, 10, 7, 21)

        # Enhance contrast using CLAHE on the lightness channel
        lab = cv2.cvtColor(image, cv2.COLOR_BGR2LAB)
        l, a, b = cv2.split(lab)
        clahe = cv2.createCLAHE(clipLimit=3.0, tileGridSize=(8, 8))
        l = clahe.apply(l)
        enhanced = cv2.merge([l, a, b])
        return cv2.cvtColor(enhanced, cv2.COLOR_LAB2BGR)

    @staticmethod
    def resize_for_ocr(image: np.ndarray, max_dimension: int = 3000) -> np.ndarray:
        """
        Resize image if too large, maintaining aspect ratio.

        Args:
            image: Input image
            max_dimension: Maximum width or height

        Returns:
            Resized image
        """
        h, w = image.shape[:2]

        if max(h, w) > max_dimension:
            scale = max_dimension / max(h, w)
            new_w = int(w * scale)
            new_h = int(h * scale)
            return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)

        return image
