"""Shared test helpers.

Provides a stub OCR engine so that scans can run without PaddleOCR or its
model files, and a factory for fake captured frames. Test modules import
these directly (``from conftest import StubEngine``).
"""

from typing import Optional

import numpy as np


class StubEngine:
    """``OcrEngine`` returning canned text lines per call.

    Args:
        outputs: One list of lines per ``read_lines()`` call, consumed in
            order. Calls beyond the end return no lines.
    """

    def __init__(self, outputs: Optional[list[list[str]]] = None) -> None:
        self.outputs = list(outputs or [])
        self.images: list[np.ndarray] = []

    def read_lines(self, image: np.ndarray) -> list[tuple[str, Optional[float]]]:
        self.images.append(image)
        if not self.outputs:
            return []
        return [(text, 0.99) for text in self.outputs.pop(0)]


def make_frame(width: int = 1920, height: int = 1080) -> np.ndarray:
    """Create a black BGR frame of the given size."""
    return np.zeros((height, width, 3), dtype=np.uint8)
