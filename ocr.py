"""PaddleOCR text extraction for card crops.

The scan depends only on the ``OcrEngine`` protocol: something that turns
an image into recognized text lines. ``load_engine()`` builds the
production engine, a two-stage PaddleOCR pipeline (text detection followed
by text recognition) loaded from local inference-model directories. Tests
substitute a stub engine.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import numpy as np

from config import OCR_LANGUAGE
from crop import SubImage
from exceptions import ModelLoadError, OcrError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawDetection:
    """One line of OCR output and the card slot it came from."""

    text: str
    slot: int
    confidence: Optional[float] = None


class OcrEngine(Protocol):
    """Recognizes text lines in an image."""

    def read_lines(self, image: np.ndarray) -> list[tuple[str, Optional[float]]]:
        """Return ``(text, confidence)`` for each text region, top to bottom."""
        ...


class PaddleOcrEngine:
    """``OcrEngine`` backed by a constructed ``paddleocr.PaddleOCR`` instance."""

    def __init__(self, paddle) -> None:
        self._paddle = paddle

    def read_lines(self, image: np.ndarray) -> list[tuple[str, Optional[float]]]:
        # One entry per input image; None when nothing was detected.
        result = self._paddle.ocr(image, cls=False)
        if not result or result[0] is None:
            return []

        lines = []
        for _box, (text, score) in result[0]:
            lines.append((text, float(score)))
        return lines


def _check_model_dir(path: Path) -> None:
    if not path.is_dir():
        raise ModelLoadError(path, "model directory not found")
    if not any(path.iterdir()):
        raise ModelLoadError(path, "model directory is empty")


def load_engine(
    detection_model_dir: Path,
    recognition_model_dir: Path,
    language: str = OCR_LANGUAGE,
) -> OcrEngine:
    """Build the two-stage PaddleOCR engine from local model files.

    Construction is expensive; build one engine per scan and reuse it for
    every card slot.

    Args:
        detection_model_dir: Directory holding the text-detection model.
        recognition_model_dir: Directory holding the text-recognition model.
        language: PaddleOCR language code for the recognition dictionary.

    Returns:
        A ready ``OcrEngine``.

    Raises:
        ModelLoadError: If either directory is missing or empty, or
            PaddleOCR fails to load the models.
    """
    _check_model_dir(detection_model_dir)
    _check_model_dir(recognition_model_dir)

    # Imported here: paddle is slow to import and only needed for real scans.
    try:
        from paddleocr import PaddleOCR
    except ImportError as exc:
        raise ModelLoadError(None, f"paddleocr is not installed ({exc})") from exc

    try:
        paddle = PaddleOCR(
            det_model_dir=str(detection_model_dir),
            rec_model_dir=str(recognition_model_dir),
            use_angle_cls=False,
            lang=language,
            show_log=False,
        )
    except Exception as exc:
        # Paddle raises a mix of RuntimeError, ValueError and its own
        # error types for corrupt or mismatched model files.
        raise ModelLoadError(detection_model_dir.parent, str(exc)) from exc

    logger.info(
        "Loaded OCR models (detection=%s, recognition=%s)",
        detection_model_dir, recognition_model_dir,
    )
    return PaddleOcrEngine(paddle)


def recognize(engine: OcrEngine, card: SubImage) -> list[RawDetection]:
    """Run OCR on one card crop.

    Text containing line breaks is split so that every line becomes its
    own detection. Empty lines are kept; filtering happens downstream.

    Args:
        engine: The engine built for this scan.
        card: The card crop to read.

    Returns:
        The detections in engine output order.

    Raises:
        OcrError: If the engine fails on this crop.
    """
    try:
        lines = engine.read_lines(card.image)
    except Exception as exc:
        raise OcrError(card.index, str(exc)) from exc

    detections = [
        RawDetection(text=line, slot=card.index, confidence=confidence)
        for text, confidence in lines
        for line in text.split("\n")
    ]
    logger.debug(
        "Slot %d: %s", card.index, [detection.text for detection in detections],
    )
    return detections
