"""One-shot lobby scan: window -> capture -> crop -> OCR -> match.

Every stage is a blocking call and any failure aborts the scan with a
``ScanError`` subclass; no partial results are returned. Only one scan may
run at a time because the OCR engine is not built for concurrent use.
"""

import logging
import threading
from pathlib import Path
from typing import Iterable, Optional

from blacklist import KnownEntry
from capture import capture_window, find_window
from config import DETECTION_MODEL_DIR, RECOGNITION_MODEL_DIR, WINDOW_TITLE
from crop import RISK_LAYOUT, GridLayout, crop_cards, save_debug_crops
from exceptions import ScanInProgressError, WindowNotFoundError
from ocr import OcrEngine, RawDetection, load_engine, recognize
from parse import ScanResult, aggregate

logger = logging.getLogger(__name__)

_scan_lock = threading.Lock()


def scan(
    known_entries: Iterable[KnownEntry],
    *,
    title: str = WINDOW_TITLE,
    layout: GridLayout = RISK_LAYOUT,
    engine: Optional[OcrEngine] = None,
    detection_model_dir: Path = DETECTION_MODEL_DIR,
    recognition_model_dir: Path = RECOGNITION_MODEL_DIR,
    debug_dir: Optional[Path] = None,
) -> list[ScanResult]:
    """Scan the lobby for known players.

    Args:
        known_entries: Players to match against; not modified.
        title: Exact title of the game window.
        layout: Player-list geometry for the window's resolution.
        engine: A prebuilt OCR engine. When ``None``, one is loaded from
            the model directories for this scan.
        detection_model_dir: Text-detection model used when *engine* is
            ``None``.
        recognition_model_dir: Text-recognition model used when *engine*
            is ``None``.
        debug_dir: If set, the captured frame and every card crop are
            written there as PNG files.

    Returns:
        The unfiltered cross product of detections and known entries.
        Use ``parse.rank_results()`` to threshold and sort it.

    Raises:
        ScanInProgressError: If another scan is running.
        WindowNotFoundError: If no window has the given title.
        CaptureFailedError: If the window cannot be captured.
        LayoutError: If the frame is smaller than the player list.
        ModelLoadError: If the OCR models cannot be loaded.
        OcrError: If OCR fails on any card slot.
    """
    if not _scan_lock.acquire(blocking=False):
        raise ScanInProgressError()

    try:
        known = list(known_entries)

        window = find_window(title)
        if window is None:
            raise WindowNotFoundError(title)

        frame = capture_window(window)
        cards = crop_cards(frame, layout)
        if debug_dir is not None:
            save_debug_crops(frame, cards, debug_dir)

        if engine is None:
            engine = load_engine(detection_model_dir, recognition_model_dir)

        detections: list[RawDetection] = []
        for card in cards:
            detections.extend(recognize(engine, card))
        logger.info("Read %d text lines from %d cards", len(detections), len(cards))

        return aggregate(detections, known)
    finally:
        _scan_lock.release()
