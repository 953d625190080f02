"""Custom exception classes for the RISK lobby scanner.

All exceptions defined here are fatal to the scan in progress: any raise
aborts the remaining stages and no partial results are returned. Each one
names the stage that failed so the caller can show a single message.
"""

from pathlib import Path
from typing import Optional


class ScanError(Exception):
    """Base class for every scan failure.

    Args:
        stage: Short name of the pipeline stage that failed.
        message: Human-readable description of the failure.
    """

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")


class WindowNotFoundError(ScanError):
    """Raised when no on-screen window has the requested title.

    Enumeration errors are reported the same way; the two cases are not
    distinguished.

    Args:
        title: The exact window title that was searched for.
    """

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(
            "window lookup",
            f"no window titled '{title}' is open",
        )


class CaptureFailedError(ScanError):
    """Raised when the window cannot be captured.

    Covers windows that closed after lookup, minimized windows and errors
    from the screen capture backend.

    Args:
        title: Title of the window being captured.
        reason: Why the capture failed.
    """

    def __init__(self, title: str, reason: str) -> None:
        self.title = title
        self.reason = reason
        super().__init__("capture", f"window '{title}': {reason}")


class LayoutError(ScanError):
    """Raised when the captured image is smaller than the player-list box.

    Args:
        image_width: Width of the captured image.
        image_height: Height of the captured image.
        list_width: Width of the layout's player-list box.
        list_height: Height of the layout's player-list box.
    """

    def __init__(
        self,
        image_width: int,
        image_height: int,
        list_width: int,
        list_height: int,
    ) -> None:
        self.image_width = image_width
        self.image_height = image_height
        self.list_width = list_width
        self.list_height = list_height
        super().__init__(
            "cropping",
            f"image is {image_width}x{image_height}, expected at least "
            f"{list_width}x{list_height}",
        )


class ModelLoadError(ScanError):
    """Raised when the OCR models are missing or cannot be loaded.

    Args:
        path: The model location that failed, if known.
        reason: Why loading failed.
    """

    def __init__(self, path: Optional[Path], reason: str) -> None:
        self.path = path
        self.reason = reason
        location = f" from '{path}'" if path is not None else ""
        super().__init__("OCR model loading", f"{reason}{location}")


class OcrError(ScanError):
    """Raised when the OCR engine fails on a card crop.

    Args:
        slot: Index of the card slot being recognized.
        reason: The engine's error message.
    """

    def __init__(self, slot: int, reason: str) -> None:
        self.slot = slot
        self.reason = reason
        super().__init__("OCR", f"slot {slot}: {reason}")


class KnownEntriesUnavailableError(ScanError):
    """Raised when the known-entries file is missing or malformed.

    Args:
        path: The known-entries file.
        reason: Why it could not be used.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__("known entries", f"'{path}': {reason}")


class ScanInProgressError(ScanError):
    """Raised when a scan is requested while another one is running."""

    def __init__(self) -> None:
        super().__init__("scan", "another scan is already in progress")
