"""Fixed-geometry cropping of the lobby player list into per-player cards.

The lobby shows its players in a box centered on the window, tiled into a
``rows x cols`` grid of cards::

    ||| [Player 1] [Player 2] |||
    ||| [Player 3] [Player 4] |||
    ||| [Player 5] [Player 6] |||

Slots are numbered row-major from 0. The geometry is fixed to one reference
resolution; no rescaling to other aspect ratios is attempted.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from config import (
    CARD_HEIGHT,
    CARD_WIDTH,
    GRID_COLS,
    GRID_ROWS,
    LIST_HEIGHT,
    LIST_WIDTH,
    REFERENCE_HEIGHT,
    REFERENCE_WIDTH,
)
from exceptions import LayoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """A rectangle in image coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass(frozen=True)
class GridLayout:
    """Geometry of the player list for one reference resolution.

    Args:
        reference_width: Window width the layout was measured at.
        reference_height: Window height the layout was measured at.
        list_width: Width of the centered player-list box.
        list_height: Height of the centered player-list box.
        rows: Number of card rows in the list box.
        cols: Number of card columns in the list box.
        card_width: Width of one card. Defaults to ``list_width // cols``.
        card_height: Height of one card. Defaults to ``list_height // rows``.

    Raises:
        ValueError: If any dimension is not positive, or the card grid does
            not fit inside the list box.
    """

    reference_width: int
    reference_height: int
    list_width: int
    list_height: int
    rows: int
    cols: int
    card_width: Optional[int] = field(default=None)
    card_height: Optional[int] = field(default=None)

    def __post_init__(self) -> None:
        if self.card_width is None:
            object.__setattr__(self, "card_width", self.list_width // max(self.cols, 1))
        if self.card_height is None:
            object.__setattr__(self, "card_height", self.list_height // max(self.rows, 1))

        for name in (
            "reference_width", "reference_height", "list_width",
            "list_height", "rows", "cols", "card_width", "card_height",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(
                    f"GridLayout.{name} must be positive, got {getattr(self, name)}"
                )

        if self.cols * self.card_width > self.list_width:
            raise ValueError(
                f"{self.cols} cards of width {self.card_width} do not fit "
                f"in a list box of width {self.list_width}"
            )
        if self.rows * self.card_height > self.list_height:
            raise ValueError(
                f"{self.rows} cards of height {self.card_height} do not fit "
                f"in a list box of height {self.list_height}"
            )

    @property
    def slot_count(self) -> int:
        return self.rows * self.cols


RISK_LAYOUT = GridLayout(
    reference_width=REFERENCE_WIDTH,
    reference_height=REFERENCE_HEIGHT,
    list_width=LIST_WIDTH,
    list_height=LIST_HEIGHT,
    rows=GRID_ROWS,
    cols=GRID_COLS,
    card_width=CARD_WIDTH,
    card_height=CARD_HEIGHT,
)


@dataclass(frozen=True)
class SubImage:
    """An owned crop of the captured frame for one card slot."""

    index: int
    region: Region
    image: np.ndarray = field(repr=False)


def slot_regions(
    image_width: int,
    image_height: int,
    layout: GridLayout,
) -> list[Region]:
    """Compute the card regions for an image of the given size.

    The list box is centered in the image and tiled row-major, so the
    returned list is indexed by slot number.

    Args:
        image_width: Width of the captured image in pixels.
        image_height: Height of the captured image in pixels.
        layout: The grid geometry to apply.

    Returns:
        One ``Region`` per slot, in image coordinates.

    Raises:
        LayoutError: If the image is smaller than the list box.
    """
    if image_width < layout.list_width or image_height < layout.list_height:
        raise LayoutError(
            image_width, image_height, layout.list_width, layout.list_height,
        )

    start_x = (image_width - layout.list_width) // 2
    start_y = (image_height - layout.list_height) // 2

    regions = []
    for row in range(layout.rows):
        for col in range(layout.cols):
            regions.append(Region(
                x=start_x + col * layout.card_width,
                y=start_y + row * layout.card_height,
                width=layout.card_width,
                height=layout.card_height,
            ))
    return regions


def crop_cards(image: np.ndarray, layout: GridLayout) -> list[SubImage]:
    """Crop every card slot out of a captured frame.

    Args:
        image: A BGR numpy array of shape ``(height, width, 3)``.
        layout: The grid geometry to apply.

    Returns:
        The card crops ordered by slot index. Each crop owns its pixels.

    Raises:
        LayoutError: If the image is smaller than the list box.
    """
    height, width = image.shape[:2]
    if (width, height) != (layout.reference_width, layout.reference_height):
        logger.warning(
            "Frame is %dx%d, layout was measured at %dx%d; card positions "
            "may be off",
            width, height, layout.reference_width, layout.reference_height,
        )

    cards = [
        SubImage(
            index=index,
            region=region,
            image=image[region.y:region.bottom, region.x:region.right].copy(),
        )
        for index, region in enumerate(slot_regions(width, height, layout))
    ]
    logger.debug("Cropped %d card slots from %dx%d frame", len(cards), width, height)
    return cards


def save_debug_crops(
    image: np.ndarray,
    cards: list[SubImage],
    directory: Path,
) -> list[Path]:
    """Write the captured frame and each card crop as PNG files.

    Used for calibrating layouts against real screenshots. Files are named
    ``lobby.png`` and ``card-<slot>.png``.

    Args:
        image: The full captured frame.
        cards: Card crops produced by ``crop_cards()``.
        directory: Output directory; created if missing.

    Returns:
        The paths actually written, frame first. Files OpenCV fails to
        write are logged and left out.
    """
    directory.mkdir(parents=True, exist_ok=True)

    images = [(directory / "lobby.png", image)]
    images += [(directory / f"card-{card.index}.png", card.image) for card in cards]

    written = []
    for path, pixels in images:
        if cv2.imwrite(str(path), pixels):
            written.append(path)
        else:
            logger.warning("Could not write debug image %s", path)

    logger.info("Saved %d of %d debug images to %s", len(written), len(images), directory)
    return written
