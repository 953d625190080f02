"""Tests for crop.py: player-list geometry and card cropping."""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from conftest import make_frame
from crop import (
    RISK_LAYOUT,
    GridLayout,
    Region,
    crop_cards,
    save_debug_crops,
    slot_regions,
)
from exceptions import LayoutError


# ---------------------------------------------------------------------------
# GridLayout
# ---------------------------------------------------------------------------

class TestGridLayout:
    """Tests for GridLayout defaults and validation."""

    def test_card_size_defaults_to_even_split(self) -> None:
        """Card size is the list box divided by the grid when not given."""
        layout = GridLayout(1920, 1080, list_width=1200, list_height=540, rows=3, cols=2)

        assert (layout.card_width, layout.card_height) == (600, 180)
        assert layout.slot_count == 6

    def test_rejects_non_positive_dimensions(self) -> None:
        """Zero rows is not a layout."""
        with pytest.raises(ValueError, match="rows"):
            GridLayout(1920, 1080, list_width=1200, list_height=550, rows=0, cols=2)

    def test_rejects_cards_overflowing_list_box(self) -> None:
        """The card grid must fit inside the list box."""
        with pytest.raises(ValueError, match="do not fit"):
            GridLayout(
                1920, 1080, list_width=1200, list_height=550, rows=3, cols=2,
                card_width=600, card_height=200,
            )

    def test_risk_layout_values(self) -> None:
        """The shipped layout is a 3x2 grid of 600x180 cards in 1200x550."""
        assert RISK_LAYOUT.list_width == 1200
        assert RISK_LAYOUT.list_height == 550
        assert (RISK_LAYOUT.rows, RISK_LAYOUT.cols) == (3, 2)
        assert (RISK_LAYOUT.card_width, RISK_LAYOUT.card_height) == (600, 180)


# ---------------------------------------------------------------------------
# slot_regions
# ---------------------------------------------------------------------------

class TestSlotRegions:
    """Tests for slot_regions()."""

    def test_reference_resolution_positions(self) -> None:
        """Slot 0 and slot 5 sit where the 1920x1080 lobby draws them."""
        regions = slot_regions(1920, 1080, RISK_LAYOUT)

        # List box starts at ((1920-1200)/2, (1080-550)/2) = (360, 265).
        assert len(regions) == 6
        assert regions[0] == Region(x=360, y=265, width=600, height=180)
        assert regions[5] == Region(x=360 + 600, y=265 + 360, width=600, height=180)

    def test_row_major_order(self) -> None:
        """Slot index is row * cols + col."""
        regions = slot_regions(1920, 1080, RISK_LAYOUT)

        for row in range(3):
            for col in range(2):
                region = regions[row * 2 + col]
                assert region.x - regions[0].x == col * 600
                assert region.y - regions[0].y == row * 180

    def test_cards_tile_without_gaps_or_overlaps(self) -> None:
        """Every pixel of the card grid belongs to exactly one slot."""
        layout = GridLayout(1920, 1080, list_width=1200, list_height=540, rows=3, cols=2)
        coverage = np.zeros((1080, 1920), dtype=np.int32)

        for region in slot_regions(1920, 1080, layout):
            coverage[region.y:region.bottom, region.x:region.right] += 1

        box = coverage[270:810, 360:1560]
        assert (box == 1).all()
        assert coverage.sum() == 1200 * 540

    def test_regions_stay_in_bounds(self) -> None:
        """All regions lie inside the image, including at the minimum size."""
        for width, height in [(1920, 1080), (1200, 550), (2560, 1440)]:
            for region in slot_regions(width, height, RISK_LAYOUT):
                assert region.x >= 0 and region.y >= 0
                assert region.right <= width
                assert region.bottom <= height

    @pytest.mark.parametrize("width, height", [(1199, 1080), (1920, 549), (800, 600)])
    def test_small_image_raises_layout_error(self, width: int, height: int) -> None:
        """Images smaller than the list box fail instead of slicing out of range."""
        with pytest.raises(LayoutError) as excinfo:
            slot_regions(width, height, RISK_LAYOUT)

        assert excinfo.value.image_width == width
        assert excinfo.value.image_height == height


# ---------------------------------------------------------------------------
# crop_cards
# ---------------------------------------------------------------------------

class TestCropCards:
    """Tests for crop_cards()."""

    def test_returns_card_sized_crops_in_slot_order(self) -> None:
        """Produces six 600x180 crops indexed 0..5."""
        cards = crop_cards(make_frame(), RISK_LAYOUT)

        assert [card.index for card in cards] == list(range(6))
        for card in cards:
            assert card.image.shape == (180, 600, 3)

    def test_crops_hold_the_right_pixels(self) -> None:
        """Each crop contains the pixels of its own slot."""
        frame = make_frame()
        for index, region in enumerate(slot_regions(1920, 1080, RISK_LAYOUT)):
            frame[region.y:region.bottom, region.x:region.right] = index * 10

        cards = crop_cards(frame, RISK_LAYOUT)

        for card in cards:
            assert (card.image == card.index * 10).all()

    def test_crops_own_their_pixels(self) -> None:
        """Modifying the frame afterwards does not change the crops."""
        frame = make_frame()
        cards = crop_cards(frame, RISK_LAYOUT)

        frame[:] = 255

        assert not cards[0].image.any()

    def test_small_frame_raises_before_cropping(self) -> None:
        """A 1024x500 capture raises LayoutError."""
        with pytest.raises(LayoutError, match="expected at least 1200x550"):
            crop_cards(make_frame(1024, 500), RISK_LAYOUT)

    def test_larger_frame_keeps_list_centered(self) -> None:
        """Larger frames are accepted with the list box centered."""
        cards = crop_cards(make_frame(2560, 1440), RISK_LAYOUT)

        assert cards[0].region.x == (2560 - 1200) // 2
        assert cards[0].region.y == (1440 - 550) // 2


# ---------------------------------------------------------------------------
# save_debug_crops
# ---------------------------------------------------------------------------

class TestSaveDebugCrops:
    """Tests for save_debug_crops()."""

    @patch("crop.cv2.imwrite")
    def test_writes_frame_and_every_card(
        self, mock_imwrite: MagicMock, tmp_path,
    ) -> None:
        """Writes lobby.png plus one card-<slot>.png per slot."""
        mock_imwrite.return_value = True
        frame = make_frame()
        cards = crop_cards(frame, RISK_LAYOUT)

        paths = save_debug_crops(frame, cards, tmp_path / "debug")

        assert [p.name for p in paths] == ["lobby.png"] + [
            f"card-{i}.png" for i in range(6)
        ]
        assert mock_imwrite.call_count == 7
        assert (tmp_path / "debug").is_dir()

    @patch("crop.cv2.imwrite")
    def test_failed_writes_are_left_out(
        self, mock_imwrite: MagicMock, tmp_path, caplog,
    ) -> None:
        """Paths OpenCV could not write are warned about and not returned."""
        mock_imwrite.side_effect = lambda path, _image: not path.endswith("card-2.png")
        frame = make_frame()
        cards = crop_cards(frame, RISK_LAYOUT)

        paths = save_debug_crops(frame, cards, tmp_path)

        assert "card-2.png" not in [p.name for p in paths]
        assert len(paths) == 6
        assert "Could not write debug image" in caplog.text
