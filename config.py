"""Central configuration for the RISK lobby scanner.

This module is the single source of truth for all magic values: window
title, layout geometry, matching thresholds and file locations. Never
hardcode these values elsewhere.
"""

from pathlib import Path
from typing import Final

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parent
DEBUG_DIR: Final[Path] = PROJECT_ROOT / "debug"

# ---------------------------------------------------------------------------
# App directory (user data lives outside the checkout)
# ---------------------------------------------------------------------------

APP_DIR: Final[Path] = Path.home() / "risk-lobby-scanner"

# Known players to flag, edited by hand. ``init`` creates it here.
KNOWN_ENTRIES_PATH: Final[Path] = APP_DIR / "blacklist.json"

# Blacklist left by the older Blitz client ({"morons": [{"username", ...}]}).
# Read when KNOWN_ENTRIES_PATH does not exist yet; never written.
LEGACY_KNOWN_ENTRIES_PATH: Final[Path] = Path.home() / "blitz-app" / "blacklist.json"

# PaddleOCR inference model directories (inference.pdmodel + .pdiparams).
DETECTION_MODEL_DIR: Final[Path] = APP_DIR / "models" / "det"
RECOGNITION_MODEL_DIR: Final[Path] = APP_DIR / "models" / "rec"

# ---------------------------------------------------------------------------
# Game window
# ---------------------------------------------------------------------------

# Exact title of the game window.
WINDOW_TITLE: Final[str] = "RISK"

# ---------------------------------------------------------------------------
# Lobby layout (1920x1080)
# ---------------------------------------------------------------------------

REFERENCE_WIDTH: Final[int] = 1920
REFERENCE_HEIGHT: Final[int] = 1080

# Player list box, centered on screen.
LIST_WIDTH: Final[int] = 1200
LIST_HEIGHT: Final[int] = 550

# Six cards in 3 rows. The bottom 10 px strip of the list box belongs to
# no card.
GRID_ROWS: Final[int] = 3
GRID_COLS: Final[int] = 2
CARD_WIDTH: Final[int] = 600
CARD_HEIGHT: Final[int] = 180

# ---------------------------------------------------------------------------
# OCR
# ---------------------------------------------------------------------------

# PaddleOCR language for the recognition dictionary.
OCR_LANGUAGE: Final[str] = "en"

# ---------------------------------------------------------------------------
# Name matching
# ---------------------------------------------------------------------------

# Rank shown in front of player names on the lobby cards.
NAME_PREFIX: Final[str] = "General "

# Normalized detections shorter than this are OCR noise.
MIN_KEY_LENGTH: Final[int] = 2

# Tuned against rapidfuzz ``fuzz.ratio``; re-tune if the scorer changes.
SIMILARITY_THRESHOLD: Final[int] = 70
