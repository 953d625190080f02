"""Name normalization and fuzzy matching of OCR output against known players.

Handles all text-to-result conversion: normalizing OCR lines and known
names into comparison keys, scoring them with ``rapidfuzz`` and building
the raw result set. No capture or OCR logic belongs here.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from rapidfuzz import fuzz

from blacklist import KnownEntry
from config import MIN_KEY_LENGTH, NAME_PREFIX, SIMILARITY_THRESHOLD
from ocr import RawDetection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """A known player's display name and how closely a detection matched it."""

    name: str
    similarity: int


def normalize(text: str, prefix: str = NAME_PREFIX) -> str:
    """Turn a name into its comparison key.

    Strips *prefix* once if the text starts with it (case-sensitive, exact
    match), lowercases, and removes all whitespace. Idempotent, since the
    result never contains the prefix's trailing space.

    Args:
        text: An OCR line or a known player's name.
        prefix: The rank prefix shown before names on lobby cards.

    Returns:
        The normalized key.
    """
    if prefix and text.startswith(prefix):
        text = text[len(prefix):]
    return "".join(text.lower().split())


def similarity(a: str, b: str) -> int:
    """Score two normalized keys from 0 (dissimilar) to 100 (identical).

    Uses ``rapidfuzz.fuzz.ratio``, i.e.
    ``100 * (1 - indel_distance(a, b) / (len(a) + len(b)))``, rounded half
    up to an integer. Symmetric in its arguments.
    """
    score = fuzz.ratio(a, b)
    return min(100, max(0, int(score + 0.5)))


def aggregate(
    detections: Iterable[RawDetection],
    known: Iterable[KnownEntry],
) -> list[ScanResult]:
    """Score every usable detection against every known entry.

    Detections whose normalized key is shorter than ``MIN_KEY_LENGTH`` are
    skipped: one-character keys score meaninglessly high against short
    names. The result is the full cross product, ordered by detection then
    by known entry, and is neither deduplicated nor thresholded.

    Args:
        detections: OCR lines from all card slots, in slot order.
        known: The known players to match against.

    Returns:
        One ``ScanResult`` per (surviving detection, known entry) pair.
    """
    known_keys = [(entry.name, normalize(entry.name)) for entry in known]

    results = []
    skipped = 0
    for detection in detections:
        key = normalize(detection.text)
        if len(key) < MIN_KEY_LENGTH:
            skipped += 1
            continue
        for name, known_key in known_keys:
            results.append(ScanResult(name=name, similarity=similarity(key, known_key)))

    logger.info(
        "Scored %d results (%d detections skipped as noise)", len(results), skipped,
    )
    return results


def rank_results(
    results: Iterable[ScanResult],
    threshold: int = SIMILARITY_THRESHOLD,
) -> list[ScanResult]:
    """Keep results at or above *threshold*, best match first.

    This is the display policy of the CLI, not part of ``aggregate()``.
    Ties keep their original order.
    """
    kept = [result for result in results if result.similarity >= threshold]
    kept.sort(key=lambda result: result.similarity, reverse=True)
    return kept
