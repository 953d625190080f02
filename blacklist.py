"""Loading and bootstrapping the known-players file.

The file is hand-edited JSON::

    {
      "entries": [
        {"name": "Example User #1", "reason": "..."}
      ]
    }

Files written by the older Blitz client use ``{"morons": [{"username":
..., "reason": ...}]}`` and are read as well.

The scan itself never reads this file; the CLI loads it and passes the
entries in.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from exceptions import KnownEntriesUnavailableError

logger = logging.getLogger(__name__)

# (list key, name field) pairs, current layout first.
_SCHEMAS = (("entries", "name"), ("morons", "username"))


@dataclass(frozen=True)
class KnownEntry:
    """A player to flag if seen in a lobby again."""

    name: str
    reason: str


def default_known_entries() -> list[KnownEntry]:
    """Example entries written to a fresh known-players file."""
    return [
        KnownEntry(
            name="Example User #1",
            reason="Copy and paste the { } block to add more entries",
        ),
        KnownEntry(
            name="Example User #2",
            reason="Don't forget the comma at the end of the block.",
        ),
    ]


def load_known_entries(path: Path) -> list[KnownEntry]:
    """Read the known-players file.

    Args:
        path: Location of the JSON file.

    Returns:
        The entries in file order.

    Raises:
        KnownEntriesUnavailableError: If the file is missing or unreadable,
            is not valid JSON, has neither an ``entries`` nor a ``morons``
            list, or any entry lacks a string name or ``reason``.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise KnownEntriesUnavailableError(path, "file not found") from exc
    except OSError as exc:
        raise KnownEntriesUnavailableError(path, str(exc)) from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise KnownEntriesUnavailableError(path, f"invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise KnownEntriesUnavailableError(
            path, "expected an object with an 'entries' list",
        )

    for list_key, name_key in _SCHEMAS:
        if list_key in data:
            break
    else:
        raise KnownEntriesUnavailableError(
            path, "expected an object with an 'entries' list",
        )

    records = data[list_key]
    if not isinstance(records, list):
        raise KnownEntriesUnavailableError(
            path, f"expected an object with an '{list_key}' list",
        )

    entries = []
    for position, record in enumerate(records):
        if (
            not isinstance(record, dict)
            or not isinstance(record.get(name_key), str)
            or not isinstance(record.get("reason"), str)
        ):
            raise KnownEntriesUnavailableError(
                path,
                f"entry {position} must have string '{name_key}' and 'reason' fields",
            )
        entries.append(KnownEntry(name=record[name_key], reason=record["reason"]))

    logger.info("Loaded %d known entries from %s", len(entries), path)
    return entries


def write_default_known_entries(path: Path) -> bool:
    """Create the known-players file with example entries if it is missing.

    Args:
        path: Location of the JSON file. Parent directories are created.

    Returns:
        ``True`` if the file was written, ``False`` if it already existed.
    """
    if path.exists():
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"entries": [asdict(entry) for entry in default_known_entries()]}
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    logger.info("Created known-players file: %s", path)
    return True


def resolve_known_entries_path(path: Path, legacy_path: Path) -> Path:
    """Pick the known-players file to read when none was given explicitly.

    Returns *legacy_path* only when *path* is missing and *legacy_path*
    exists, so an older Blitz blacklist keeps working until ``init`` has
    been run.
    """
    if not path.exists() and legacy_path.exists():
        logger.info("Using legacy known-players file: %s", legacy_path)
        return legacy_path
    return path
