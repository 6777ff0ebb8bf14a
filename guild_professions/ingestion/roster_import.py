"""
Roster snapshot import for the CLI: JSON or CSV → validated ``Member`` list.

The analytics engine never reads files; this module is how the command-line
surface gets a roster snapshot to hand it.

JSON format — an array of member objects::

    [
      {"name": "Alice", "professions": [{"profession_id": "mining", "rank": 4}]},
      {"name": "Bob",   "professions": [{"profession_id": "weapon_smithing", "rank": "master"}]}
    ]

CSV format — one row per (member, profession) assignment, with a header row.
Required columns: ``member``, ``profession_id``, ``rank``.  Rows for the same
member are merged in file order.  A member with no professions can be listed
with empty ``profession_id`` and ``rank``.

``rank`` accepts 1-4 or a rank name (apprentice, journeyman, master,
grandmaster), case-insensitive.

All members are validated before any are returned.  If any fail, a single
``ValueError`` lists the first 10 failures.  Profession ids are *not* checked
against the catalog here; the analytics entry points do that.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from guild_professions.models.member import Member

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = frozenset({"member", "profession_id", "rank"})

_MAX_SHOWN = 10


def load_roster(path: Path | str) -> list[Member]:
    """Load a roster file, choosing the parser from the file extension.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On an unsupported extension, malformed content, or any
            member failing validation.
    """
    path = Path(path)
    fmt = path.suffix.lower()
    if fmt == ".json":
        return parse_roster_json(path)
    if fmt == ".csv":
        return parse_roster_csv(path)
    raise ValueError(f"Unsupported roster format '{fmt}'. Use .json or .csv.")


def parse_roster_json(path: Path) -> list[Member]:
    """Parse a JSON roster file into validated ``Member`` objects."""
    if not path.exists():
        raise FileNotFoundError(f"Roster file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Roster JSON parse error in {path.name}: {exc}") from exc

    if not isinstance(raw, list):
        raise ValueError("Roster JSON file must contain an array of members.")

    return _validate_members(
        [(f"Member #{i}", entry) for i, entry in enumerate(raw)], path
    )


def parse_roster_csv(path: Path) -> list[Member]:
    """Parse a long-format CSV roster into validated ``Member`` objects."""
    if not path.exists():
        raise FileNotFoundError(f"Roster file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = set(reader.fieldnames)
        missing = REQUIRED_CSV_COLUMNS - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        rows = list(reader)

    if not rows:
        logger.warning("Roster CSV is empty (header only): %s", path)
        return []

    # Merge rows per member, keeping first-appearance order.
    grouped: dict[str, dict[str, Any]] = {}
    first_line: dict[str, int] = {}
    errors: list[tuple[str, str]] = []

    for i, row in enumerate(rows):
        line_no = i + 2  # 1-based, skip header row
        name = (row.get("member") or "").strip()
        if not name:
            errors.append((f"Row {line_no}", "Required field 'member' is empty."))
            continue
        entry = grouped.setdefault(name, {"name": name, "professions": []})
        first_line.setdefault(name, line_no)

        profession_id = (row.get("profession_id") or "").strip()
        rank = (row.get("rank") or "").strip()
        if not profession_id and not rank:
            continue
        if not profession_id or not rank:
            errors.append(
                (f"Row {line_no}", "'profession_id' and 'rank' must both be set or both empty.")
            )
            continue
        entry["professions"].append({"profession_id": profession_id, "rank": rank})

    if errors:
        _raise_errors(errors, path)

    return _validate_members(
        [(f"Member '{name}' (row {first_line[name]})", entry) for name, entry in grouped.items()],
        path,
    )


# ── Private helpers ────────────────────────────────────────────────────────────

def _validate_members(entries: list[tuple[str, Any]], path: Path) -> list[Member]:
    members: list[Member] = []
    errors: list[tuple[str, str]] = []

    for label, raw in entries:
        if not isinstance(raw, dict):
            errors.append((label, f"expected an object, got {type(raw).__name__}"))
            continue
        try:
            members.append(Member(**raw))
        except (ValueError, ValidationError, TypeError) as exc:
            errors.append((label, str(exc)))

    if errors:
        _raise_errors(errors, path)

    logger.info("Parsed %d members from %s", len(members), path.name)
    return members


def _raise_errors(errors: list[tuple[str, str]], path: Path) -> None:
    detail = "\n".join(f"  {label}: {msg}" for label, msg in errors[:_MAX_SHOWN])
    suffix = (
        f"\n  ... and {len(errors) - _MAX_SHOWN} more" if len(errors) > _MAX_SHOWN else ""
    )
    raise ValueError(
        f"{len(errors)} roster entr{'y' if len(errors) == 1 else 'ies'} failed "
        f"validation in {path.name}:\n{detail}{suffix}"
    )
