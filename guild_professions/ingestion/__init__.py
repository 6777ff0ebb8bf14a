"""
Roster snapshot import for the command-line surface.

  ingestion/roster_import.py — JSON / CSV roster files → ``Member`` models.
"""

from guild_professions.ingestion.roster_import import (
    load_roster,
    parse_roster_csv,
    parse_roster_json,
)

__all__ = ["load_roster", "parse_roster_csv", "parse_roster_json"]
