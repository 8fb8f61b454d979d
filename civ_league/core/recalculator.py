"""
Session Recalculator

Normalizes the entries of one session after any edit:
- Absent entries get fixed points, no placement, no win, no handicap
- When every participant is placed, points come from the scoring table by
  sorted position and the first-placed participant is the winner
- Otherwise participant points are suppressed (0) and nobody has won

Entries of other sessions pass through untouched and collection order is kept.
"""

from dataclasses import replace
from typing import Iterable

from civ_league.core.scoring import absent_points, points
from civ_league.models import Entry


def is_placed(entry: Entry) -> bool:
    return entry.place is not None and entry.place > 0


def all_placed(participants: list[Entry]) -> bool:
    """True iff there is at least one participant and all of them are placed."""
    return bool(participants) and all(is_placed(e) for e in participants)


def _normalize_absent(entry: Entry) -> Entry:
    return replace(
        entry,
        points=absent_points(),
        place=None,
        winner=False,
        handicap_turns=0,
        exit_turn=None,
    )


def score_session(session_entries: list[Entry]) -> dict[str, Entry]:
    """
    Compute normalized entries for a single session.

    Args:
        session_entries: All entries of one session, in collection order

    Returns:
        Mapping of entry id to its normalized entry
    """
    updated = {}
    participants = []
    for entry in session_entries:
        if entry.absent:
            updated[entry.id] = _normalize_absent(entry)
        else:
            participants.append(entry)

    if all_placed(participants):
        # Stable sort: duplicate placements keep collection order
        ranked = sorted(participants, key=lambda e: e.place)
        count = len(ranked)
        for i, entry in enumerate(ranked):
            updated[entry.id] = replace(entry, points=points(i + 1, count), winner=i == 0)
    else:
        for entry in participants:
            updated[entry.id] = replace(entry, points=0, winner=False)

    return updated


def recalculate(entries: Iterable[Entry], session_id: str) -> tuple[Entry, ...]:
    """
    Return the entry collection with `session_id`'s entries made consistent.

    Idempotent: recalculating an already consistent collection returns an
    equal collection.
    """
    entries = tuple(entries)
    session_entries = [e for e in entries if e.game_id == session_id]
    if not session_entries:
        return entries

    updated = score_session(session_entries)
    return tuple(updated.get(e.id, e) if e.game_id == session_id else e for e in entries)
