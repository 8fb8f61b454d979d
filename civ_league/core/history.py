"""
Session history views: sessions grouped with their entries, split into
ongoing and completed, plus the one-line result summaries shown for the
latest completed sessions.
"""

from dataclasses import dataclass
from typing import Iterable

from civ_league.config import LATEST_RESULTS_LIMIT
from civ_league.models import Entry, Session

UNPLACED_SORT_KEY = 99


@dataclass(frozen=True)
class SessionResult:
    """A session together with its entries."""

    session: Session
    entries: tuple[Entry, ...]


def group_by_session(sessions: Iterable[Session], entries: Iterable[Entry]) -> list[SessionResult]:
    """
    Attach entries to their sessions, newest session first.

    Entries referencing a missing session are dropped.
    """
    buckets: dict[str, list[Entry]] = {}
    ordered = []
    for s in sessions:
        buckets[s.id] = []
        ordered.append(s)
    for e in entries:
        if e.game_id in buckets:
            buckets[e.game_id].append(e)

    ordered.sort(key=lambda s: s.played_at, reverse=True)
    return [SessionResult(s, tuple(buckets[s.id])) for s in ordered]


def ongoing(results: Iterable[SessionResult]) -> list[SessionResult]:
    return [r for r in results if not r.session.completed]


def completed(results: Iterable[SessionResult]) -> list[SessionResult]:
    return [r for r in results if r.session.completed]


def latest_results(results: Iterable[SessionResult], limit: int = LATEST_RESULTS_LIMIT) -> list[SessionResult]:
    """The most recent completed sessions."""
    return completed(results)[:limit]


def by_placement(entries: Iterable[Entry]) -> list[Entry]:
    """Entries ordered by placement, unplaced (and absent) last."""
    return sorted(entries, key=lambda e: e.place or UNPLACED_SORT_KEY)


def winner_name(entries: Iterable[Entry]) -> str:
    for e in entries:
        if e.winner:
            return e.player
    return "-"


def result_summary(entries: Iterable[Entry]) -> str:
    """
    One-line result, e.g. "#1 Peter · #2 Jocke · T140 · - Macce (absent)".
    """
    parts = []
    for e in by_placement(entries):
        text = f"#{e.place} {e.player}" if e.place else f"- {e.player}"
        if e.absent:
            text += " (absent)"
        if e.exit_turn:
            text += f" · T{e.exit_turn}"
        parts.append(text)
    return " · ".join(parts)
