"""
League state snapshot.

A LeagueState is never modified in place; SessionStore replaces it with a new
snapshot on every change.
"""

from dataclasses import dataclass, field

from civ_league.models import Entry, PlayerLadderState, Session


@dataclass(frozen=True)
class LeagueState:
    """
    All league collections at one point in time.

    Attributes:
        sessions: Sessions, newest created first
        entries: Entries of all sessions
        ladder: Ladder state by exact player name (treat as read-only)
        house_rules: Free-text house rules
        seeded: Whether the starting ladder has been applied
    """

    sessions: tuple[Session, ...] = ()
    entries: tuple[Entry, ...] = ()
    ladder: dict[str, PlayerLadderState] = field(default_factory=dict)
    house_rules: str = ""
    seeded: bool = False

    def session(self, session_id: str) -> Session | None:
        return next((s for s in self.sessions if s.id == session_id), None)

    def entry(self, entry_id: str) -> Entry | None:
        return next((e for e in self.entries if e.id == entry_id), None)

    def session_entries(self, session_id: str) -> tuple[Entry, ...]:
        return tuple(e for e in self.entries if e.game_id == session_id)

    @property
    def has_completed(self) -> bool:
        return any(s.completed for s in self.sessions)
