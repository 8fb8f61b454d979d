"""
Session Store

The imperative shell around the league core. SessionStore owns the current
LeagueState snapshot, routes every change through the core (recalculator,
ladder) and persists the new snapshot through its repository.

Usage:
    from civ_league.store import SessionStore

    store = SessionStore.open()
    session = store.create_session("2025-03-01", store.roster_defaults())
    store.update_entry(entry_id, place=1)
    store.mark_completed(session.id)
    store.leaderboard()
"""

from dataclasses import replace
from typing import Iterable

import pandas as pd

from civ_league.config import (
    DEFAULT_PLAYERS,
    MAX_HANDICAP_TURNS,
    MAX_NOTE_SIZE,
    MAX_RULES_SIZE,
)
from civ_league.core.history import SessionResult, group_by_session
from civ_league.core.ladder import apply_session_result, default_ladder, roster_defaults, seed_ladder
from civ_league.core.leaderboard import compute_leaderboard
from civ_league.core.recalculator import all_placed, recalculate
from civ_league.models import Entry, Session
from civ_league.store.persistence import JsonRepository
from civ_league.store.state import LeagueState
from civ_league.utils import (
    new_id,
    normalize_player_name,
    setup_logging,
    validate_input_size,
    validate_played_at,
)

# --- Module Logger ---
logger = setup_logging(__name__)

# Fields a caller may edit on an entry; points and winner are always derived
EDITABLE_FIELDS = frozenset({
    'player',
    'leader',
    'difficulty',
    'handicap_turns',
    'place',
    'absent',
    'exit_turn',
})


class StoreError(Exception):
    """Base exception for session store errors"""
    pass


class ValidationError(StoreError):
    """Rejected input"""
    pass


class UnknownSessionError(StoreError):
    """Raised when a session id does not exist"""
    pass


class UnknownEntryError(StoreError):
    """Raised when an entry id does not exist"""
    pass


class SessionLockedError(StoreError):
    """Raised when changing or removing entries of a completed session"""
    pass


def _check_non_negative(name: str, value) -> None:
    if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
        raise ValidationError(f"{name} must be a non-negative integer, got {value!r}")


def _check_handicap(value) -> None:
    _check_non_negative('handicap_turns', value)
    if value is not None and value > MAX_HANDICAP_TURNS:
        raise ValidationError(f"handicap_turns must be at most {MAX_HANDICAP_TURNS}, got {value}")


def _entry_from_slot(session_id: str, slot: dict) -> Entry:
    absent = bool(slot.get('absent'))
    handicap = slot.get('handicap_turns') or 0
    place = slot.get('place') or None
    exit_turn = slot.get('exit_turn')
    _check_handicap(handicap)
    _check_non_negative('place', place)
    _check_non_negative('exit_turn', exit_turn)
    return Entry(
        id=new_id(),
        game_id=session_id,
        player=normalize_player_name(slot.get('player')),
        leader=slot.get('leader') or None,
        difficulty=slot.get('difficulty') or None,
        handicap_turns=0 if absent else handicap,
        place=None if absent else place,
        winner=False,
        absent=absent,
        exit_turn=None if absent else exit_turn,
    )


class SessionStore:
    """
    Owns the league collections and applies every change to them.

    Each mutating method replaces the snapshot, saves it (when a repository is
    attached) and returns the affected record.
    """

    def __init__(self, repository: JsonRepository | None = None, state: LeagueState | None = None):
        self.repository = repository
        if state is None:
            state = repository.load() if repository else LeagueState(ladder=default_ladder())
        self._state = state

    @classmethod
    def open(cls, folder=None) -> "SessionStore":
        """Load the store from disk and apply the starting ladder if this is first use."""
        store = cls(JsonRepository(folder))
        store.ensure_seeded()
        return store

    @property
    def state(self) -> LeagueState:
        return self._state

    def _commit(self, state: LeagueState, message: str) -> None:
        self._state = state
        if self.repository is not None:
            self.repository.save(state)
        logger.info(message)

    def _require_session(self, session_id: str) -> Session:
        session = self._state.session(session_id)
        if session is None:
            raise UnknownSessionError(f"Unknown session: {session_id}")
        return session

    def _require_entry(self, entry_id: str) -> Entry:
        entry = self._state.entry(entry_id)
        if entry is None:
            raise UnknownEntryError(f"Unknown entry: {entry_id}")
        return entry

    # --- Seeding ---
    def ensure_seeded(self) -> bool:
        """
        Apply the starting ladder once, on an empty history.

        Returns:
            True if the ladder was seeded by this call
        """
        state = self._state
        if state.seeded or state.sessions or state.entries:
            return False
        self._commit(replace(state, ladder=seed_ladder(), seeded=True), "Seeded starting ladder")
        return True

    def roster_defaults(self, players: Iterable[str] = DEFAULT_PLAYERS) -> list[dict]:
        """Roster slots for a new session, pre-filled from the ladder."""
        return roster_defaults(players, self._state.ladder, seeding=not self._state.has_completed)

    # --- Sessions ---
    def create_session(
        self,
        played_at: str,
        roster: Iterable[dict],
        turns: int | None = None,
        notes: str | None = None,
    ) -> Session:
        """
        Create an ongoing session with one entry per roster slot.

        Args:
            played_at: Date played (YYYY-MM-DD)
            roster: Slot dicts with player, leader, difficulty, handicap_turns,
                    place, winner, absent, exit_turn
            turns: Total turn count
            notes: Free-text note

        Returns:
            The new session

        Raises:
            ValidationError: If any input is rejected
        """
        try:
            validate_played_at(played_at)
            validate_input_size(notes or "", MAX_NOTE_SIZE)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        _check_non_negative('turns', turns)

        session = Session(id=new_id(), played_at=played_at, turns=turns, notes=notes or None)
        rows = tuple(_entry_from_slot(session.id, slot) for slot in roster)

        entries = recalculate(self._state.entries + rows, session.id)
        state = replace(self._state, sessions=(session,) + self._state.sessions, entries=entries)
        self._commit(state, f"Created session {session.id} ({played_at}) with {len(rows)} entries")
        return session

    def mark_completed(self, session_id: str) -> Session:
        """
        Complete a session and advance every participant on the ladder.

        Completion is one-way; completing an already completed session changes
        nothing, so the ladder is advanced exactly once per session.
        """
        session = self._require_session(session_id)
        if session.completed:
            logger.warning(f"Session {session_id} already completed; ladder left unchanged")
            return session

        entries = recalculate(self._state.entries, session_id)
        participants = [e for e in entries if e.game_id == session_id and not e.absent]
        if not all_placed(participants):
            logger.warning(f"Completing session {session_id} without full placements; no winner recorded")

        ladder = apply_session_result(self._state.ladder, entries, session_id)
        done = replace(session, completed=True)
        sessions = tuple(done if s.id == session_id else s for s in self._state.sessions)
        state = replace(self._state, sessions=sessions, entries=entries, ladder=ladder)
        self._commit(state, f"Completed session {session_id}; ladder updated for {len(participants)} players")
        return done

    def delete_session(self, session_id: str) -> None:
        """Delete a session and all of its entries."""
        self._require_session(session_id)
        state = replace(
            self._state,
            sessions=tuple(s for s in self._state.sessions if s.id != session_id),
            entries=tuple(e for e in self._state.entries if e.game_id != session_id),
        )
        self._commit(state, f"Deleted session {session_id}")

    # --- Entries ---
    def update_entry(self, entry_id: str, **changes) -> Entry:
        """
        Edit an entry of an ongoing session and rescore that session.

        Raises:
            UnknownEntryError: If the entry does not exist
            UnknownSessionError: If the entry's session does not exist
            SessionLockedError: If the session is already completed
            ValidationError: If a field is not editable or a value is rejected
        """
        entry = self._require_entry(entry_id)
        session = self._require_session(entry.game_id)
        if session.completed:
            raise SessionLockedError(f"Session {session.id} is completed; entries can no longer change")

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Not editable: {', '.join(sorted(unknown))}")
        if 'handicap_turns' in changes:
            _check_handicap(changes['handicap_turns'])
        for name in ('place', 'exit_turn'):
            if name in changes:
                _check_non_negative(name, changes[name])
        if 'player' in changes:
            changes['player'] = normalize_player_name(changes['player'])
        if 'absent' in changes:
            changes['absent'] = bool(changes['absent'])

        edited = replace(entry, **changes)
        entries = tuple(edited if e.id == entry_id else e for e in self._state.entries)
        entries = recalculate(entries, session.id)
        self._commit(replace(self._state, entries=entries), f"Updated entry {entry_id}: {sorted(changes)}")
        return next(e for e in entries if e.id == entry_id)

    def delete_entry(self, entry_id: str) -> None:
        """
        Delete one entry of an ongoing session and rescore the rest of it.

        Raises:
            UnknownEntryError: If the entry does not exist
            SessionLockedError: If the session is already completed
        """
        entry = self._require_entry(entry_id)
        session = self._state.session(entry.game_id)
        if session is not None and session.completed:
            # Rescoring now would contradict the ladder step already taken
            raise SessionLockedError(f"Session {session.id} is completed; delete the whole session instead")
        entries = tuple(e for e in self._state.entries if e.id != entry_id)
        entries = recalculate(entries, entry.game_id)
        self._commit(replace(self._state, entries=entries), f"Deleted entry {entry_id}")

    # --- League ---
    def set_house_rules(self, text: str) -> None:
        try:
            validate_input_size(text, MAX_RULES_SIZE)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        self._commit(replace(self._state, house_rules=text), "Updated house rules")

    def clear_history(self) -> None:
        """Remove every session and entry and restore the starting ladder."""
        state = replace(
            self._state,
            sessions=(),
            entries=(),
            ladder=seed_ladder(),
            seeded=True,
        )
        self._commit(state, "Cleared history and reseeded ladder")

    def leaderboard(self) -> pd.DataFrame:
        return compute_leaderboard(self._state.entries)

    def history(self) -> list[SessionResult]:
        return group_by_session(self._state.sessions, self._state.entries)
