"""
Difficulty Ladder

Per-player difficulty progression across completed sessions. A win moves a
player up one tier; at the top tier wins instead extend the deity streak, which
becomes extra handicap turns in later sessions. A loss moves a player down one
tier and clears the streak; the bottom tier is a floor.

Also provides the initial ladder seeding and the defaults used to pre-fill a
new session's roster.
"""

from typing import Iterable, Mapping

from civ_league.config import (
    DEFAULT_DIFFICULTY,
    DEFAULT_PLAYERS,
    DIFFICULTIES,
    MAX_HANDICAP_TURNS,
    SEED_OTHERS_DIFFICULTY,
    SEED_PLAYER,
    SEED_PLAYER_DIFFICULTY,
    SEED_PLAYER_HANDICAP,
)
from civ_league.models import Entry, PlayerLadderState

TOP_TIER = len(DIFFICULTIES) - 1
BOTTOM_TIER = 0


def tier_index(difficulty: str | None) -> int:
    """Index of a tier; missing or unrecognized tiers map to the default tier."""
    if difficulty in DIFFICULTIES:
        return DIFFICULTIES.index(difficulty)
    return DIFFICULTIES.index(DEFAULT_DIFFICULTY)


def advance(state: PlayerLadderState, won: bool) -> PlayerLadderState:
    """
    Apply one session result to a player's ladder state.

    Args:
        state: Current ladder state
        won: Whether the player won the session

    Returns:
        New ladder state
    """
    i = tier_index(state.difficulty)
    streak = state.deity_turns if i == TOP_TIER else 0

    if won:
        if i == TOP_TIER:
            streak += 1
        else:
            i = min(TOP_TIER, i + 1)
            streak = 0
    elif i != BOTTOM_TIER:
        i = max(BOTTOM_TIER, i - 1)
        streak = 0

    return PlayerLadderState(player=state.player, difficulty=DIFFICULTIES[i], deity_turns=streak)


def apply_session_result(
    ladder: Mapping[str, PlayerLadderState],
    entries: Iterable[Entry],
    session_id: str,
) -> dict[str, PlayerLadderState]:
    """
    Advance every participant of a completed session by one step.

    Absent entries and entries without a player name leave the ladder untouched.
    Players without a ladder state start at the default tier.

    Returns:
        New ladder mapping (player name -> state); the input is not modified
    """
    result = dict(ladder)
    for entry in entries:
        if entry.game_id != session_id or entry.absent or not entry.player:
            continue
        current = result.get(entry.player) or PlayerLadderState(player=entry.player)
        result[entry.player] = advance(current, entry.winner)
    return result


def default_ladder(players: Iterable[str] = DEFAULT_PLAYERS) -> dict[str, PlayerLadderState]:
    """Ladder before seeding: everyone at the default tier."""
    return {p: PlayerLadderState(player=p) for p in players}


def seed_ladder(players: Iterable[str] = DEFAULT_PLAYERS) -> dict[str, PlayerLadderState]:
    """Starting ladder: the seed player at the top tier with a streak, others at the bottom."""
    seeded = {}
    for p in players:
        if p == SEED_PLAYER:
            seeded[p] = PlayerLadderState(p, SEED_PLAYER_DIFFICULTY, SEED_PLAYER_HANDICAP)
        else:
            seeded[p] = PlayerLadderState(p, SEED_OTHERS_DIFFICULTY, 0)
    return seeded


def roster_defaults(
    players: Iterable[str],
    ladder: Mapping[str, PlayerLadderState],
    seeding: bool,
) -> list[dict]:
    """
    Pre-filled roster slots for a new session.

    Args:
        players: Player names, one slot each
        ladder: Current ladder states by player name
        seeding: True while no session has been completed yet

    Returns:
        List of roster slot dicts ready for SessionStore.create_session()
    """
    roster = []
    for p in players:
        if seeding:
            if p == SEED_PLAYER:
                difficulty, handicap = SEED_PLAYER_DIFFICULTY, SEED_PLAYER_HANDICAP
            else:
                difficulty, handicap = SEED_OTHERS_DIFFICULTY, 0
        else:
            state = ladder.get(p)
            difficulty = state.difficulty if state else DEFAULT_DIFFICULTY
            # The streak is unbounded; handicap turns are not
            handicap = min(state.deity_turns, MAX_HANDICAP_TURNS) if state else 0
        roster.append({
            'player': p,
            'leader': "",
            'difficulty': difficulty,
            'handicap_turns': handicap,
            'place': None,
            'winner': False,
            'absent': False,
            'exit_turn': None,
        })
    return roster
