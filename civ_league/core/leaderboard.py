"""
League Leaderboard

This module reduces the full entry history (completed and ongoing sessions)
into ranked per-player statistics:
- played: sessions attended (absences excluded)
- wins: entries flagged as winner
- points: total points, absence points included
- avg_place: mean of recorded placements (0 when none)

Players are ranked by points (descending), ties broken by average placement
(ascending). Nothing is cached; every call reads the entries it is given.

Usage:
    python -m civ_league.core.leaderboard
    OR
    from civ_league.core import compute_leaderboard
"""

import sys
from pathlib import Path

# Enable both `python civ_league/core/leaderboard.py` and `python -m civ_league.core.leaderboard`.
# Required for civ_league.config/civ_league.utils imports to resolve correctly.
_project_root = str(Path(__file__).parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from datetime import datetime
from typing import Iterable

import pandas as pd

from civ_league.config import LEADERBOARD_PATTERN, OUTPUT_FOLDER
from civ_league.models import Entry
from civ_league.utils import atomic_write_csv, cleanup_old_files, normalize_player_name, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

LEADERBOARD_COLUMNS = ['rank', 'player', 'played', 'wins', 'points', 'avg_place']


def entries_to_frame(entries: Iterable[Entry]) -> pd.DataFrame:
    """Flatten entries into a DataFrame with one row per entry."""
    rows = [e.to_dict() for e in entries]
    columns = list(Entry.__dataclass_fields__)
    return pd.DataFrame(rows, columns=columns)


def compute_leaderboard(entries: Iterable[Entry]) -> pd.DataFrame:
    """
    Compute the ranked leaderboard.

    Args:
        entries: Every entry in the history

    Returns:
        DataFrame with columns: rank, player, played, wins, points, avg_place
    """
    df = entries_to_frame(entries)
    df['player'] = df['player'].map(normalize_player_name)
    df = df[df['player'] != '']

    if df.empty:
        return pd.DataFrame(columns=LEADERBOARD_COLUMNS)

    df = df.assign(
        played=(~df['absent'].astype(bool)).astype(int),
        wins=df['winner'].astype(bool).astype(int),
        points=pd.to_numeric(df['points'], errors='coerce').fillna(0).astype(int),
    )
    place = pd.to_numeric(df['place'], errors='coerce')
    df['place'] = place.where(place > 0)

    # sort=False keeps first-appearance order for fully tied players
    board = df.groupby('player', sort=False).agg(
        played=('played', 'sum'),
        wins=('wins', 'sum'),
        points=('points', 'sum'),
        avg_place=('place', 'mean'),
    ).reset_index()
    board['avg_place'] = board['avg_place'].fillna(0.0)

    board = board.sort_values(
        ['points', 'avg_place'],
        ascending=[False, True],
        kind='stable',
    ).reset_index(drop=True)
    board['rank'] = board.index + 1

    return board[LEADERBOARD_COLUMNS]


def main(store_folder=None, output_folder=None):
    from civ_league.store.session_store import SessionStore

    output_folder = output_folder or OUTPUT_FOLDER
    store = SessionStore.open(store_folder)
    leaderboard = compute_leaderboard(store.state.entries)

    if leaderboard.empty:
        logger.warning("No entries recorded; nothing to export")
        return leaderboard

    logger.info("League Table:")
    logger.info("\n" + leaderboard.to_string(index=False))

    stamp = datetime.now().strftime('%Y%m%d')
    output_csv = output_folder / LEADERBOARD_PATTERN.replace('*', stamp)
    atomic_write_csv(leaderboard, output_csv, index=False)
    cleanup_old_files(LEADERBOARD_PATTERN, keep_file=output_csv, folder=output_folder)
    logger.info(f"Exported leaderboard: {output_csv}")

    return leaderboard


if __name__ == "__main__":
    main()
