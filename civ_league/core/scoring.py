"""
Scoring Table

Maps a placement and participant count to league points. Absent players bypass
the table and always receive ABSENT_POINTS.
"""

from civ_league.config import ABSENT_POINTS, FALLBACK_PARTICIPANTS, POINTS_TABLES


def points(placement: int | None, participant_count: int) -> int:
    """
    Points for finishing at `placement` among `participant_count` players.

    Unlisted participant counts use the 4-player table; placements outside the
    table (including 0 and None, meaning unplaced) score 0.
    """
    table = POINTS_TABLES.get(participant_count, POINTS_TABLES[FALLBACK_PARTICIPANTS])
    if not placement or placement < 0 or placement >= len(table):
        return 0
    return table[placement]


def absent_points() -> int:
    return ABSENT_POINTS
