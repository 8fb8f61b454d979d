"""
League Core

Modules:
- scoring: Points table for a placement and participant count
- recalculator: Keeps one session's entries consistent after edits
- ladder: Difficulty ladder transitions, seeding and roster defaults
- leaderboard: Ranked per-player statistics over the entry history
- history: Session grouping for ongoing/completed/latest views
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "points":
        from civ_league.core.scoring import points
        return points
    if name == "recalculate":
        from civ_league.core.recalculator import recalculate
        return recalculate
    if name == "advance":
        from civ_league.core.ladder import advance
        return advance
    if name == "apply_session_result":
        from civ_league.core.ladder import apply_session_result
        return apply_session_result
    if name == "compute_leaderboard":
        from civ_league.core.leaderboard import compute_leaderboard
        return compute_leaderboard
    if name == "export_leaderboard":
        from civ_league.core.leaderboard import main
        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
