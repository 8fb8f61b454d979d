"""
Session Store

Modules:
- state: Immutable snapshot of all league collections
- persistence: JSON file repository for the snapshot
- session_store: SessionStore, the only place state changes happen
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "SessionStore":
        from civ_league.store.session_store import SessionStore
        return SessionStore
    if name == "LeagueState":
        from civ_league.store.state import LeagueState
        return LeagueState
    if name == "JsonRepository":
        from civ_league.store.persistence import JsonRepository
        return JsonRepository
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
