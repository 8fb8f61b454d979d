"""
JSON File Repository

Persists a LeagueState as one JSON file per collection inside a folder:
- civ_games.json: list of sessions
- civ_entries.json: list of entries
- civ_players_state.json: list of ladder states
- civ_house_rules.json: house rules text
- civ_seed_done.json: whether the starting ladder was applied

Reads are forgiving: a missing or unreadable file falls back to its default
value. Writes are atomic per file.
"""

import json
from pathlib import Path

from civ_league.config import SEED_KEY, STORE_FOLDER, STORE_KEYS
from civ_league.core.ladder import default_ladder
from civ_league.models import Entry, PlayerLadderState, Session
from civ_league.store.state import LeagueState
from civ_league.utils import atomic_write_json, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class JsonRepository:
    """Loads and saves league snapshots under `folder`."""

    def __init__(self, folder: Path | None = None):
        self.folder = Path(folder) if folder is not None else STORE_FOLDER

    def _path(self, key: str) -> Path:
        return self.folder / f"{key}.json"

    def _load(self, key: str, fallback):
        path = self._path(key)
        if not path.exists():
            return fallback
        try:
            with open(path, encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read {path}, using default: {e}")
            return fallback

    def _parse_rows(self, rows, parse, key: str) -> tuple:
        """Parse stored records one by one; a malformed row is skipped, not the collection."""
        if not isinstance(rows, list):
            logger.warning(f"Expected a list in {self._path(key)}, using default")
            return ()
        parsed = []
        for i, row in enumerate(rows):
            try:
                parsed.append(parse(row))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed record {i} in {self._path(key)}: {e!r}")
        return tuple(parsed)

    def load(self) -> LeagueState:
        """Read the stored snapshot, defaulting anything missing."""
        games = self._load(STORE_KEYS['games'], [])
        entries = self._load(STORE_KEYS['entries'], [])
        players = self._load(STORE_KEYS['players'], None)
        rules = self._load(STORE_KEYS['rules'], "")
        seeded = self._load(SEED_KEY, False)

        sessions = self._parse_rows(games, Session.from_dict, STORE_KEYS['games'])
        entry_rows = self._parse_rows(entries, Entry.from_dict, STORE_KEYS['entries'])

        if isinstance(players, list):
            ladder = {}
            for row in players:
                if isinstance(row, dict):
                    state = PlayerLadderState.from_dict(row)
                    if state.player:
                        ladder[state.player] = state
        else:
            ladder = default_ladder()

        return LeagueState(
            sessions=sessions,
            entries=entry_rows,
            ladder=ladder,
            house_rules=rules if isinstance(rules, str) else "",
            seeded=seeded is True,
        )

    def save(self, state: LeagueState) -> None:
        """Write every collection of `state`."""
        atomic_write_json([s.to_dict() for s in state.sessions], self._path(STORE_KEYS['games']))
        atomic_write_json([e.to_dict() for e in state.entries], self._path(STORE_KEYS['entries']))
        atomic_write_json([p.to_dict() for p in state.ladder.values()], self._path(STORE_KEYS['players']))
        atomic_write_json(state.house_rules, self._path(STORE_KEYS['rules']))
        atomic_write_json(state.seeded, self._path(SEED_KEY))
        logger.debug(
            f"Saved {len(state.sessions)} sessions, {len(state.entries)} entries, "
            f"{len(state.ladder)} players to {self.folder}"
        )
