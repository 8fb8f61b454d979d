"""
Central configuration for the Civ League tracker.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
STORE_FOLDER = DATA_FOLDER / "store"
OUTPUT_FOLDER = DATA_FOLDER / "processed"

# --- Difficulty Ladder ---
# Ordered lowest to highest
DIFFICULTIES = (
    "Settler",
    "Chieftain",
    "Warlord",
    "Prince",
    "King",
    "Emperor",
    "Immortal",
    "Deity",
)
DEFAULT_DIFFICULTY = "Prince"  # Unknown players and unrecognized tiers land here

# --- Scoring ---
# Indexed by placement; index 0 is "unplaced"
POINTS_TABLES = {
    2: (0, 10, 6),
    3: (0, 10, 6, 3),
    4: (0, 10, 6, 3, 1),
}
FALLBACK_PARTICIPANTS = 4  # Table used for any unlisted participant count
ABSENT_POINTS = 5  # Fixed points for a player who sat the session out

# --- Roster ---
DEFAULT_PLAYERS = ("Peter", "Jocke", "Macce", "Ecca")
SEED_PLAYER = "Ecca"
SEED_PLAYER_DIFFICULTY = "Deity"
SEED_PLAYER_HANDICAP = 1
SEED_OTHERS_DIFFICULTY = "Settler"
MAX_HANDICAP_TURNS = 10
MAX_PLACEMENT = 4

# --- Views ---
LATEST_RESULTS_LIMIT = 10

# --- Storage ---
STORE_KEYS = {
    "games": "civ_games",
    "entries": "civ_entries",
    "players": "civ_players_state",
    "rules": "civ_house_rules",
}
SEED_KEY = "civ_seed_done"
LEADERBOARD_PATTERN = "leaderboard_*.csv"

# --- Input Validation ---
MAX_NOTE_SIZE = 2_000  # Session notes
MAX_RULES_SIZE = 20_000  # House rules text
