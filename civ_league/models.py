"""
League Records

Immutable records passed between the session store and the core:
- Session: one played match
- Entry: one player's participation in one session
- PlayerLadderState: a player's current difficulty tier and deity streak

Dictionary forms use the field names of the stored JSON collections
(`game_id`, `place`, `deity_turns`, ...).
"""

from dataclasses import asdict, dataclass
from typing import Optional

from civ_league.config import DEFAULT_DIFFICULTY, DIFFICULTIES


def _optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Session:
    """
    One played match.

    Attributes:
        id: Opaque unique identifier
        played_at: Date played (YYYY-MM-DD)
        turns: Total turn count, if recorded
        notes: Free-text note
        completed: One-way flag; set when results are final
    """

    id: str
    played_at: str
    turns: Optional[int] = None
    notes: Optional[str] = None
    completed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            id=str(data["id"]),
            played_at=str(data.get("played_at") or ""),
            turns=_optional_int(data.get("turns")),
            notes=data.get("notes") or None,
            completed=bool(data.get("completed")),
        )


@dataclass(frozen=True)
class Entry:
    """
    One player's participation record within exactly one session.

    `points` and `winner` are derived by the session recalculator; `difficulty`
    is a snapshot taken when the session was created, not the ladder state.

    Attributes:
        id: Opaque unique identifier
        game_id: Owning session identifier
        player: Player name, matched by exact string
        leader: Leader/civilization label
        difficulty: Difficulty tier snapshot
        handicap_turns: Extra turns granted before the session
        place: 1-based placement among participants, or None
        points: Computed points
        winner: Computed winner flag
        absent: Player sat the session out
        exit_turn: Turn of elimination, if any
    """

    id: str
    game_id: str
    player: str
    leader: Optional[str] = None
    difficulty: Optional[str] = None
    handicap_turns: int = 0
    place: Optional[int] = None
    points: int = 0
    winner: bool = False
    absent: bool = False
    exit_turn: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        return cls(
            id=str(data["id"]),
            game_id=str(data["game_id"]),
            player=str(data.get("player") or ""),
            leader=data.get("leader") or None,
            difficulty=data.get("difficulty") or None,
            handicap_turns=_optional_int(data.get("handicap_turns")) or 0,
            place=_optional_int(data.get("place")),
            points=_optional_int(data.get("points")) or 0,
            winner=bool(data.get("winner")),
            absent=bool(data.get("absent")),
            exit_turn=_optional_int(data.get("exit_turn")),
        )


@dataclass(frozen=True)
class PlayerLadderState:
    """
    A player's position on the difficulty ladder.

    `deity_turns` counts consecutive wins at the top tier and is zero
    everywhere else.
    """

    player: str
    difficulty: str = DEFAULT_DIFFICULTY
    deity_turns: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerLadderState":
        difficulty = data.get("difficulty")
        if difficulty not in DIFFICULTIES:
            difficulty = DEFAULT_DIFFICULTY
        deity_turns = _optional_int(data.get("deity_turns")) or 0
        if difficulty != DIFFICULTIES[-1]:
            deity_turns = 0
        return cls(
            player=str(data.get("player") or ""),
            difficulty=difficulty,
            deity_turns=max(0, deity_turns),
        )
