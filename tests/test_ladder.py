"""
Tests for the difficulty ladder.
"""

import pytest

from civ_league.config import DIFFICULTIES, MAX_HANDICAP_TURNS
from civ_league.core.ladder import (
    advance,
    apply_session_result,
    default_ladder,
    roster_defaults,
    seed_ladder,
    tier_index,
)
from civ_league.models import Entry, PlayerLadderState


def state(difficulty, deity_turns=0, player="P"):
    return PlayerLadderState(player=player, difficulty=difficulty, deity_turns=deity_turns)


class TestAdvance:
    """Tests for single ladder transitions."""

    def test_win_at_bottom_moves_up_one(self):
        assert advance(state("Settler"), True) == state("Chieftain", 0)

    def test_loss_at_bottom_stays(self):
        assert advance(state("Settler"), False) == state("Settler", 0)

    def test_win_below_top(self):
        assert advance(state("Prince"), True) == state("King", 0)

    def test_win_to_top_starts_without_streak(self):
        assert advance(state("Immortal"), True) == state("Deity", 0)

    def test_repeated_wins_at_top_increment_streak(self):
        s = state("Deity", 0)
        for expected in range(1, 4):
            s = advance(s, True)
            assert s == state("Deity", expected)

    def test_loss_at_top_drops_and_resets_streak(self):
        assert advance(state("Deity", 3), False) == state("Immortal", 0)

    @pytest.mark.parametrize("difficulty", DIFFICULTIES[1:])
    def test_loss_drops_exactly_one_tier(self, difficulty):
        i = DIFFICULTIES.index(difficulty)
        assert advance(state(difficulty), False).difficulty == DIFFICULTIES[i - 1]

    def test_unknown_tier_treated_as_default(self):
        assert advance(state("Grandmaster"), True).difficulty == "King"

    def test_stray_streak_below_top_is_cleared(self):
        assert advance(state("Warlord", 2), False) == state("Chieftain", 0)

    def test_keeps_player_name(self):
        assert advance(state("Prince", player="Ecca"), True).player == "Ecca"


class TestTierIndex:
    """Tests for tier lookup."""

    def test_known(self):
        assert tier_index("Deity") == 7

    def test_missing_defaults_to_prince(self):
        assert tier_index(None) == 3
        assert tier_index("nope") == 3


class TestApplySessionResult:
    """Tests for applying a completed session to the ladder."""

    def make_entries(self):
        return [
            Entry(id="1", game_id="g1", player="A", place=1, winner=True, points=10),
            Entry(id="2", game_id="g1", player="B", place=2, points=6),
            Entry(id="3", game_id="g1", player="C", absent=True, points=5),
            Entry(id="4", game_id="g2", player="D", place=1, winner=True, points=10),
        ]

    def test_winner_and_loser(self):
        ladder = {"A": state("Prince", player="A"), "B": state("Settler", player="B")}
        result = apply_session_result(ladder, self.make_entries(), "g1")
        assert result["A"] == state("King", player="A")
        assert result["B"] == state("Settler", player="B")

    def test_absent_untouched(self):
        ladder = {"C": state("Emperor", player="C")}
        result = apply_session_result(ladder, self.make_entries(), "g1")
        assert result["C"] == state("Emperor", player="C")

    def test_other_session_ignored(self):
        result = apply_session_result({}, self.make_entries(), "g1")
        assert "D" not in result

    def test_unknown_player_seeded_at_default(self):
        result = apply_session_result({}, self.make_entries(), "g1")
        assert result["A"] == state("King", player="A")
        assert result["B"] == state("Warlord", player="B")

    def test_input_not_modified(self):
        ladder = {"A": state("Prince", player="A")}
        apply_session_result(ladder, self.make_entries(), "g1")
        assert ladder == {"A": state("Prince", player="A")}

    def test_blank_player_skipped(self):
        entries = [Entry(id="1", game_id="g1", player="", place=1, winner=True)]
        assert apply_session_result({}, entries, "g1") == {}


class TestSeeding:
    """Tests for the starting ladder."""

    def test_seed_player_at_deity(self):
        ladder = seed_ladder(["Peter", "Ecca"])
        assert ladder["Ecca"] == state("Deity", 1, player="Ecca")
        assert ladder["Peter"] == state("Settler", 0, player="Peter")

    def test_default_ladder_at_prince(self):
        ladder = default_ladder(["Peter", "Jocke"])
        assert all(s.difficulty == "Prince" and s.deity_turns == 0 for s in ladder.values())


class TestRosterDefaults:
    """Tests for new-session roster pre-fill."""

    def test_seeding_mode(self):
        roster = roster_defaults(["Peter", "Ecca"], {}, seeding=True)
        assert [(r["difficulty"], r["handicap_turns"]) for r in roster] == [("Settler", 0), ("Deity", 1)]

    def test_from_ladder(self):
        ladder = {"Ecca": state("Deity", 3, player="Ecca"), "Peter": state("King", player="Peter")}
        roster = roster_defaults(["Peter", "Ecca", "Macce"], ladder, seeding=False)
        assert [(r["difficulty"], r["handicap_turns"]) for r in roster] == [
            ("King", 0), ("Deity", 3), ("Prince", 0)
        ]

    def test_handicap_capped(self):
        ladder = {"Ecca": state("Deity", 14, player="Ecca")}
        roster = roster_defaults(["Ecca"], ladder, seeding=False)
        assert roster[0]["handicap_turns"] == MAX_HANDICAP_TURNS

    def test_slot_shape(self):
        slot = roster_defaults(["Peter"], {}, seeding=False)[0]
        assert slot["player"] == "Peter"
        assert slot["place"] is None
        assert slot["absent"] is False
