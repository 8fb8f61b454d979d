"""
Tests for the league leaderboard.
"""

import pandas as pd
import pytest

from civ_league.core.leaderboard import LEADERBOARD_COLUMNS, compute_leaderboard, main
from civ_league.models import Entry
from civ_league.store.session_store import SessionStore


def entry(eid, player, points=0, place=None, winner=False, absent=False, game="g1"):
    return Entry(id=eid, game_id=game, player=player, points=points, place=place, winner=winner, absent=absent)


class TestComputeLeaderboard:
    """Tests for per-player aggregation."""

    def test_empty(self):
        board = compute_leaderboard([])
        assert board.empty
        assert list(board.columns) == LEADERBOARD_COLUMNS

    def test_totals(self):
        entries = [
            entry("1", "A", points=10, place=1, winner=True, game="g1"),
            entry("2", "A", points=6, place=2, game="g2"),
            entry("3", "A", points=5, absent=True, game="g3"),
            entry("4", "B", points=6, place=2, game="g1"),
        ]
        board = compute_leaderboard(entries)
        a = board[board['player'] == "A"].iloc[0]
        assert a['played'] == 2
        assert a['wins'] == 1
        assert a['points'] == 21
        assert a['avg_place'] == pytest.approx(1.5)

    def test_no_placements_average_zero(self):
        board = compute_leaderboard([entry("1", "A", points=5, absent=True)])
        row = board.iloc[0]
        assert row['avg_place'] == 0.0
        assert row['played'] == 0
        assert row['points'] == 5

    def test_ongoing_unplaced_entries_count_as_played(self):
        board = compute_leaderboard([entry("1", "A"), entry("2", "A", place=3, points=3, game="g2")])
        row = board.iloc[0]
        assert row['played'] == 2
        assert row['avg_place'] == pytest.approx(3.0)

    def test_names_trimmed_and_blank_skipped(self):
        entries = [entry("1", " A ", points=3), entry("2", "A", points=2), entry("3", "   ", points=9)]
        board = compute_leaderboard(entries)
        assert board['player'].tolist() == ["A"]
        assert board.iloc[0]['points'] == 5

    def test_names_are_case_sensitive(self):
        board = compute_leaderboard([entry("1", "peter", points=1), entry("2", "Peter", points=2)])
        assert sorted(board['player'].tolist()) == ["Peter", "peter"]


class TestLeaderboardOrdering:
    """Tests for ranking order."""

    def test_points_then_average_place(self):
        entries = [
            entry("1", "player3", points=20, place=3),
            entry("2", "player2", points=20, place=2, game="g2"),
            entry("3", "player2", points=10, place=2, game="g3"),
            entry("4", "player1", points=20, place=1, game="g4"),
            entry("5", "player1", points=10, place=2, game="g5"),
        ]
        board = compute_leaderboard(entries)
        assert board['player'].tolist() == ["player1", "player2", "player3"]
        assert board['points'].tolist() == [30, 30, 20]
        assert board['avg_place'].tolist() == pytest.approx([1.5, 2.0, 3.0])

    def test_rank_column(self):
        entries = [entry("1", "A", points=1), entry("2", "B", points=5)]
        board = compute_leaderboard(entries)
        assert board['rank'].tolist() == [1, 2]
        assert board['player'].tolist() == ["B", "A"]

    def test_recomputed_from_input(self):
        entries = [entry("1", "A", points=1)]
        first = compute_leaderboard(entries)
        second = compute_leaderboard(entries + [entry("2", "A", points=4, game="g2")])
        assert first.iloc[0]['points'] == 1
        assert second.iloc[0]['points'] == 5


class TestLeaderboardExport:
    """Tests for the CSV export entry point."""

    def test_writes_csv_and_removes_stale_exports(self, tmp_path):
        store = SessionStore.open(tmp_path / "store")
        store.create_session("2025-03-01", [
            {"player": "Peter", "place": 2},
            {"player": "Ecca", "place": 1},
        ])
        out = tmp_path / "out"
        out.mkdir()
        stale = out / "leaderboard_20000101.csv"
        stale.write_text("rank,player\n", encoding="utf-8")

        board = main(store_folder=tmp_path / "store", output_folder=out)

        exports = list(out.glob("leaderboard_*.csv"))
        assert len(exports) == 1
        assert exports[0] != stale
        written = pd.read_csv(exports[0])
        assert written.columns.tolist() == LEADERBOARD_COLUMNS
        assert written['player'].tolist() == board['player'].tolist() == ["Ecca", "Peter"]

    def test_empty_store_writes_nothing(self, tmp_path):
        out = tmp_path / "out"
        board = main(store_folder=tmp_path / "store", output_folder=out)
        assert board.empty
        assert not out.exists() or list(out.glob("leaderboard_*.csv")) == []
