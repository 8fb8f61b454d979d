"""
Tests for the scoring table.
"""

import pytest

from civ_league.config import ABSENT_POINTS
from civ_league.core.scoring import absent_points, points


class TestPointsTable:
    """Tests for points() with listed participant counts."""

    @pytest.mark.parametrize("placement, expected", [(1, 10), (2, 6)])
    def test_two_players(self, placement, expected):
        assert points(placement, 2) == expected

    @pytest.mark.parametrize("placement, expected", [(1, 10), (2, 6), (3, 3)])
    def test_three_players(self, placement, expected):
        assert points(placement, 3) == expected

    @pytest.mark.parametrize("placement, expected", [(1, 10), (2, 6), (3, 3), (4, 1)])
    def test_four_players(self, placement, expected):
        assert points(placement, 4) == expected


class TestPointsDefaults:
    """Tests for combinations outside the tables."""

    def test_unplaced_scores_zero(self):
        assert points(0, 3) == 0

    def test_none_scores_zero(self):
        assert points(None, 4) == 0

    def test_placement_beyond_table(self):
        assert points(3, 2) == 0
        assert points(5, 4) == 0

    def test_negative_placement(self):
        assert points(-1, 4) == 0

    def test_unknown_count_uses_four_player_table(self):
        assert points(4, 6) == 1
        assert points(1, 1) == 10
        assert points(2, 0) == 6


class TestAbsentPoints:
    """Tests for the fixed absence value."""

    def test_fixed_value(self):
        assert absent_points() == ABSENT_POINTS == 5
