"""
Civ League - Core Package

This package contains the core modules for:
- Session scoring, recalculation, difficulty ladder and leaderboard (civ_league.core)
- Session storage and persistence (civ_league.store)
- Shared configuration and utilities
"""

from civ_league.config import *
