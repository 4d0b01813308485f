"""Client for the points ledger: leaderboard, claims and activity history."""

__version__ = "1.0.0"
