"""Leaderboard core: games, scores, pagination and the delete cascade."""
