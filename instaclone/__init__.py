"""Instaclone: photo sharing backend (feed, posts, likes, comments, follows)."""

__version__ = "1.0.0"
