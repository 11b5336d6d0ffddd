"""Hacker News and GitHub trend digests."""

__version__ = "0.1.0"
