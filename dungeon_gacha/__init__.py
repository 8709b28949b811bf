"""Dungeon gacha combat and expedition engine."""

__version__ = "0.3.0"
