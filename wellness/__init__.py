"""Wellness dashboard progress engine: XP, levels, streaks, badges and rewards"""

__version__ = "1.0.0"
