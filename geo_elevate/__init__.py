"""geo-elevate progression core: daily XP, streaks and fact progress"""

__version__ = "0.1.0"
