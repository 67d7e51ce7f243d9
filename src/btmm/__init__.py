"""btmm - Beach Tennis Matchmaker."""

__version__ = "0.1.0"
