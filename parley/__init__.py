"""Parley: a turn-by-turn agent core that pauses tool calls until missing parameters arrive."""

__version__ = "1.0.0"
