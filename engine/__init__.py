"""Core engine package for Eleven."""

__all__ = [
    "cards",
    "deck",
    "rules",
    "rules_schema",
    "state",
    "scoring",
    "game",
    "service",
]
