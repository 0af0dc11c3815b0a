"""Data models for player records and caller-owned draft state."""

from .player import Anchors, PlayerRecord, Role, RosterEntry, Target, TargetTier

__all__ = [
    "Anchors",
    "PlayerRecord",
    "Role",
    "RosterEntry",
    "Target",
    "TargetTier",
]
