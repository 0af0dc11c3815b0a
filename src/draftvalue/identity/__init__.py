"""Player identity: normalization, canonical keys, dedupe and lookup."""

from .keys import (
    UNKNOWN_ROLE,
    has_diacritics,
    invert_name,
    loose_name,
    normalize_name,
    player_key,
    role_from_token,
    role_token,
    strip_diacritics,
)
from .lookup import PlayerIndex
from .merge import MergeReport, merge_group, merge_records

__all__ = [
    "UNKNOWN_ROLE",
    "MergeReport",
    "PlayerIndex",
    "has_diacritics",
    "invert_name",
    "loose_name",
    "merge_group",
    "merge_records",
    "normalize_name",
    "player_key",
    "role_from_token",
    "role_token",
    "strip_diacritics",
]
