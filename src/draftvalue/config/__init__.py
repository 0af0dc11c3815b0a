"""Configuration tables for scoring categories and roster slots."""

from .categories import (
    ALL_CATEGORIES,
    DEFAULT_WEIGHTS,
    HIT_CATEGORIES,
    LOWER_IS_BETTER,
    NEUTRAL_WEIGHT,
    PIT_CATEGORIES,
    categories_for,
    get_preset,
    iter_presets,
    normalize_weights,
    weight_for,
    weights_are_neutral,
)
from .roster import (
    DEFAULT_LEAGUE,
    LeagueSlots,
    RosterSlot,
    SlotBoosts,
    SlotKind,
    get_slots,
    get_slots_by_key,
    iter_leagues,
)

__all__ = [
    "ALL_CATEGORIES",
    "DEFAULT_LEAGUE",
    "DEFAULT_WEIGHTS",
    "HIT_CATEGORIES",
    "LOWER_IS_BETTER",
    "NEUTRAL_WEIGHT",
    "PIT_CATEGORIES",
    "LeagueSlots",
    "RosterSlot",
    "SlotBoosts",
    "SlotKind",
    "categories_for",
    "get_preset",
    "get_slots",
    "get_slots_by_key",
    "iter_leagues",
    "iter_presets",
    "normalize_weights",
    "weight_for",
    "weights_are_neutral",
]
