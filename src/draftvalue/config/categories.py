"""Scoring categories, default weights and strategy presets."""

from __future__ import annotations

import math
from typing import Dict, Iterable, Mapping, Tuple


HIT_CATEGORIES: Tuple[str, ...] = ("OPS", "TB", "HR", "RBI", "R", "AVG", "SB")
PIT_CATEGORIES: Tuple[str, ...] = ("IP", "QS", "K", "HLD", "SV", "ERA", "WHIP")
ALL_CATEGORIES: Tuple[str, ...] = HIT_CATEGORIES + PIT_CATEGORIES

LOWER_IS_BETTER = frozenset({"ERA", "WHIP"})

NEUTRAL_WEIGHT = 1.0

DEFAULT_WEIGHTS: Mapping[str, float] = {category: NEUTRAL_WEIGHT for category in ALL_CATEGORIES}

# Older settings stored stolen bases as net steals.
_LEGACY_KEYS = {"SBN": "SB"}

_PRESETS: Dict[str, Mapping[str, float]] = {
    "balanced": dict(DEFAULT_WEIGHTS),
    "hag": {
        "AVG": 0.0,
        "OPS": 1.3,
        "TB": 1.2,
        "HR": 1.2,
        "RBI": 1.1,
        "R": 1.1,
        "SB": 0.0,
        "ERA": 0.0,
        "WHIP": 0.0,
        "IP": 1.3,
        "QS": 1.2,
        "K": 1.2,
        "SV": 0.0,
        "HLD": 1.3,
    },
}


def categories_for(role: str) -> Tuple[str, ...]:
    """Return the category list a role is valued on."""

    return PIT_CATEGORIES if role == "pitcher" else HIT_CATEGORIES


def _as_weight(value: object, default: float) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def normalize_weights(partial: Mapping[str, object] | None = None) -> Dict[str, float]:
    """Fill a complete weight set from a partial mapping.

    Missing or non-numeric entries fall back to the default weight, and legacy
    category names are migrated to their current spelling.
    """

    source = dict(partial or {})
    for legacy, current in _LEGACY_KEYS.items():
        if legacy in source:
            legacy_value = source.pop(legacy)
            source.setdefault(current, legacy_value)

    weights = dict(DEFAULT_WEIGHTS)
    for category, default in DEFAULT_WEIGHTS.items():
        if category in source:
            weights[category] = _as_weight(source[category], default)
    return weights


def weight_for(weights: Mapping[str, float], category: str) -> float:
    """Weight lookup where unknown categories are neutral."""

    if category not in weights:
        return NEUTRAL_WEIGHT
    return _as_weight(weights[category], NEUTRAL_WEIGHT)


def weights_are_neutral(weights: Mapping[str, float], *, tolerance: float = 1e-9) -> bool:
    for category in ALL_CATEGORIES:
        if abs(weight_for(weights, category) - DEFAULT_WEIGHTS[category]) > tolerance:
            return False
    return True


def iter_presets() -> Iterable[str]:
    return _PRESETS.keys()


def get_preset(name: str) -> Dict[str, float]:
    """Fetch a named strategy preset, raising KeyError if missing."""

    key = name.lower()
    if key not in _PRESETS:
        raise KeyError(f"No weight preset named {name!r}")
    return normalize_weights(_PRESETS[key])
