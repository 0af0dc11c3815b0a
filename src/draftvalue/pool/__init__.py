"""Player pool utilities (building, eligibility, scoring, budget, export)."""

from .budget import (
    BidPower,
    PricedTarget,
    SpendBuckets,
    TierTotals,
    auto_max_bid,
    planned_spend,
    price_targets,
    sort_targets,
    target_from_record,
    tier_from_number,
    tier_summary,
)
from .eligibility import eligible_slots, empty_slot_ids, is_eligible, need_boost, slot_hint
from .export import export_recommendations_to_csv, export_targets_to_csv
from .player_pool import PlayerPool, build_pool
from .scoring import (
    ScoreCriteria,
    ScoredPlayer,
    ScoreResult,
    fit_raw,
    normalize_fit,
    reference_price,
    score_candidates,
)

__all__ = [
    "BidPower",
    "PlayerPool",
    "PricedTarget",
    "ScoreCriteria",
    "ScoreResult",
    "ScoredPlayer",
    "SpendBuckets",
    "TierTotals",
    "auto_max_bid",
    "build_pool",
    "eligible_slots",
    "empty_slot_ids",
    "export_recommendations_to_csv",
    "export_targets_to_csv",
    "fit_raw",
    "is_eligible",
    "need_boost",
    "normalize_fit",
    "planned_spend",
    "price_targets",
    "reference_price",
    "score_candidates",
    "slot_hint",
    "sort_targets",
    "target_from_record",
    "tier_from_number",
    "tier_summary",
]
