"""Player valuation: baselines, strategy weighting and adjusted prices."""

from .components import (
    DEFAULT_MIN_SAMPLES,
    apply_components,
    has_category_stats,
    percentile_components,
)
from .pricing import (
    DEFAULT_DELTA_CAP,
    DEFAULT_STRATEGY_CAP,
    PricingBreakdown,
    baseline_value,
    clamp,
    compute_adjusted_price,
    market_estimate,
    price_target,
    projection_baseline,
    weighted_value,
)

__all__ = [
    "DEFAULT_DELTA_CAP",
    "DEFAULT_MIN_SAMPLES",
    "DEFAULT_STRATEGY_CAP",
    "PricingBreakdown",
    "apply_components",
    "baseline_value",
    "clamp",
    "compute_adjusted_price",
    "has_category_stats",
    "market_estimate",
    "percentile_components",
    "price_target",
    "projection_baseline",
    "weighted_value",
]
