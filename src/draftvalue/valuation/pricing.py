"""Baseline selection, strategy weighting and the capped delta model.

Pricing runs in three steps:

* pick a baseline dollar value from the record's anchors,
* scale it by the caller's category weights (strategy value),
* combine the market delta (baseline vs. the caller's plan) with the
  strategy delta, each capped, into an adjusted bid price.

Every function here is total: missing or malformed numbers fall back to
defined values instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Optional

from draftvalue.config.categories import categories_for, weight_for
from draftvalue.config_loader import ValueMode, parse_value_mode
from draftvalue.models import PlayerRecord, Target


DEFAULT_STRATEGY_CAP = 6.0
DEFAULT_DELTA_CAP = 15.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _finite(value: object, default: float = 0.0) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def projection_baseline(record: PlayerRecord) -> float:
    anchors = record.anchors
    if anchors.projection is not None:
        return max(0.0, anchors.projection)
    if anchors.prior_year is not None:
        return max(0.0, anchors.prior_year)
    return 0.0


def market_estimate(record: PlayerRecord) -> Optional[float]:
    market = record.anchors.market
    if market is None:
        return None
    return max(0.0, market)


def baseline_value(record: PlayerRecord, mode: ValueMode | str = "projection") -> float:
    """Return the anchor the pricing model starts from; never negative."""

    if parse_value_mode(mode) == "market":
        market = market_estimate(record)
        if market is not None and market > 0:
            return market
    return projection_baseline(record)


def weighted_value(
    record: PlayerRecord,
    weights: Mapping[str, float],
    *,
    has_category_stats: bool = True,
    baseline: float | None = None,
) -> float:
    """Scale the baseline by the ratio of weighted to unweighted category totals."""

    base = baseline_value(record) if baseline is None else max(0.0, _finite(baseline))
    if not has_category_stats:
        return base

    raw_sum = 0.0
    weighted_sum = 0.0
    contributed = False
    for category in categories_for(record.role):
        value = record.category_stats.get(category)
        if value is None or not math.isfinite(value):
            continue
        weight = weight_for(weights, category)
        if weight == 0:
            continue
        contributed = True
        raw_sum += value
        weighted_sum += value * weight

    if not contributed or raw_sum == 0:
        return base
    scaled = base * (weighted_sum / raw_sum)
    if not math.isfinite(scaled):
        return base
    return max(0.0, scaled)


@dataclass(frozen=True)
class PricingBreakdown:
    baseline: float
    weighted_value: float
    plan: float
    market_delta: float
    strategy_delta: float
    total_delta: float
    adjusted_price: float

    def capped(self, hard_max: float | None) -> float:
        """Adjusted price limited by a hard ceiling when one is set."""

        if hard_max is None or hard_max <= 0:
            return self.adjusted_price
        return min(self.adjusted_price, hard_max)


def compute_adjusted_price(
    baseline: float,
    weighted_value: float,
    plan: float,
    *,
    strategy_cap: float = DEFAULT_STRATEGY_CAP,
    delta_cap: float = DEFAULT_DELTA_CAP,
) -> PricingBreakdown:
    plan_value = _finite(plan)
    base = _finite(baseline)
    weighted = _finite(weighted_value, base)
    # Anchor-less players price off the plan with no strategy move.
    if base <= 0:
        base = plan_value
        weighted = plan_value
    strategy_cap = abs(_finite(strategy_cap, DEFAULT_STRATEGY_CAP))
    delta_cap = abs(_finite(delta_cap, DEFAULT_DELTA_CAP))

    market_delta = base - plan_value
    strategy_delta = clamp(weighted - base, -strategy_cap, strategy_cap)
    total_delta = clamp(market_delta + strategy_delta, -delta_cap, delta_cap)
    return PricingBreakdown(
        baseline=base,
        weighted_value=weighted,
        plan=plan_value,
        market_delta=market_delta,
        strategy_delta=strategy_delta,
        total_delta=total_delta,
        adjusted_price=base + total_delta,
    )


def price_target(
    target: Target,
    record: PlayerRecord | None,
    weights: Mapping[str, float],
    *,
    mode: ValueMode | str = "projection",
    has_category_stats: bool = True,
    strategy_cap: float = DEFAULT_STRATEGY_CAP,
    delta_cap: float = DEFAULT_DELTA_CAP,
) -> PricingBreakdown:
    """Price a caller target; a target with no matching record prices off its plan."""

    if record is None:
        return compute_adjusted_price(
            0.0, target.plan, target.plan, strategy_cap=strategy_cap, delta_cap=delta_cap
        )
    base = baseline_value(record, mode)
    weighted = weighted_value(record, weights, has_category_stats=has_category_stats, baseline=base)
    return compute_adjusted_price(
        base,
        weighted,
        target.plan,
        strategy_cap=strategy_cap,
        delta_cap=delta_cap,
    )
